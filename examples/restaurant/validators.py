"""Domain-specific validators for the restaurant example."""

from actionkit.forms.validators import ValidatorRegistry

CUISINES = {"caribbean", "chinese", "french", "greek", "indian", "italian", "mexican"}


@ValidatorRegistry.register("cuisine")
def validate_cuisine(value: str) -> bool:
    return isinstance(value, str) and value.lower() in CUISINES
