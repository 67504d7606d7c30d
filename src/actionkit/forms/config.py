"""Forms declared in configuration instead of code."""

from actionkit.config.models import ActionKitConfig, FormConfig
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.errors import ConfigError
from actionkit.core.events import Event
from actionkit.forms.action import FormAction
from actionkit.forms.context import FormContext
from actionkit.forms.handler import FormHandler
from actionkit.forms.mappers import SlotMapper
from actionkit.forms.validators import DefaultValidator, PredicateValidator, SlotValidator, ValidatorRegistry


class ConfiguredForm(FormHandler):
    """Form handler driven by a FormConfig.

    Validators are looked up by name in the ValidatorRegistry, so they must
    be registered before the form is built.
    """

    def __init__(self, name: str, config: FormConfig):
        self._name = name
        self.config = config
        self._mappings = config.mappings()

        missing = [v for v in config.validators.values() if not ValidatorRegistry.is_registered(v)]
        if missing:
            raise ConfigError(f"Form '{name}' uses unregistered validator(s): {sorted(missing)}")

    def form_name(self) -> str:
        return self._name

    def required_slots(self, ctx: FormContext) -> list[str]:
        return list(self.config.required_slots)

    def slot_mappings(self) -> dict[str, list[SlotMapper]]:
        return self._mappings

    def validator(self, slot: str) -> SlotValidator:
        name = self.config.validators.get(slot)
        if name is None:
            return DefaultValidator(slot)
        return PredicateValidator(slot, name, self.config.validation_error_templates.get(slot))

    async def submit(self, ctx: FormContext, dispatcher: CollectingDispatcher) -> list[Event]:
        if self.config.submit_template:
            dispatcher.utter_message(template=self.config.submit_template)
        return []


def build_forms(config: ActionKitConfig) -> list[FormAction]:
    """Build a FormAction for every form in the configuration."""
    return [FormAction(ConfiguredForm(name, form)) for name, form in config.forms.items()]
