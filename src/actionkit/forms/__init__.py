"""Form engine: multi-turn slot filling driven by a FormHandler."""

from actionkit.forms.action import FormAction
from actionkit.forms.context import FormContext
from actionkit.forms.handler import FormHandler
from actionkit.forms.intents import IntentFilter, allow, block
from actionkit.forms.mappers import (
    FromEntity,
    FromIntent,
    FromText,
    FromTriggerIntent,
    SlotMapper,
    SlotMappings,
    parse_mapper,
)
from actionkit.forms.validation import (
    AskForSlotAction,
    FormSlotValidator,
    FormValidationAction,
    SlotAsker,
)
from actionkit.forms.validators import (
    DefaultValidator,
    FunctionValidator,
    PredicateValidator,
    SlotValidator,
    ValidatorRegistry,
)

__all__ = [
    "AskForSlotAction",
    "DefaultValidator",
    "FormAction",
    "FormContext",
    "FormHandler",
    "FormSlotValidator",
    "FormValidationAction",
    "FromEntity",
    "FromIntent",
    "FromText",
    "FromTriggerIntent",
    "FunctionValidator",
    "IntentFilter",
    "PredicateValidator",
    "SlotAsker",
    "SlotMapper",
    "SlotMappings",
    "SlotValidator",
    "ValidatorRegistry",
    "allow",
    "block",
    "parse_mapper",
]
