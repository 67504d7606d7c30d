"""actionkit - SDK for custom action servers of a dialogue engine.

The dialogue engine calls the action server over a webhook to run
application logic. actionkit deserializes the request, routes it to a
registered action and serializes the resulting events and messages. Its
core is the form engine, which drives multi-turn slot filling.

Quick start:
    from actionkit import ActionExecutor, ActionRegistry, FormAction, FormHandler

    class RestaurantForm(FormHandler):
        def form_name(self):
            return "restaurant_form"

        def required_slots(self, ctx):
            return ["cuisine", "num_people"]

        async def submit(self, ctx, dispatcher):
            dispatcher.utter_message(template="utter_submit")
            return []

    executor = ActionExecutor(ActionRegistry([FormAction(RestaurantForm())]))
    body = await executor.execute_payload(payload)
"""

from actionkit.__version__ import __version__
from actionkit.actions import Action, ActionExecutor, ActionRegistry, ActionRequest, ActionResponse
from actionkit.core import (
    ActionContext,
    ActiveLoop,
    CollectingDispatcher,
    Event,
    Message,
    SlotSet,
    Tracker,
)
from actionkit.core.constants import LOOP_INTERRUPTED_KEY, REQUESTED_SLOT
from actionkit.core.errors import (
    ActionError,
    ActionKitError,
    ConfigError,
    ExecutionRejection,
    HandlerError,
    InvalidRequestError,
    MissingHandlerError,
    SlotValidationError,
    ValidationError,
)
from actionkit.forms import (
    FormAction,
    FormContext,
    FormHandler,
    FromEntity,
    FromIntent,
    FromText,
    FromTriggerIntent,
    IntentFilter,
)
from actionkit.forms.config import ConfiguredForm, build_forms

__all__ = [
    "__version__",
    # Actions
    "Action",
    "ActionContext",
    "ActionExecutor",
    "ActionRegistry",
    "ActionRequest",
    "ActionResponse",
    "CollectingDispatcher",
    "Message",
    # Conversation state
    "ActiveLoop",
    "Event",
    "SlotSet",
    "Tracker",
    "LOOP_INTERRUPTED_KEY",
    "REQUESTED_SLOT",
    # Forms
    "ConfiguredForm",
    "FormAction",
    "FormContext",
    "FormHandler",
    "FromEntity",
    "FromIntent",
    "FromText",
    "FromTriggerIntent",
    "IntentFilter",
    "build_forms",
    # Errors
    "ActionError",
    "ActionKitError",
    "ConfigError",
    "ExecutionRejection",
    "HandlerError",
    "InvalidRequestError",
    "MissingHandlerError",
    "SlotValidationError",
    "ValidationError",
]
