"""Form handler interface implemented by applications."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from actionkit.core.constants import REQUESTED_SLOT
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.errors import ExecutionRejection
from actionkit.core.events import Event
from actionkit.forms.mappers import SlotMapper
from actionkit.forms.validators import DefaultValidator, SlotValidator

if TYPE_CHECKING:
    from actionkit.forms.context import FormContext


class FormHandler(ABC):
    """
    Business logic of a form.

    Subclasses must implement ``form_name``, ``required_slots`` and
    ``submit``. Every other method is an optional hook with a default
    implementation that can be overridden.

    Usage:
        class RestaurantForm(FormHandler):
            def form_name(self) -> str:
                return "restaurant_form"

            def required_slots(self, ctx):
                return ["cuisine", "num_people"]

            async def submit(self, ctx, dispatcher):
                dispatcher.utter_message(template="utter_submit")
                return []
    """

    @abstractmethod
    def form_name(self) -> str:
        """Name of the form; also the name of the action triggering it."""

    @abstractmethod
    def required_slots(self, ctx: "FormContext") -> list[str]:
        """Slots the form has to fill, in the order they are asked for.

        The tracker can be used to require different slots depending on
        the state of the conversation.
        """

    @abstractmethod
    async def submit(self, ctx: "FormContext", dispatcher: CollectingDispatcher) -> list[Event]:
        """Process the filled form. Called once every required slot is set."""

    def slot_mappings(self) -> dict[str, list[SlotMapper]]:
        """Mapper lists per slot.

        Slots missing from the result are filled from the entity with the
        same name.
        """
        return {}

    def validator(self, slot: str) -> SlotValidator:
        """Validator for a slot; accepts values unchanged by default."""
        return DefaultValidator(slot)

    async def request_next_slot(
        self, ctx: "FormContext", dispatcher: CollectingDispatcher
    ) -> list[Event]:
        """Ask for the next slot; return no events when the form is complete."""
        return await ctx.request_next_slot(dispatcher)

    async def validate(self, ctx: "FormContext", dispatcher: CollectingDispatcher) -> list[Event]:
        """Extract and validate the slots filled by the latest user message.

        Raises:
            ExecutionRejection: If the requested slot could not be extracted
        """
        slot_values = ctx.extract_other_slots()

        slot_to_fill = ctx.requested_slot()
        if slot_to_fill:
            slot_values.update(ctx.extract_requested_slot(slot_to_fill))
            if not slot_values:
                ctx.logger.info(
                    f"Rejecting form '{self.form_name()}': failed to extract slot '{slot_to_fill}'"
                )
                raise ExecutionRejection(
                    self.form_name(),
                    f"failed to extract slot [{slot_to_fill}]",
                    slot=slot_to_fill,
                )

        return await ctx.validate_slots(dispatcher, slot_values)

    async def deactivate(self, ctx: "FormContext", dispatcher: CollectingDispatcher) -> list[Event]:
        """Return the events ending the form and clearing ``requested_slot``."""
        ctx.logger.debug(f"Deactivating form '{self.form_name()}', clearing '{REQUESTED_SLOT}'")
        return ctx.deactivation_events()
