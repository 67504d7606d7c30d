"""Standalone form helper actions.

``FormValidationAction`` serves ``validate_<form>``: the dialogue engine
extracts slot candidates itself and calls it to validate them.
``AskForSlotAction`` serves ``action_ask_<slot>`` (or
``action_ask_<form>__<slot>``) for slots that need custom prompting.
"""

from abc import ABC, abstractmethod

from actionkit.actions.base import Action
from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.events import Event, SlotSet
from actionkit.forms.validators import DefaultValidator, SlotValidator


class FormSlotValidator(ABC):
    """Validation rules of a form validated by the dialogue engine."""

    @abstractmethod
    def form(self) -> str:
        """Name of the form this validator is intended for."""

    def validator(self, slot: str) -> SlotValidator:
        return DefaultValidator(slot)

    async def validate(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]:
        """Validate the slot candidates appended to the tracker events."""
        candidates = ctx.tracker.slots_to_validate()
        ctx.logger.debug(f"Validating slot candidates {candidates} for form '{self.form()}'")

        validated: dict = {}
        for slot, value in candidates.items():
            validated.update(await self.validator(slot).run(ctx, dispatcher, value))

        timestamp = ctx.now()
        return [SlotSet(key=slot, value=value, timestamp=timestamp) for slot, value in validated.items()]


class FormValidationAction(Action):
    """Action named ``validate_<form>`` delegating to a FormSlotValidator."""

    def __init__(self, validator: FormSlotValidator):
        self.validator = validator

    def name(self) -> str:
        return f"validate_{self.validator.form()}"

    async def run(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]:
        return await self.validator.validate(ctx, dispatcher)


class SlotAsker(ABC):
    """Custom prompt for a slot."""

    def form(self) -> str | None:
        """Form the asker is intended for; None makes it global for the slot."""
        return None

    @abstractmethod
    def slot(self) -> str: ...

    @abstractmethod
    async def ask(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]: ...


class AskForSlotAction(Action):
    """Action asking the user for a slot value."""

    def __init__(self, asker: SlotAsker):
        self.asker = asker

    def name(self) -> str:
        form, slot = self.asker.form(), self.asker.slot()
        if not form:
            return f"action_ask_{slot}"
        return f"action_ask_{form}__{slot}"

    async def run(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]:
        return await self.asker.ask(ctx, dispatcher)
