"""Form context: slot extraction, validation and slot requests for one run."""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from actionkit.core.constants import ACTION_LISTEN_NAME, REQUESTED_SLOT, UTTER_ASK_PREFIX
from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher, Message
from actionkit.core.events import ActiveLoop, Event, SlotSet
from actionkit.forms.mappers import FromEntity, FromTriggerIntent, SlotMapper, SlotMappings

if TYPE_CHECKING:
    from actionkit.forms.handler import FormHandler


class FormContext(ActionContext):
    """
    Context of a single form run.

    Wraps the request context with the form handler. The tracker is a
    private copy: the orchestrator applies the slots set earlier in the run
    to it, extraction and validation only read it.
    """

    def __init__(self, ctx: ActionContext, handler: "FormHandler"):
        super().__init__(
            tracker=ctx.tracker.copy_for_run(),
            domain=ctx.domain,
            action_name=ctx.action_name or handler.form_name(),
            clock=ctx.clock,
            logger=ctx.logger,
        )
        self.handler = handler
        self.mappings = SlotMappings(handler.slot_mappings() or {})

    @property
    def form_name(self) -> str:
        return self.handler.form_name()

    @property
    def latest_intent(self) -> str | None:
        return self.tracker.latest_intent

    def required_slots(self) -> list[str]:
        return list(self.handler.required_slots(self))

    def requested_slot(self) -> str | None:
        """Return the slot the form asked for on the previous turn, if any."""
        value = self.slot(REQUESTED_SLOT)
        if isinstance(value, str) and value:
            return value
        return None

    def should_request_slot(self, slot: str) -> bool:
        """Return whether the slot still lacks a value."""
        return not self.has_slot(slot)

    def should_validate(self) -> bool:
        """Return whether the latest user message must be validated.

        Validation happens when the form runs right after listening for user
        input, a loop is active and validation was not disabled for it.
        """
        return (
            self.tracker.latest_action_name == ACTION_LISTEN_NAME
            and self.tracker.has_active_loop()
            and self.tracker.active_loop.should_validate()
        )

    # Extraction

    def _first_match(self, slot: str, mappers: Iterable[SlotMapper]) -> dict[str, Any]:
        intent = self.latest_intent
        for mapper in mappers:
            if not mapper.desires(intent):
                continue
            value = mapper.extract(self)
            if value is not None:
                self.logger.debug(f"Extracted '{value}' for slot '{slot}' using {mapper}")
                return {slot: value}
        return {}

    def extract_requested_slot(self, slot: str) -> dict[str, Any]:
        """Extract the value of the requested slot.

        Mappers are tried in declaration order and the first one yielding a
        value wins. Returns an empty dict when nothing was extracted.
        """
        self.logger.debug(f"Trying to extract requested slot '{slot}'")
        values = self._first_match(slot, self.mappings.mapping(slot))
        if not values:
            self.logger.debug(f"Failed to extract requested slot '{slot}'")
        return values

    def entity_is_desired(self, mapper: FromEntity, slot: str) -> bool:
        """Return whether an entity mapping may fill a slot that was not asked for.

        Either the entity carries the slot's name, or the mapping is
        constrained by role or group and a matching value is present.
        """
        if mapper.entity == slot:
            return True
        if not mapper.has_role_or_group():
            return False
        return self.entity_value(mapper.entity, mapper.role, mapper.group) is not None

    def extract_other_slots(self) -> dict[str, Any]:
        """Extract values for required slots other than the requested one."""
        requested = self.requested_slot()
        values: dict[str, Any] = {}
        for slot in self.required_slots():
            if slot == requested:
                continue
            candidates = [
                mapper
                for mapper in self.mappings.mapping(slot)
                if isinstance(mapper, FromEntity) and self.entity_is_desired(mapper, slot)
            ]
            values.update(self._first_match(slot, candidates))

        if values:
            self.logger.debug(f"Extracted other slots: {values}")
        return values

    def trigger_slot_values(self, slots: Iterable[str]) -> dict[str, Any]:
        """Return values of trigger-intent mappings for the given slots."""
        values: dict[str, Any] = {}
        for slot in slots:
            for mapper in self.mappings.mapping(slot):
                if not isinstance(mapper, FromTriggerIntent):
                    continue
                value = mapper.trigger_value(self)
                if value is not None:
                    values[slot] = value
                    break
        return values

    # Validation

    async def validate_slots(
        self,
        dispatcher: CollectingDispatcher,
        candidates: dict[str, Any],
    ) -> list[Event]:
        """Run every candidate through its slot validator.

        All validated slots are returned as SlotSet events sharing one
        timestamp. Any validator error aborts the whole call.
        """
        validated: dict[str, Any] = {}
        for slot, value in candidates.items():
            validator = self.handler.validator(slot)
            validated.update(await validator.run(self, dispatcher, value))

        self.logger.debug(f"Validated slots: {validated}")
        timestamp = self.now()
        return [SlotSet(key=slot, value=value, timestamp=timestamp) for slot, value in validated.items()]

    # Slot requests

    def request_slot(self, slot: str) -> SlotSet:
        """Return the event marking the slot as the one being asked for."""
        return self.set_slot(REQUESTED_SLOT, slot)

    async def request_next_slot(self, dispatcher: CollectingDispatcher) -> list[Event]:
        """Ask for the first required slot without a value.

        Returns no events when every required slot is filled.
        """
        for slot in self.required_slots():
            if self.should_request_slot(slot):
                self.logger.debug(f"Request next slot '{slot}'")
                dispatcher.utter(Message(template=f"{UTTER_ASK_PREFIX}{slot}", kwargs=dict(self.slots)))
                return [self.request_slot(slot)]
        return []

    def apply_slot_sets(self, events: Iterable[Event]) -> None:
        """Apply SlotSet events to the run's tracker, later events winning."""
        for event in events:
            if isinstance(event, SlotSet):
                self.tracker.slots[event.key] = event.value

    def deactivation_events(self) -> list[Event]:
        """Return the events ending the loop and clearing the requested slot."""
        timestamp = self.now()
        return [
            ActiveLoop(name="", timestamp=timestamp),
            SlotSet(key=REQUESTED_SLOT, value=None, timestamp=timestamp),
        ]
