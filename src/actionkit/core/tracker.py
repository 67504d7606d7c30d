"""Tracker models: the conversation state sent with every action request."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from actionkit.core.events import Event, SlotSet, parse_event


class Intent(BaseModel):
    """An intent and its detected confidence."""

    name: str | None = None
    confidence: float | None = None


class Entity(BaseModel):
    """An entity detected in a user message."""

    model_config = ConfigDict(extra="allow")

    entity: str
    value: Any = None
    start: int | None = None
    end: int | None = None
    confidence: float | None = None
    role: str | None = None
    group: str | None = None
    extractor: str | None = None


class ParseResult(BaseModel):
    """A parsed user message."""

    model_config = ConfigDict(extra="allow")

    intent: Intent = Field(default_factory=Intent)
    intent_ranking: list[Intent] = Field(default_factory=list)
    entities: list[Entity] = Field(default_factory=list)
    text: str | None = None

    @property
    def intent_name(self) -> str | None:
        return self.intent.name


class ActiveLoopState(BaseModel):
    """Description of the loop currently owning the conversation."""

    name: str | None = None
    validate_: bool | None = Field(default=None, alias="validate")
    rejected: bool = False
    trigger_message: ParseResult | None = None

    model_config = ConfigDict(populate_by_name=True)

    def is_active(self) -> bool:
        return bool(self.name)

    def is_named(self, name: str) -> bool:
        return self.is_active() and self.name == name

    def should_validate(self) -> bool:
        """Return True unless validation was explicitly disabled."""
        return self.validate_ is not False


class Tracker(BaseModel):
    """Snapshot of the conversation state for one action request."""

    sender_id: str = "default"
    slots: dict[str, Any] = Field(default_factory=dict)
    latest_message: ParseResult = Field(default_factory=ParseResult)
    latest_action_name: str | None = None
    events: list[Event] = Field(default_factory=list)
    paused: bool = False
    followup_action: str | None = None
    active_loop: ActiveLoopState = Field(default_factory=ActiveLoopState)

    @field_validator("events", mode="before")
    @classmethod
    def _parse_events(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [parse_event(item) for item in value]
        return value

    @field_validator("latest_message", "active_loop", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("slots", mode="before")
    @classmethod
    def _none_to_empty_slots(cls, value: Any) -> Any:
        return {} if value is None else value

    def has_slot(self, name: str) -> bool:
        """Return whether the slot is present with a non-None value."""
        return self.slots.get(name) is not None

    def get_slot(self, name: str) -> Any:
        return self.slots.get(name)

    def update_slots(self, values: dict[str, Any]) -> None:
        self.slots.update(values)

    def has_active_loop(self) -> bool:
        return self.active_loop.is_active()

    def active_loop_is(self, name: str) -> bool:
        return self.active_loop.is_named(name)

    @property
    def latest_intent(self) -> str | None:
        return self.latest_message.intent_name

    def latest_entity_values(
        self,
        entity: str,
        role: str | None = None,
        group: str | None = None,
    ) -> list[Any]:
        """Return the values of matching entities in the latest message.

        Entities without a value are ignored. Role and group only constrain
        the match when given.
        """
        values = []
        for candidate in self.latest_message.entities:
            if candidate.entity != entity or candidate.value in (None, ""):
                continue
            if role and candidate.role != role:
                continue
            if group and candidate.group != group:
                continue
            values.append(candidate.value)
        return values

    def slots_to_validate(self) -> dict[str, Any]:
        """Return the slots set by the trailing run of SlotSet events.

        The dialogue engine appends slot candidates at the end of the event
        list before calling a validation action. Slots keep the order they
        were appended in; a slot set twice takes its newest value.
        """
        start = len(self.events)
        while start > 0 and isinstance(self.events[start - 1], SlotSet):
            start -= 1

        slots: dict[str, Any] = {}
        for event in self.events[start:]:
            slots[event.key] = event.value
        return slots

    def copy_for_run(self) -> "Tracker":
        """Return a deep copy owned by a single run."""
        return self.model_copy(deep=True)

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json", exclude={"events"})
        data["events"] = [event.to_dict() for event in self.events]
        return data
