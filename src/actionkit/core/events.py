"""Conversation events exchanged with the dialogue engine.

Events are a tagged union: each variant declares a literal ``event`` tag and
registers itself under that tag, so a serialized event can be rebuilt with
``parse_event`` and a variant can be matched with ``isinstance``.
"""

from typing import Any, ClassVar, Literal, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """Base event.

    Subclasses are registered automatically by the default of their
    ``event`` field, which must be annotated as a ``Literal``.
    """

    model_config = ConfigDict(populate_by_name=True)

    event: str = Field(..., description="Discriminator field for the event type")
    timestamp: float | None = None

    _registry: ClassVar[dict[str, type["Event"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        annotation = cls.__annotations__.get("event")
        if annotation is not None and get_origin(annotation) is Literal:
            args = get_args(annotation)
            if args and isinstance(args[0], str):
                Event._registry[args[0]] = cls

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "Event":
        """Parse a dictionary into a typed event using the registry."""
        event_type = data.get("event")
        if not event_type:
            raise ValueError("Event data missing 'event' field")

        event_class = cls._registry.get(event_type)
        if not event_class:
            raise ValueError(f"invalid event type [{event_type}]")

        return event_class.model_validate(data)

    @classmethod
    def registered_types(cls) -> list[str]:
        return sorted(cls._registry)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format used by the dialogue engine."""
        return self.model_dump(by_alias=True, mode="json")


class SlotSet(Event):
    """Sets a slot to a value (``None`` resets it)."""

    event: Literal["slot"] = "slot"
    key: str = Field(alias="name")
    value: Any = None


class ActiveLoop(Event):
    """Activates the named loop, or deactivates the active loop when the name is empty."""

    event: Literal["active_loop"] = "active_loop"
    name: str | None = None

    def is_deactivation(self) -> bool:
        return not self.name


class ActionExecuted(Event):
    event: Literal["action"] = "action"
    name: str
    policy: str | None = None
    confidence: float | None = None


class ActionExecutionRejected(Event):
    event: Literal["action_execution_rejected"] = "action_execution_rejected"
    name: str
    policy: str | None = None
    confidence: float | None = None


class UserUttered(Event):
    event: Literal["user"] = "user"
    text: str | None = None
    parse_data: dict[str, Any] = Field(default_factory=dict)
    input_channel: str | None = None


class BotUttered(Event):
    event: Literal["bot"] = "bot"
    text: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class FollowupAction(Event):
    event: Literal["followup"] = "followup"
    name: str


class LoopInterrupted(Event):
    """Marks the active loop as interrupted by another action."""

    event: Literal["loop_interrupted"] = "loop_interrupted"
    is_interrupted: bool = False


class AllSlotsReset(Event):
    event: Literal["reset_slots"] = "reset_slots"


class Restarted(Event):
    event: Literal["restart"] = "restart"


class SessionStarted(Event):
    event: Literal["session_started"] = "session_started"


class ConversationPaused(Event):
    event: Literal["pause"] = "pause"


class ConversationResumed(Event):
    event: Literal["resume"] = "resume"


class ActionReverted(Event):
    event: Literal["undo"] = "undo"


class UserUtteranceReverted(Event):
    event: Literal["rewind"] = "rewind"


def parse_event(data: dict[str, Any] | Event) -> Event:
    """Parse a serialized event back into its typed variant."""
    if isinstance(data, Event):
        return data
    return Event.parse(data)


def parse_events(data: list[dict[str, Any] | Event]) -> list[Event]:
    return [parse_event(item) for item in data]
