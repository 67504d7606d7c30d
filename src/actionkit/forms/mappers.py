"""Slot mappers: strategies proposing a slot value from the latest message.

Mappers are immutable and can be shared by concurrent runs. A slot is
mapped by an ordered list of mappers; the first one that desires the
current intent and extracts a value wins.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from actionkit.core.errors import ConfigError
from actionkit.forms.intents import IntentFilter

if TYPE_CHECKING:
    from actionkit.core.context import ActionContext


@dataclass(frozen=True)
class SlotMapper(ABC):
    """Base class of all slot mappers."""

    mapper_type: ClassVar[str] = ""
    _registry: ClassVar[dict[str, type["SlotMapper"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.mapper_type:
            SlotMapper._registry[cls.mapper_type] = cls

    def desires(self, intent: str | None) -> bool:
        """Return whether this mapping applies to the given intent."""
        return self.intent_filter is None or self.intent_filter.desires(intent)

    @abstractmethod
    def extract(self, ctx: "ActionContext") -> Any:
        """Return the proposed value, or None when nothing was found."""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.mapper_type}
        if self.intent_filter is not None:
            data.update(self.intent_filter.to_config())
        return data


@dataclass(frozen=True)
class FromEntity(SlotMapper):
    """Fill a slot from an entity detected in the latest message."""

    mapper_type: ClassVar[str] = "from_entity"

    entity: str
    role: str | None = None
    group: str | None = None
    intent_filter: IntentFilter | None = None

    def has_role_or_group(self) -> bool:
        return bool(self.role or self.group)

    def extract(self, ctx: "ActionContext") -> Any:
        return ctx.entity_value(self.entity, self.role, self.group)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["entity"] = self.entity
        if self.role:
            data["role"] = self.role
        if self.group:
            data["group"] = self.group
        return data


@dataclass(frozen=True)
class FromIntent(SlotMapper):
    """Fill a slot with a constant whenever the intent is desired."""

    mapper_type: ClassVar[str] = "from_intent"

    value: Any
    intent_filter: IntentFilter | None = None

    def extract(self, ctx: "ActionContext") -> Any:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["value"] = self.value
        return data


@dataclass(frozen=True)
class FromTriggerIntent(SlotMapper):
    """Fill a slot with a constant when the form is triggered.

    Only meaningful on the turn that activates the form; regular
    extraction never yields a value.
    """

    mapper_type: ClassVar[str] = "from_trigger_intent"

    value: Any
    intent_filter: IntentFilter | None = None

    def extract(self, ctx: "ActionContext") -> Any:
        return None

    def trigger_value(self, ctx: "ActionContext") -> Any:
        if not self.desires(ctx.tracker.latest_intent):
            return None
        return self.value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["value"] = self.value
        return data


@dataclass(frozen=True)
class FromText(SlotMapper):
    """Fill a slot with the raw text of the latest message."""

    mapper_type: ClassVar[str] = "from_text"

    intent_filter: IntentFilter | None = None

    def extract(self, ctx: "ActionContext") -> Any:
        return ctx.tracker.latest_message.text


class SlotMappings(dict[str, list[SlotMapper]]):
    """Mapping of slot names to their ordered mapper lists."""

    def mapping(self, slot: str) -> list[SlotMapper]:
        """Return the mappers for a slot.

        Slots without configured mappers are filled from the entity with the
        same name.
        """
        mappers = self.get(slot)
        if mappers:
            return list(mappers)
        return [FromEntity(entity=slot)]

    @classmethod
    def from_config(cls, config: dict[str, list[dict[str, Any]]] | None) -> "SlotMappings":
        mappings = cls()
        for slot, entries in (config or {}).items():
            if isinstance(entries, dict):
                entries = [entries]
            mappings[slot] = [parse_mapper(entry) for entry in entries]
        return mappings

    def to_config(self) -> dict[str, list[dict[str, Any]]]:
        return {slot: [mapper.to_dict() for mapper in mappers] for slot, mappers in self.items()}


def parse_mapper(data: dict[str, Any]) -> SlotMapper:
    """Build a mapper from its serialized form.

    Raises:
        ConfigError: If the mapping type is unknown or required keys are missing
    """
    mapper_type = data.get("type")
    mapper_class = SlotMapper._registry.get(mapper_type or "")
    if mapper_class is None:
        raise ConfigError(f"invalid slot mapper type [{mapper_type}]", mapping=data)

    intents = IntentFilter.from_config(data.get("intent"), data.get("not_intent"))

    if mapper_class is FromEntity:
        entity = data.get("entity")
        if not entity:
            raise ConfigError("from_entity mapping requires an 'entity'", mapping=data)
        return FromEntity(
            entity=entity,
            role=data.get("role"),
            group=data.get("group"),
            intent_filter=intents,
        )
    if mapper_class is FromText:
        return FromText(intent_filter=intents)
    return mapper_class(value=data.get("value"), intent_filter=intents)  # type: ignore[call-arg]
