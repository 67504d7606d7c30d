"""Intent filters deciding whether a slot mapping applies to a message."""

from collections.abc import Iterable
from dataclasses import dataclass, field


def _as_tuple(intents: str | Iterable[str] | None) -> tuple[str, ...]:
    if intents is None:
        return ()
    if isinstance(intents, str):
        return (intents,)
    return tuple(intents)


@dataclass(frozen=True)
class IntentFilter:
    """Composed allow/block list over intent names.

    An intent is desired when the allow list is empty or contains it, and
    the block list does not contain it.
    """

    allow: tuple[str, ...] = field(default_factory=tuple)
    block: tuple[str, ...] = field(default_factory=tuple)

    def desires(self, intent: str | None) -> bool:
        if self.allow and intent not in self.allow:
            return False
        return intent not in self.block

    @classmethod
    def from_config(
        cls,
        intent: str | Iterable[str] | None = None,
        not_intent: str | Iterable[str] | None = None,
    ) -> "IntentFilter | None":
        """Build a filter from the ``intent``/``not_intent`` mapping keys.

        Returns None when neither key restricts anything.
        """
        allow, block = _as_tuple(intent), _as_tuple(not_intent)
        if not allow and not block:
            return None
        return cls(allow=allow, block=block)

    def to_config(self) -> dict[str, list[str]]:
        config: dict[str, list[str]] = {}
        if self.allow:
            config["intent"] = list(self.allow)
        if self.block:
            config["not_intent"] = list(self.block)
        return config


def allow(*intents: str) -> IntentFilter:
    """Filter desiring only the given intents."""
    return IntentFilter(allow=tuple(intents))


def block(*intents: str) -> IntentFilter:
    """Filter desiring every intent except the given ones."""
    return IntentFilter(block=tuple(intents))
