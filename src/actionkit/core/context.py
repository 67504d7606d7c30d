"""Per-request context handed to action handlers."""

import logging
import time
from collections.abc import Callable
from typing import Any

from actionkit.core.events import SlotSet
from actionkit.core.tracker import Tracker
from actionkit.observability.logging import ContextLogger

_context_logger = ContextLogger("actionkit.actions")


class ActionContext:
    """
    Request specific state for one action run.

    The context owns its tracker: handlers may read it freely and the form
    engine updates its slots between steps, but nothing outside the run
    sees those changes.
    """

    def __init__(
        self,
        tracker: Tracker,
        domain: dict[str, Any] | None = None,
        action_name: str | None = None,
        clock: Callable[[], float] | None = None,
        logger: logging.LoggerAdapter | None = None,
    ):
        """
        Initialize the context.

        Args:
            tracker: Tracker snapshot for this request
            domain: Domain description sent by the dialogue engine
            action_name: Name of the action being executed
            clock: Callable returning the current unix timestamp
            logger: Logger to use instead of the default request logger
        """
        self.tracker = tracker
        self.domain = domain or {}
        self.action_name = action_name
        self.clock = clock or time.time
        self.logger = logger or _context_logger.with_context(
            sender_id=tracker.sender_id,
            action_name=action_name,
        )

    def now(self) -> float:
        """Return the current unix timestamp."""
        return self.clock()

    @property
    def slots(self) -> dict[str, Any]:
        return self.tracker.slots

    def slot(self, name: str) -> Any:
        return self.tracker.get_slot(name)

    def has_slot(self, name: str) -> bool:
        return self.tracker.has_slot(name)

    def set_slot(self, name: str, value: Any) -> SlotSet:
        return SlotSet(key=name, value=value, timestamp=self.now())

    def reset_slot(self, name: str) -> SlotSet:
        return SlotSet(key=name, value=None, timestamp=self.now())

    def entity_values(
        self,
        entity: str,
        role: str | None = None,
        group: str | None = None,
    ) -> list[Any]:
        return self.tracker.latest_entity_values(entity, role, group)

    def entity_value(
        self,
        entity: str,
        role: str | None = None,
        group: str | None = None,
    ) -> Any:
        """Return the latest value of an entity.

        None when the entity was not detected, the value itself for a single
        match and the list of values when it was detected several times.
        """
        values = self.entity_values(entity, role, group)
        if not values:
            return None
        if len(values) == 1:
            return values[0]
        return values
