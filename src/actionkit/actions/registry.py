"""Registry of the actions served by the action server."""

import logging
from collections.abc import Iterable
from threading import Lock

from actionkit.actions.base import Action
from actionkit.core.errors import ActionRegistrationError, MissingHandlerError

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Thread-safe registry mapping action names to actions.

    Registration normally happens once at start-up; afterwards the registry
    is only read, from any number of concurrent requests.

    Usage:
        registry = ActionRegistry()
        registry.register(FormAction(RestaurantForm()))
        action = registry.get("restaurant_form")
    """

    _default_instance: "ActionRegistry | None" = None

    def __init__(self, actions: Iterable[Action] = ()) -> None:
        self._actions: dict[str, Action] = {}
        self._lock = Lock()
        self.register_all(actions)

    @classmethod
    def get_default(cls) -> "ActionRegistry":
        """Get the default global registry instance."""
        if cls._default_instance is None:
            cls._default_instance = cls()
        return cls._default_instance

    def register(self, action: Action) -> Action:
        """Register an action under its name.

        Raises:
            ActionRegistrationError: If an action with the same name exists
        """
        name = action.name()
        if not name:
            raise ActionRegistrationError("cannot register an action without a name", action=action)
        with self._lock:
            if name in self._actions:
                raise ActionRegistrationError(f"handler for action [{name}] already exists")
            self._actions[name] = action
        logger.debug(f"Registered action '{name}'", extra={"action_name": name})
        return action

    def register_all(self, actions: Iterable[Action]) -> "ActionRegistry":
        for action in actions:
            self.register(action)
        return self

    def get(self, name: str) -> Action:
        """Get an action by name.

        Raises:
            MissingHandlerError: If no action is registered under the name
        """
        with self._lock:
            action = self._actions.get(name)
        if action is None:
            raise MissingHandlerError(name)
        return action

    def list_actions(self) -> list[str]:
        with self._lock:
            return sorted(self._actions)

    def clear(self) -> None:
        """Remove every action. Primarily for testing."""
        with self._lock:
            self._actions.clear()

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._actions

    def __len__(self) -> int:
        with self._lock:
            return len(self._actions)
