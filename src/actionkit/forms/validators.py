"""Slot validators and the thread-safe registry of named value predicates."""

import inspect
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from threading import Lock
from typing import TYPE_CHECKING, Any

from actionkit.core.dispatcher import CollectingDispatcher, Message

if TYPE_CHECKING:
    from actionkit.core.context import ActionContext

logger = logging.getLogger(__name__)

SlotValues = dict[str, Any]
ValidatorFn = Callable[
    ["ActionContext", CollectingDispatcher, Any],
    SlotValues | Awaitable[SlotValues],
]


class SlotValidator(ABC):
    """Validates a single extracted slot value.

    The returned mapping may contain any set of slots to commit, including
    none at all or slots other than the one being validated.
    """

    @abstractmethod
    def validate(
        self,
        ctx: "ActionContext",
        dispatcher: CollectingDispatcher,
        value: Any,
    ) -> SlotValues | Awaitable[SlotValues]: ...

    async def run(
        self,
        ctx: "ActionContext",
        dispatcher: CollectingDispatcher,
        value: Any,
    ) -> SlotValues:
        """Call validate, awaiting it when it is a coroutine."""
        result = self.validate(ctx, dispatcher, value)
        if inspect.isawaitable(result):
            result = await result
        return dict(result or {})


class DefaultValidator(SlotValidator):
    """Accept the value verbatim."""

    def __init__(self, slot: str):
        self.slot = slot

    def validate(self, ctx: "ActionContext", dispatcher: CollectingDispatcher, value: Any) -> SlotValues:
        return {self.slot: value}

    def __repr__(self) -> str:
        return f"DefaultValidator({self.slot!r})"


class FunctionValidator(SlotValidator):
    """Adapt a plain sync or async function to the SlotValidator interface."""

    def __init__(self, fn: ValidatorFn):
        self.fn = fn

    def validate(
        self,
        ctx: "ActionContext",
        dispatcher: CollectingDispatcher,
        value: Any,
    ) -> SlotValues | Awaitable[SlotValues]:
        return self.fn(ctx, dispatcher, value)


class PredicateValidator(SlotValidator):
    """Validate a value with a predicate from the ValidatorRegistry.

    Valid values are committed unchanged. Invalid values reset the slot so
    the form asks for it again, optionally uttering ``error_template``.
    """

    def __init__(self, slot: str, name: str, error_template: str | None = None):
        self.slot = slot
        self.name = name
        self.error_template = error_template

    def validate(self, ctx: "ActionContext", dispatcher: CollectingDispatcher, value: Any) -> SlotValues:
        if ValidatorRegistry.validate(self.name, value):
            return {self.slot: value}

        ctx.logger.debug(f"Value {value!r} rejected by validator '{self.name}' for slot '{self.slot}'")
        if self.error_template:
            dispatcher.utter(Message(template=self.error_template, kwargs={self.slot: value}))
        return {self.slot: None}


# Global state protected by a lock
_validators: dict[str, Callable[[Any], bool]] = {}
_validators_lock = Lock()


class ValidatorRegistry:
    """
    Thread-safe registry of named value predicates.

    Forms declared in YAML refer to validators by name; all mutations are
    protected by a lock so registration can happen from any thread.
    """

    @classmethod
    def register(cls, name: str) -> Callable:
        """
        Register a predicate.

        Usage:
            @ValidatorRegistry.register("city_name")
            def validate_city(value: str) -> bool:
                return value.isalpha() and len(value) > 1

        Args:
            name: Semantic name for the validator

        Returns:
            Decorator function
        """

        def decorator(func: Callable[[Any], bool]) -> Callable[[Any], bool]:
            with _validators_lock:
                if name in _validators:
                    logger.warning(
                        f"Validator '{name}' already registered, overwriting",
                        extra={"validator_name": name},
                    )
                _validators[name] = func
            return func

        return decorator

    @classmethod
    def get(cls, name: str) -> Callable[[Any], bool]:
        """
        Get a predicate by name.

        Raises:
            ValueError: If validator is not registered
        """
        with _validators_lock:
            if name not in _validators:
                raise ValueError(
                    f"Validator '{name}' not registered. Available: {list(_validators.keys())}"
                )
            return _validators[name]

    @classmethod
    def validate(cls, name: str, value: Any) -> bool:
        validator = cls.get(name)
        return bool(validator(value))

    @classmethod
    def list_validators(cls) -> list[str]:
        with _validators_lock:
            return list(_validators.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        with _validators_lock:
            return name in _validators

    @classmethod
    def clear(cls) -> None:
        """
        Clear all registered validators.

        Warning: This is primarily for testing. Use with caution.
        """
        with _validators_lock:
            count = len(_validators)
            _validators.clear()
            logger.debug(f"Cleared {count} registered validator(s)", extra={"count": count})


@ValidatorRegistry.register("not_empty")
def validate_not_empty(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


@ValidatorRegistry.register("email")
def validate_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return bool(re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", value))


@ValidatorRegistry.register("integer")
def validate_integer(value: Any) -> bool:
    """Accept ints and strings holding an int (bools are rejected)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(re.match(r"^-?\d+$", value.strip()))


@ValidatorRegistry.register("positive_number")
def validate_positive_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False
