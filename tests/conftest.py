"""Shared fixtures for actionkit tests.

Trackers are built from plain dicts in the wire format, the way the
dialogue engine sends them, and every context uses a fixed clock so
event timestamps are deterministic.
"""

from typing import Any

import pytest

from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.tracker import Tracker
from actionkit.forms.validators import ValidatorRegistry

FIXED_TIME = 1_700_000_000.0


def build_tracker(
    slots: dict[str, Any] | None = None,
    intent: str | None = None,
    entities: list[dict[str, Any]] | None = None,
    text: str | None = None,
    latest_action_name: str | None = "action_listen",
    active_loop: str | dict[str, Any] | None = None,
    events: list[dict[str, Any]] | None = None,
    sender_id: str = "test-user",
) -> Tracker:
    if isinstance(active_loop, str):
        active_loop = {"name": active_loop}
    return Tracker.model_validate(
        {
            "sender_id": sender_id,
            "slots": slots or {},
            "latest_message": {
                "text": text,
                "intent": {"name": intent, "confidence": 1.0},
                "entities": entities or [],
            },
            "latest_action_name": latest_action_name,
            "active_loop": active_loop or {},
            "events": events or [],
        }
    )


@pytest.fixture
def fixed_clock():
    """Clock always returning FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def dispatcher() -> CollectingDispatcher:
    return CollectingDispatcher()


@pytest.fixture
def tracker_factory():
    """Factory building trackers from keyword arguments."""
    return build_tracker


@pytest.fixture
def context_factory(fixed_clock):
    """Factory building an ActionContext around a tracker."""

    def _make(tracker: Tracker | None = None, action_name: str | None = None) -> ActionContext:
        return ActionContext(
            tracker=tracker or build_tracker(),
            action_name=action_name,
            clock=fixed_clock,
        )

    return _make


@pytest.fixture
def restore_validators():
    """Restore the validator registry after a test that mutates it."""
    import actionkit.forms.validators as validators_module

    snapshot = dict(validators_module._validators)
    yield
    ValidatorRegistry.clear()
    with validators_module._validators_lock:
        validators_module._validators.update(snapshot)
