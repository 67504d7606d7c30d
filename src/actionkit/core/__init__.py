"""Core models shared by actions and forms."""

from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher, Message
from actionkit.core.events import ActiveLoop, Event, SlotSet, parse_event
from actionkit.core.tracker import ActiveLoopState, Entity, Intent, ParseResult, Tracker

__all__ = [
    "ActionContext",
    "ActiveLoop",
    "ActiveLoopState",
    "CollectingDispatcher",
    "Entity",
    "Event",
    "Intent",
    "Message",
    "ParseResult",
    "SlotSet",
    "Tracker",
    "parse_event",
]
