"""Base class of every action served by the action server."""

from abc import ABC, abstractmethod

from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.events import Event


class Action(ABC):
    """An action the dialogue engine can ask the server to run."""

    @abstractmethod
    def name(self) -> str:
        """Unique name of the action, as declared in the domain."""

    @abstractmethod
    async def run(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]:
        """
        Run the action.

        Args:
            ctx: Context of the request that triggered the action
            dispatcher: Collects the messages sent back to the user

        Returns:
            Events the dialogue engine applies to the conversation
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name()})"
