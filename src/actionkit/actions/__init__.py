"""Actions module for actionkit"""

from actionkit.actions.base import Action
from actionkit.actions.executor import ActionExecutor, ActionRequest, ActionResponse
from actionkit.actions.registry import ActionRegistry

__all__ = ["Action", "ActionExecutor", "ActionRegistry", "ActionRequest", "ActionResponse"]
