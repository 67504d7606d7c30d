"""Executes action requests sent by the dialogue engine.

The executor is transport agnostic: it turns a webhook payload into a
response payload and maps errors to status codes and error bodies, leaving
HTTP serving to the embedding application.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from actionkit.actions.registry import ActionRegistry
from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher, Message
from actionkit.core.errors import (
    ActionKitError,
    ExecutionRejection,
    HandlerError,
    InvalidRequestError,
    MissingHandlerError,
)
from actionkit.core.events import Event
from actionkit.core.tracker import Tracker

logger = logging.getLogger(__name__)


class ActionRequest(BaseModel):
    """Request body of the action webhook."""

    next_action: str = Field(min_length=1, description="Name of the action to run")
    sender_id: str = "default"
    tracker: Tracker = Field(default_factory=Tracker)
    domain: dict[str, Any] = Field(default_factory=dict)
    version: str | None = None


class ActionResponse(BaseModel):
    """Response body of a successfully handled request."""

    events: list[Event] = Field(default_factory=list)
    responses: list[Message] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "events": [event.to_dict() for event in self.events],
            "responses": [message.to_dict() for message in self.responses],
        }


def create_error_reference() -> str:
    """Generate unique error reference for client/server correlation."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def status_for(exception: Exception) -> int:
    """Map an exception raised by ``execute`` to an HTTP status code."""
    if isinstance(exception, (InvalidRequestError, ExecutionRejection)):
        return 400
    if isinstance(exception, MissingHandlerError):
        return 404
    return 500


def error_payload(exception: Exception) -> dict[str, Any]:
    """Build the error body returned to the dialogue engine."""
    if isinstance(exception, ExecutionRejection):
        return {"error": exception.reason, "action_name": exception.action}
    if isinstance(exception, MissingHandlerError):
        return {"error": str(exception), "action_name": exception.action}
    if isinstance(exception, HandlerError):
        return {
            "error": "error handling the action",
            "action_name": exception.action,
            "reference": create_error_reference(),
        }
    if isinstance(exception, ActionKitError):
        return {"error": str(exception)}
    return {"error": "An internal error occurred.", "reference": create_error_reference()}


class ActionExecutor:
    """Runs registered actions for incoming requests."""

    def __init__(self, registry: ActionRegistry, clock: Callable[[], float] | None = None):
        """
        Initialize the executor.

        Args:
            registry: Actions that can be executed
            clock: Callable returning the current unix timestamp
        """
        self.registry = registry
        self.clock = clock or time.time

    async def execute_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate a raw JSON payload, execute it and return the response body.

        Raises:
            InvalidRequestError: If the payload is malformed
        """
        try:
            request = ActionRequest.model_validate(payload)
        except PydanticValidationError as e:
            raise InvalidRequestError(f"invalid request: {e.error_count()} error(s)", details=e.errors()) from e
        response = await self.execute(request)
        return response.to_dict()

    async def execute(self, request: ActionRequest) -> ActionResponse:
        """
        Execute the action named by the request.

        Raises:
            MissingHandlerError: If no action is registered for the request
            ExecutionRejection: If the action rejected its execution
            HandlerError: If the action failed for any other reason
        """
        action_name = request.next_action
        logger.debug(f"[sender: {request.sender_id} - action: {action_name}]")

        action = self.registry.get(action_name)
        dispatcher = CollectingDispatcher()
        ctx = ActionContext(
            tracker=request.tracker,
            domain=request.domain,
            action_name=action_name,
            clock=self.clock,
        )

        start = time.perf_counter()
        try:
            events = await action.run(ctx, dispatcher)
        except ExecutionRejection as e:
            logger.info(f"Action '{action_name}' rejected execution: {e.reason}")
            raise
        except Exception as e:
            logger.error(
                f"Error executing action '{action_name}': {e}",
                exc_info=True,
                extra={"action_name": action_name, "error_type": type(e).__name__},
            )
            raise HandlerError(action_name, e) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Action '{action_name}' executed in {elapsed_ms:.1f}ms "
            f"({len(events or [])} event(s), {len(dispatcher)} response(s))"
        )
        return ActionResponse(events=list(events or []), responses=list(dispatcher.messages))
