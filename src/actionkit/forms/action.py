"""Form action: runs the slot-filling loop of a form handler for one turn."""

import logging

from actionkit.actions.base import Action
from actionkit.core.context import ActionContext
from actionkit.core.dispatcher import CollectingDispatcher
from actionkit.core.events import ActiveLoop, Event
from actionkit.forms.context import FormContext
from actionkit.forms.handler import FormHandler

logger = logging.getLogger(__name__)


class EventLog:
    """Ordered, append-only list of the events emitted during a run."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def capture(self, events: list[Event] | None) -> int:
        """Append events and return how many were added."""
        events = events or []
        self.events.extend(events)
        return len(events)

    def contains_loop_deactivation(self) -> bool:
        return any(isinstance(event, ActiveLoop) and event.is_deactivation() for event in self.events)


class FormAction(Action):
    """
    Action running a form.

    Every turn the form is (re)computed from the tracker alone:

    1. activate the form if it is not the active loop yet, validating any
       required slot that was filled before activation
    2. validate the user's input when called after listening
    3. stop if validation deactivated the form
    4. apply the validated slots to the run's tracker
    5. ask for the next missing slot, stopping here if one was requested
    6. submit the form
    7. deactivate the form

    Errors propagate unchanged. The events emitted before the failing step
    are attached to the exception as ``partial_events``.
    """

    def __init__(self, handler: FormHandler):
        self.handler = handler

    def name(self) -> str:
        return self.handler.form_name()

    async def run(self, ctx: ActionContext, dispatcher: CollectingDispatcher) -> list[Event]:
        log = EventLog()
        form_ctx = FormContext(ctx, self.handler)
        try:
            if log.capture(self.activate_if_required(form_ctx)):
                log.capture(await self.validate_prefilled_slots(form_ctx, dispatcher))
            log.capture(await self.validate_if_required(form_ctx, dispatcher))

            if log.contains_loop_deactivation():
                form_ctx.logger.debug(f"Form '{self.name()}' was deactivated during validation")
                return log.events

            form_ctx.apply_slot_sets(log.events)

            if log.capture(await self.handler.request_next_slot(form_ctx, dispatcher)):
                return log.events

            form_ctx.logger.info(f"Submitting form '{self.name()}'")
            log.capture(await self.handler.submit(form_ctx, dispatcher))
            log.capture(await self.handler.deactivate(form_ctx, dispatcher))
        except Exception as exc:
            exc.partial_events = list(log.events)  # type: ignore[attr-defined]
            raise

        return log.events

    def activate_if_required(self, ctx: FormContext) -> list[Event]:
        """Return the activation event when the form is not the active loop yet."""
        if ctx.tracker.has_active_loop():
            ctx.logger.debug(f"The loop '{ctx.tracker.active_loop.name}' is active")
        else:
            ctx.logger.debug("There is no active loop")

        if ctx.tracker.active_loop_is(self.name()):
            return []

        ctx.logger.debug(f"Activating form '{self.name()}'")
        return [ActiveLoop(name=self.name(), timestamp=ctx.now())]

    async def validate_prefilled_slots(
        self, ctx: FormContext, dispatcher: CollectingDispatcher
    ) -> list[Event]:
        """Validate the slots a newly activated form starts with.

        Required slots that were filled before activation, and slots filled
        by a trigger-intent mapping, go through the regular validation.
        """
        required_slots = ctx.required_slots()
        candidates = {slot: ctx.slot(slot) for slot in required_slots if not ctx.should_request_slot(slot)}
        candidates.update(
            ctx.trigger_slot_values(slot for slot in required_slots if slot not in candidates)
        )

        if not candidates:
            ctx.logger.debug("No pre-filled required slots to validate")
            return []

        ctx.logger.debug(f"Validating pre-filled required slots: {candidates}")
        return await ctx.validate_slots(dispatcher, candidates)

    async def validate_if_required(
        self, ctx: FormContext, dispatcher: CollectingDispatcher
    ) -> list[Event]:
        """Validate the user's input when the form runs right after listening."""
        if not ctx.should_validate():
            ctx.logger.debug("Skipping validation")
            return []

        ctx.logger.debug(f"Validating user input '{ctx.tracker.latest_message.text}'")
        return await self.handler.validate(ctx, dispatcher)

    def __str__(self) -> str:
        return f"FormAction({self.name()})"
