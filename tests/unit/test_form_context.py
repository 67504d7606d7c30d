"""Tests for FormContext extraction, validation and slot requests"""

import itertools

import pytest

from actionkit.core.context import ActionContext
from actionkit.core.events import ActiveLoop, SlotSet
from actionkit.forms.context import FormContext
from actionkit.forms.handler import FormHandler
from actionkit.forms.intents import allow
from actionkit.forms.mappers import FromEntity, FromIntent, FromText, FromTriggerIntent
from actionkit.forms.validators import FunctionValidator


class BookingForm(FormHandler):
    def __init__(self, slots=("cuisine", "num_people"), mappings=None, validators=None):
        self.slots = list(slots)
        self.mappings = mappings or {}
        self.validators = validators or {}
        self.required_calls = 0

    def form_name(self) -> str:
        return "booking_form"

    def required_slots(self, ctx):
        self.required_calls += 1
        return list(self.slots)

    def slot_mappings(self):
        return self.mappings

    def validator(self, slot):
        if slot in self.validators:
            return FunctionValidator(self.validators[slot])
        return super().validator(slot)

    async def submit(self, ctx, dispatcher):
        return []


@pytest.fixture
def form_context(context_factory, tracker_factory):
    def _make(handler=None, **tracker_kwargs):
        ctx = context_factory(tracker_factory(**tracker_kwargs))
        return FormContext(ctx, handler or BookingForm())

    return _make


def test_form_context_copies_tracker(context_factory, tracker_factory):
    """Test slot updates in the run never reach the request tracker"""
    # Arrange
    ctx = context_factory(tracker_factory(slots={"cuisine": "greek"}))
    form_ctx = FormContext(ctx, BookingForm())

    # Act
    form_ctx.apply_slot_sets([SlotSet(key="cuisine", value="thai"), ActiveLoop(name="x")])

    # Assert
    assert form_ctx.slot("cuisine") == "thai"
    assert ctx.slot("cuisine") == "greek"
    assert form_ctx.action_name == "booking_form"


def test_apply_slot_sets_later_events_win(form_context):
    """Test the newest SlotSet for a slot is applied last"""
    # Arrange
    ctx = form_context()

    # Act
    ctx.apply_slot_sets([SlotSet(key="cuisine", value="thai"), SlotSet(key="cuisine", value="greek")])

    # Assert
    assert ctx.slot("cuisine") == "greek"


def test_required_slots_is_stable_within_run(form_context):
    """Test required_slots returns the same list for unchanged slots"""
    # Arrange
    ctx = form_context()

    # Act
    first = ctx.required_slots()
    second = ctx.required_slots()

    # Assert
    assert first == second == ["cuisine", "num_people"]


def test_requested_slot(form_context):
    """Test requested_slot reads the reserved slot"""
    # Act & Assert
    assert form_context(slots={"requested_slot": "cuisine"}).requested_slot() == "cuisine"
    assert form_context(slots={"requested_slot": None}).requested_slot() is None
    assert form_context().requested_slot() is None


@pytest.mark.parametrize(
    "latest_action_name,active_loop,expected",
    [
        ("action_listen", "booking_form", True),
        ("action_listen", {"name": "booking_form", "validate": False}, False),
        ("action_listen", None, False),
        ("utter_greet", "booking_form", False),
    ],
)
def test_should_validate(form_context, latest_action_name, active_loop, expected):
    """Test validation requires listen, an active loop and no opt-out"""
    # Arrange
    ctx = form_context(latest_action_name=latest_action_name, active_loop=active_loop)

    # Act & Assert
    assert ctx.should_validate() is expected


def test_extract_requested_slot_from_default_entity(form_context):
    """Test the default mapping reads the entity named like the slot"""
    # Arrange
    ctx = form_context(entities=[{"entity": "cuisine", "value": "italian"}])

    # Act & Assert
    assert ctx.extract_requested_slot("cuisine") == {"cuisine": "italian"}


def test_extract_requested_slot_order_defines_precedence(form_context):
    """Test the first desired mapper yielding a value wins"""
    # Arrange
    handler = BookingForm(
        mappings={
            "cuisine": [
                FromIntent(value="from-a", intent_filter=allow("affirm")),
                FromText(intent_filter=allow("inform")),
                FromIntent(value="from-c"),
            ]
        }
    )
    ctx = form_context(handler, intent="inform", text="x")

    # Act & Assert
    assert ctx.extract_requested_slot("cuisine") == {"cuisine": "x"}


def test_extract_requested_slot_skips_mappers_without_value(form_context):
    """Test a desired mapper extracting nothing passes to the next one"""
    # Arrange
    handler = BookingForm(
        mappings={"cuisine": [FromEntity(entity="cuisine"), FromIntent(value="any")]}
    )
    ctx = form_context(handler, intent="inform")

    # Act & Assert
    assert ctx.extract_requested_slot("cuisine") == {"cuisine": "any"}


def test_extract_requested_slot_keeps_false_values(form_context):
    """Test falsy but non-None values count as extracted"""
    # Arrange
    handler = BookingForm(mappings={"outdoor": [FromIntent(value=False, intent_filter=allow("deny"))]})
    ctx = form_context(handler, intent="deny")

    # Act & Assert
    assert ctx.extract_requested_slot("outdoor") == {"outdoor": False}


def test_extract_requested_slot_with_ambiguous_entity(form_context):
    """Test two matching entities are extracted as a list"""
    # Arrange
    ctx = form_context(
        entities=[{"entity": "cuisine", "value": "greek"}, {"entity": "cuisine", "value": "thai"}]
    )

    # Act & Assert
    assert ctx.extract_requested_slot("cuisine") == {"cuisine": ["greek", "thai"]}


def test_extract_requested_slot_without_match(form_context):
    """Test extraction yields nothing when no mapper matches"""
    # Act & Assert
    assert form_context(intent="inform").extract_requested_slot("cuisine") == {}


def test_extract_other_slots_uses_same_named_entities(form_context):
    """Test other required slots are filled from their own entities"""
    # Arrange
    ctx = form_context(
        slots={"requested_slot": "cuisine"},
        entities=[{"entity": "cuisine", "value": "greek"}, {"entity": "num_people", "value": 4}],
    )

    # Act & Assert
    assert ctx.extract_other_slots() == {"num_people": 4}


def test_extract_other_slots_ignores_unrelated_entity_names(form_context):
    """Test an entity named differently from the slot is not attributed"""
    # Arrange
    handler = BookingForm(mappings={"num_people": [FromEntity(entity="number")]})
    ctx = form_context(
        handler,
        slots={"requested_slot": "cuisine"},
        entities=[{"entity": "number", "value": 4}],
    )

    # Act & Assert
    assert ctx.extract_other_slots() == {}


def test_extract_other_slots_with_role(form_context):
    """Test role constrained mappings fill other slots when the role matches"""
    # Arrange
    handler = BookingForm(
        slots=("origin", "destination"),
        mappings={
            "origin": [FromEntity(entity="city", role="from")],
            "destination": [FromEntity(entity="city", role="to")],
        },
    )
    ctx = form_context(
        handler,
        slots={"requested_slot": "origin"},
        entities=[{"entity": "city", "value": "Rome", "role": "to"}],
    )

    # Act & Assert
    assert ctx.extract_other_slots() == {"destination": "Rome"}


def test_extract_other_slots_ignores_non_entity_mappers(form_context):
    """Test only entity mappings fill slots that were not asked for"""
    # Arrange
    handler = BookingForm(
        slots=("cuisine", "feedback"),
        mappings={"feedback": [FromText(), FromIntent(value="none")]},
    )
    ctx = form_context(handler, slots={"requested_slot": "cuisine"}, text="great")

    # Act & Assert
    assert ctx.extract_other_slots() == {}


def test_trigger_slot_values(form_context):
    """Test trigger-intent mappings yield their value for the trigger intent"""
    # Arrange
    handler = BookingForm(
        slots=("cuisine", "seating"),
        mappings={"seating": [FromTriggerIntent(value="outdoor", intent_filter=allow("book_terrace"))]},
    )

    # Act
    triggered = form_context(handler, intent="book_terrace").trigger_slot_values(["cuisine", "seating"])
    other = form_context(handler, intent="greet").trigger_slot_values(["cuisine", "seating"])

    # Assert
    assert triggered == {"seating": "outdoor"}
    assert other == {}


@pytest.mark.asyncio
async def test_validate_slots_shares_one_timestamp(context_factory, tracker_factory, dispatcher):
    """Test every SlotSet of one call carries the same timestamp"""
    # Arrange
    clock = itertools.count(100).__next__
    ctx = FormContext(ActionContext(tracker_factory(), clock=clock), BookingForm())

    # Act
    events = await ctx.validate_slots(dispatcher, {"cuisine": "greek", "num_people": 2})

    # Assert
    assert [(e.key, e.value) for e in events] == [("cuisine", "greek"), ("num_people", 2)]
    assert {e.timestamp for e in events} == {100}


@pytest.mark.asyncio
async def test_validate_slots_merges_validator_output(form_context, dispatcher):
    """Test validators may set several slots or none"""
    # Arrange
    handler = BookingForm(
        validators={
            "num_people": lambda ctx, d, v: {"num_people": int(v), "large_party": int(v) > 6},
            "cuisine": lambda ctx, d, v: {},
        }
    )
    ctx = form_context(handler)

    # Act
    events = await ctx.validate_slots(dispatcher, {"cuisine": "x", "num_people": "8"})

    # Assert
    assert {e.key: e.value for e in events} == {"num_people": 8, "large_party": True}


@pytest.mark.asyncio
async def test_validate_slots_propagates_validator_error(form_context, dispatcher):
    """Test a failing validator aborts the whole call"""

    # Arrange
    def failing(ctx, dispatcher, value):
        raise RuntimeError("lookup failed")

    ctx = form_context(BookingForm(validators={"num_people": failing}))

    # Act & Assert
    with pytest.raises(RuntimeError, match="lookup failed"):
        await ctx.validate_slots(dispatcher, {"cuisine": "greek", "num_people": 2})


@pytest.mark.asyncio
async def test_request_next_slot_asks_first_missing(form_context, dispatcher, fixed_clock):
    """Test the first unfilled slot is requested with the slots as arguments"""
    # Arrange
    ctx = form_context(slots={"cuisine": "greek"})

    # Act
    events = await ctx.request_next_slot(dispatcher)

    # Assert
    assert events == [SlotSet(key="requested_slot", value="num_people", timestamp=fixed_clock())]
    assert dispatcher.to_list() == [{"template": "utter_ask_num_people", "cuisine": "greek"}]


@pytest.mark.asyncio
async def test_request_next_slot_when_complete(form_context, dispatcher):
    """Test nothing is requested once every slot is filled"""
    # Arrange
    ctx = form_context(slots={"cuisine": "greek", "num_people": 2})

    # Act
    events = await ctx.request_next_slot(dispatcher)

    # Assert
    assert events == []
    assert len(dispatcher) == 0


def test_deactivation_events(form_context, fixed_clock):
    """Test deactivation ends the loop and clears the requested slot"""
    # Act
    events = form_context().deactivation_events()

    # Assert
    assert events == [
        ActiveLoop(name="", timestamp=fixed_clock()),
        SlotSet(key="requested_slot", value=None, timestamp=fixed_clock()),
    ]


@pytest.mark.asyncio
async def test_request_next_slot_template_survives_colliding_slot_names(form_context, dispatcher):
    """Test slots named like message fields do not replace the ask template"""
    # Arrange
    handler = BookingForm(slots=("text", "template", "city"))
    ctx = form_context(handler, slots={"text": "hello", "template": "x"})

    # Act
    await ctx.request_next_slot(dispatcher)

    # Assert
    assert dispatcher.to_list() == [{"template": "utter_ask_city"}]
