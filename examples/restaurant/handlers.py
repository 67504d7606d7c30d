"""Restaurant form written in code instead of YAML.

Shows the optional hooks: custom mappings, a validator that rewrites the
value it receives and a submit step that reads the filled slots.
"""

import logging
from typing import Any

from actionkit import ActionRegistry, FormAction, FormHandler, FromEntity, FromIntent, FromText
from actionkit.forms import FunctionValidator, allow

from .validators import CUISINES

logger = logging.getLogger(__name__)


def validate_cuisine(ctx, dispatcher, value: Any) -> dict[str, Any]:
    if isinstance(value, str) and value.lower() in CUISINES:
        return {"cuisine": value.lower()}
    dispatcher.utter_message(template="utter_wrong_cuisine")
    return {"cuisine": None}


def validate_num_people(ctx, dispatcher, value: Any) -> dict[str, Any]:
    try:
        people = int(value)
    except (TypeError, ValueError):
        people = 0
    if people > 0:
        return {"num_people": people}
    dispatcher.utter_message(template="utter_wrong_num_people")
    return {"num_people": None}


class RestaurantForm(FormHandler):
    """Collects the details of a restaurant booking."""

    def form_name(self) -> str:
        return "restaurant_form"

    def required_slots(self, ctx) -> list[str]:
        return ["cuisine", "num_people", "outdoor_seating", "preferences"]

    def slot_mappings(self):
        return {
            "cuisine": [FromEntity(entity="cuisine", intent_filter=allow("inform", "request_restaurant"))],
            "num_people": [FromEntity(entity="number")],
            "outdoor_seating": [
                FromEntity(entity="seating"),
                FromIntent(value=True, intent_filter=allow("affirm")),
                FromIntent(value=False, intent_filter=allow("deny")),
            ],
            "preferences": [
                FromIntent(value="no additional preferences", intent_filter=allow("deny")),
                FromText(intent_filter=allow("inform")),
            ],
        }

    def validator(self, slot: str):
        if slot == "cuisine":
            return FunctionValidator(validate_cuisine)
        if slot == "num_people":
            return FunctionValidator(validate_num_people)
        return super().validator(slot)

    async def submit(self, ctx, dispatcher):
        logger.info(f"Booking table for {ctx.slot('num_people')} ({ctx.slot('cuisine')})")
        dispatcher.utter_message(template="utter_submit")
        return []


def build_registry() -> ActionRegistry:
    return ActionRegistry([FormAction(RestaurantForm())])
