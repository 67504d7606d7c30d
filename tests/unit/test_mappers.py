"""Tests for slot mappers"""

import pytest

from actionkit.core.errors import ConfigError
from actionkit.forms.intents import allow, block
from actionkit.forms.mappers import (
    FromEntity,
    FromIntent,
    FromText,
    FromTriggerIntent,
    SlotMappings,
    parse_mapper,
)


def test_from_entity_extracts_latest_value(context_factory, tracker_factory):
    """Test FromEntity reads the matching entity"""
    # Arrange
    ctx = context_factory(tracker_factory(entities=[{"entity": "cuisine", "value": "greek"}]))

    # Act & Assert
    assert FromEntity(entity="cuisine").extract(ctx) == "greek"
    assert FromEntity(entity="number").extract(ctx) is None


def test_from_entity_respects_role(context_factory, tracker_factory):
    """Test FromEntity with a role only matches that role"""
    # Arrange
    ctx = context_factory(
        tracker_factory(
            entities=[
                {"entity": "city", "value": "Paris", "role": "from"},
                {"entity": "city", "value": "Rome", "role": "to"},
            ]
        )
    )

    # Act & Assert
    assert FromEntity(entity="city", role="to").extract(ctx) == "Rome"
    assert FromEntity(entity="city", role="to").has_role_or_group()
    assert not FromEntity(entity="city").has_role_or_group()


def test_from_intent_returns_constant(context_factory):
    """Test FromIntent always yields its value"""
    # Arrange
    mapper = FromIntent(value=True, intent_filter=allow("affirm"))

    # Act & Assert
    assert mapper.extract(context_factory()) is True
    assert mapper.desires("affirm")
    assert not mapper.desires("deny")


def test_from_trigger_intent_never_extracts(context_factory, tracker_factory):
    """Test FromTriggerIntent only yields a value at activation"""
    # Arrange
    mapper = FromTriggerIntent(value="dine_in", intent_filter=allow("book_table"))
    ctx = context_factory(tracker_factory(intent="book_table"))

    # Act & Assert
    assert mapper.extract(ctx) is None
    assert mapper.trigger_value(ctx) == "dine_in"
    assert mapper.trigger_value(context_factory(tracker_factory(intent="greet"))) is None


def test_from_text_returns_message_text(context_factory, tracker_factory):
    """Test FromText yields the raw message"""
    # Arrange
    ctx = context_factory(tracker_factory(text="a quiet table please"))

    # Act & Assert
    assert FromText().extract(ctx) == "a quiet table please"


def test_mapper_without_filter_desires_any_intent():
    """Test mappers without an intent filter always apply"""
    # Act & Assert
    assert FromText().desires(None)
    assert FromText().desires("greet")
    assert not FromText(intent_filter=block("greet")).desires("greet")


def test_slot_mappings_default_to_same_named_entity():
    """Test unmapped slots fall back to FromEntity(slot)"""
    # Arrange
    mappings = SlotMappings({"feedback": [FromText()]})

    # Act & Assert
    assert mappings.mapping("cuisine") == [FromEntity(entity="cuisine")]
    assert mappings.mapping("feedback") == [FromText()]


def test_parse_mapper_builds_every_type():
    """Test parse_mapper handles the serialized mapper types"""
    # Act
    entity = parse_mapper({"type": "from_entity", "entity": "city", "role": "to", "intent": "inform"})
    intent = parse_mapper({"type": "from_intent", "value": False, "intent": ["deny"]})
    trigger = parse_mapper({"type": "from_trigger_intent", "value": "x", "not_intent": "greet"})
    text = parse_mapper({"type": "from_text"})

    # Assert
    assert entity == FromEntity(entity="city", role="to", intent_filter=allow("inform"))
    assert intent == FromIntent(value=False, intent_filter=allow("deny"))
    assert trigger == FromTriggerIntent(value="x", intent_filter=block("greet"))
    assert text == FromText()


def test_parse_mapper_rejects_unknown_type():
    """Test unknown mapper types raise ConfigError"""
    # Act & Assert
    with pytest.raises(ConfigError, match="invalid slot mapper type"):
        parse_mapper({"type": "from_magic"})


def test_parse_mapper_requires_entity():
    """Test from_entity without an entity raises ConfigError"""
    # Act & Assert
    with pytest.raises(ConfigError, match="requires an 'entity'"):
        parse_mapper({"type": "from_entity"})


def test_slot_mappings_config_round_trip():
    """Test mappings survive to_config/from_config"""
    # Arrange
    config = {
        "cuisine": [{"type": "from_entity", "entity": "cuisine", "intent": ["inform"]}],
        "outdoor": [{"type": "from_intent", "value": True, "intent": ["affirm"]}],
    }

    # Act
    mappings = SlotMappings.from_config(config)

    # Assert
    assert mappings.to_config() == config
