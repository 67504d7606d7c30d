"""Configuration models for actionkit.

Defined using Pydantic for validation and YAML serialization support.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from actionkit.forms.mappers import SlotMappings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Level of the actionkit logger")
    json_file: str | None = Field(
        default=None, description="Rotating file receiving JSON log records"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class SettingsConfig(BaseModel):
    """Global settings configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class FormConfig(BaseModel):
    """A form declared in YAML.

    Slot mappings use the serialized mapper format, e.g.
    ``{"type": "from_entity", "entity": "cuisine", "intent": ["inform"]}``.
    """

    description: str = ""
    required_slots: list[str] = Field(min_length=1)
    slot_mappings: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    validators: dict[str, str] = Field(
        default_factory=dict, description="Slot name to registered validator name"
    )
    validation_error_templates: dict[str, str] = Field(
        default_factory=dict, description="Slot name to template uttered on invalid values"
    )
    submit_template: str | None = Field(
        default=None, description="Template uttered when the form is submitted"
    )

    @field_validator("slot_mappings", mode="before")
    @classmethod
    def _wrap_single_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                slot: [entries] if isinstance(entries, dict) else entries
                for slot, entries in value.items()
            }
        return value

    def mappings(self) -> SlotMappings:
        return SlotMappings.from_config(self.slot_mappings)


class ActionKitConfig(BaseModel):
    """Main configuration model."""

    version: str = "1.0"
    settings: SettingsConfig = Field(default_factory=SettingsConfig)
    forms: dict[str, FormConfig] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ActionKitConfig":
        """Load configuration from YAML file."""
        from actionkit.config.loader import ConfigLoader

        return ConfigLoader.load(path)
