"""Validator configuration with strictness presets."""

from __future__ import annotations

from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from citecheck.exceptions import ConfigurationError
from citecheck.models.enums import StrictnessLevel
from citecheck.models.results import ExplorationFeatures

# Preset bundles: (require_persistent_identifiers, exploration_threshold, minimum_valid_certainty).
STRICTNESS_PRESETS: Dict[StrictnessLevel, Dict[str, Any]] = {
    StrictnessLevel.STRICT: {
        "require_persistent_identifiers": True,
        "exploration_threshold": 0.8,
        "minimum_valid_certainty": 0.5,
    },
    StrictnessLevel.STANDARD: {
        "require_persistent_identifiers": False,
        "exploration_threshold": 0.7,
        "minimum_valid_certainty": 0.0,
    },
    StrictnessLevel.LENIENT: {
        "require_persistent_identifiers": False,
        "exploration_threshold": 0.5,
        "minimum_valid_certainty": 0.0,
    },
}

# Host-side contract: the exploration tool is invoked when any score drops below this.
HANDOFF_TRIGGER_THRESHOLD = 0.7


def _all_features() -> ExplorationFeatures:
    return ExplorationFeatures(
        use_contradiction_detection=True,
        use_mood_scoring=True,
        use_mystery_clustering=True,
        use_fog_trail_visualization=True,
    )


class ValidatorConfig(BaseModel):
    """Explicit configuration passed to every component.

    Build one with ``ValidatorConfig.from_strictness`` (or ``build_config``)
    so the preset bundle is applied before any override.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strictness: StrictnessLevel = StrictnessLevel.STANDARD
    require_persistent_identifiers: bool = False
    exploration_threshold: float = Field(ge=0.0, le=1.0, default=0.7)
    minimum_valid_certainty: float = Field(ge=0.0, le=1.0, default=0.0)
    low_certainty_threshold: float = Field(
        ge=0.0,
        le=1.0,
        default=0.4,
        description="Scores below this form the low-certainty region; must stay below exploration_threshold.",
    )
    max_title_group_size: int = Field(
        ge=2,
        default=50,
        description="Largest same-title group compared pairwise before contradiction detection refuses the batch.",
    )
    exploration_tool_name: str = Field(default="Fogbinder", min_length=1)
    exploration_features: ExplorationFeatures = Field(default_factory=_all_features)

    @model_validator(mode="after")
    def _check_threshold_order(self) -> "ValidatorConfig":
        if self.low_certainty_threshold >= self.exploration_threshold:
            raise ValueError(
                f"low_certainty_threshold ({self.low_certainty_threshold}) must be lower than "
                f"exploration_threshold ({self.exploration_threshold})"
            )
        return self

    @classmethod
    def from_strictness(
        cls,
        strictness: Union[StrictnessLevel, str] = StrictnessLevel.STANDARD,
        **overrides: Any,
    ) -> "ValidatorConfig":
        """Apply the named preset, then the explicit overrides."""
        level = StrictnessLevel(strictness)
        merged: Dict[str, Any] = {"strictness": level, **STRICTNESS_PRESETS[level]}
        merged.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(merged)


def build_config(
    strictness: Union[StrictnessLevel, str] = StrictnessLevel.STANDARD,
    **overrides: Any,
) -> ValidatorConfig:
    """Fail-fast config construction; invalid values raise ConfigurationError."""
    try:
        return ValidatorConfig.from_strictness(strictness, **overrides)
    except ValueError as exc:
        # pydantic.ValidationError subclasses ValueError; so does an unknown strictness.
        raise ConfigurationError(f"Invalid validator configuration: {exc}") from exc


def build_config_from_mapping(data: Dict[str, Any]) -> ValidatorConfig:
    """Build a config from a plain mapping, e.g. a parsed YAML section."""
    data = dict(data)
    strictness = data.pop("strictness", StrictnessLevel.STANDARD)
    return build_config(strictness, **data)


__all__ = [
    "HANDOFF_TRIGGER_THRESHOLD",
    "STRICTNESS_PRESETS",
    "ValidatorConfig",
    "build_config",
    "build_config_from_mapping",
]
