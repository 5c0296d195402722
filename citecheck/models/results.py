"""Validation outputs: issues, scores, results, regions, hints and summaries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pydantic import Field, field_validator

from citecheck.models.enums import (
    ConflictType,
    GapSeverity,
    GapType,
    IssueCategory,
    RegionCause,
    Severity,
    ValidationState,
)
from citecheck.models.records import CitationRecord, WireModel


def clamp_unit(value: float) -> float:
    """Clamp a score, level or confidence into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


class ValidationIssue(WireModel):
    field: str
    message: str
    severity: Severity
    category: IssueCategory
    suggestion: Optional[str] = None
    requires_exploration: bool = False

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


class CertaintyFactors(WireModel):
    structural: float
    consistency: float
    referential: float

    @field_validator("structural", "consistency", "referential", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class CertaintyScore(WireModel):
    score: float
    factors: CertaintyFactors
    reasoning: str = ""

    @field_validator("score", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class ValidationResult(WireModel):
    record: CitationRecord
    state: ValidationState
    issues: Tuple[ValidationIssue, ...] = ()
    certainty: CertaintyScore
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.is_error]

    @property
    def exploration_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.requires_exploration]


class ExplorationFeatures(WireModel):
    """Downstream exploration features, used both as request echo and per-region hints."""

    use_contradiction_detection: bool = False
    use_mood_scoring: bool = False
    use_mystery_clustering: bool = False
    use_fog_trail_visualization: bool = False

    def masked_by(self, enabled: "ExplorationFeatures") -> "ExplorationFeatures":
        """Keep only the suggestions whose feature is enabled."""
        return ExplorationFeatures(
            use_contradiction_detection=self.use_contradiction_detection and enabled.use_contradiction_detection,
            use_mood_scoring=self.use_mood_scoring and enabled.use_mood_scoring,
            use_mystery_clustering=self.use_mystery_clustering and enabled.use_mystery_clustering,
            use_fog_trail_visualization=self.use_fog_trail_visualization and enabled.use_fog_trail_visualization,
        )


class UncertaintyRegion(WireModel):
    id: str
    cause: RegionCause
    record_ids: Tuple[str, ...]
    description: str
    suggested_exploration: ExplorationFeatures = Field(default_factory=ExplorationFeatures)
    uncertainty_level: float

    @field_validator("uncertainty_level", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class ContradictionHint(WireModel):
    record_a: str
    record_b: str
    conflict_type: ConflictType
    description: str
    confidence: float
    requires_semantic_analysis: bool

    @field_validator("confidence", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class EpistemicGap(WireModel):
    gap_type: GapType
    severity: GapSeverity
    description: str
    suggestion: str
    explorable_downstream: bool


class EpistemicSummary(WireModel):
    total_records: int = Field(ge=0)
    validated_count: int = Field(ge=0)
    uncertain_count: int = Field(ge=0)
    invalid_count: int = Field(ge=0)
    overall_certainty: float
    epistemic_gaps: Tuple[EpistemicGap, ...] = ()
    recommendation: str

    @field_validator("overall_certainty", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class CertaintyBoundary(WireModel):
    """What rule validation covers, what it cannot, and the handoff point."""

    validated: Tuple[str, ...]
    beyond_validation: Tuple[str, ...]
    handoff_recommendation: str
