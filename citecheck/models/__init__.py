"""Model exports for records, results, configuration and the handoff payload."""

from citecheck.models.config import (
    HANDOFF_TRIGGER_THRESHOLD,
    STRICTNESS_PRESETS,
    ValidatorConfig,
    build_config,
    build_config_from_mapping,
)
from citecheck.models.enums import (
    ConflictType,
    CreatorRole,
    GapSeverity,
    GapType,
    IssueCategory,
    RecordKind,
    RegionCause,
    RelationType,
    Severity,
    StrictnessLevel,
    ValidationState,
)
from citecheck.models.handoff import (
    EXPORT_FORMAT,
    PAYLOAD_VERSION,
    HandoffExport,
    HandoffPayload,
    InvalidCitation,
    ValidatedCitation,
)
from citecheck.models.records import CitationRecord, CitationRelation, Creator
from citecheck.models.results import (
    CertaintyBoundary,
    CertaintyFactors,
    CertaintyScore,
    ContradictionHint,
    EpistemicGap,
    EpistemicSummary,
    ExplorationFeatures,
    UncertaintyRegion,
    ValidationIssue,
    ValidationResult,
    clamp_unit,
)

__all__ = [
    "CertaintyBoundary",
    "CertaintyFactors",
    "CertaintyScore",
    "CitationRecord",
    "CitationRelation",
    "ConflictType",
    "ContradictionHint",
    "Creator",
    "CreatorRole",
    "EXPORT_FORMAT",
    "EpistemicGap",
    "EpistemicSummary",
    "ExplorationFeatures",
    "GapSeverity",
    "GapType",
    "HANDOFF_TRIGGER_THRESHOLD",
    "HandoffExport",
    "HandoffPayload",
    "InvalidCitation",
    "IssueCategory",
    "PAYLOAD_VERSION",
    "RecordKind",
    "RegionCause",
    "RelationType",
    "STRICTNESS_PRESETS",
    "Severity",
    "StrictnessLevel",
    "UncertaintyRegion",
    "ValidatedCitation",
    "ValidationIssue",
    "ValidationResult",
    "ValidationState",
    "ValidatorConfig",
    "build_config",
    "build_config_from_mapping",
    "clamp_unit",
]
