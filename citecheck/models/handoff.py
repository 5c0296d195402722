"""Handoff payload models: the wire contract consumed by the exploration tool."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Tuple

from pydantic import Field

from citecheck.models.records import CitationRecord, WireModel
from citecheck.models.results import (
    ContradictionHint,
    EpistemicSummary,
    ExplorationFeatures,
    UncertaintyRegion,
    ValidationResult,
)

# Bump on any wire change that is not purely additive.
PAYLOAD_VERSION = "1.0.0"
EXPORT_FORMAT = "citecheck-to-fogbinder"


class ValidatedCitation(WireModel):
    record: CitationRecord
    validation_result: ValidationResult
    certainty: float
    certainties: Tuple[str, ...] = ()


class InvalidCitation(WireModel):
    record: CitationRecord
    validation_result: ValidationResult
    reason: str
    uncertainties: Tuple[str, ...] = ()


class HandoffPayload(WireModel):
    version: Literal["1.0.0"] = PAYLOAD_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    validated_citations: Tuple[ValidatedCitation, ...] = ()
    invalid_citations: Tuple[InvalidCitation, ...] = ()
    uncertainty_regions: Tuple[UncertaintyRegion, ...] = ()
    contradiction_hints: Tuple[ContradictionHint, ...] = ()
    epistemic_summary: EpistemicSummary
    exploration_features: ExplorationFeatures


class HandoffExport(WireModel):
    """Envelope around one payload, as written to disk or sent downstream."""

    format: Literal["citecheck-to-fogbinder"] = EXPORT_FORMAT
    format_version: Literal["1.0.0"] = PAYLOAD_VERSION
    exported: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload: HandoffPayload
