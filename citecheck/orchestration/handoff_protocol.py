"""
Structured Handoff Protocol

Versioned, self-describing JSON payload handed from rule validation to the
exploration tool. This module is the only place that fixes the wire shape;
every other component returns plain model values.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from citecheck.models import (
    HANDOFF_TRIGGER_THRESHOLD,
    PAYLOAD_VERSION,
    CitationRelation,
    ContradictionHint,
    EpistemicSummary,
    HandoffExport,
    HandoffPayload,
    InvalidCitation,
    UncertaintyRegion,
    ValidatedCitation,
    ValidationResult,
    ValidationState,
    ValidatorConfig,
)
from citecheck.synthesis import (
    build_epistemic_summary,
    detect_contradictions,
    detect_uncertainty_regions,
    is_confidently_validated,
)


class HandoffProtocol:
    """Builds and checks handoff payloads for the exploration tool."""

    @staticmethod
    def create_validated_citation(result: ValidationResult) -> ValidatedCitation:
        """What can be said with certainty about a validated record."""
        certainties: List[str] = []
        factors = result.certainty.factors

        if factors.structural >= 0.9:
            certainties.append("Structurally complete")
        if factors.consistency >= 0.9:
            certainties.append("Internally consistent")
        if factors.referential >= 0.7:
            certainties.append("Has persistent identifier")
        if result.record.doi:
            certainties.append(f"DOI: {result.record.doi}")

        return ValidatedCitation(
            record=result.record,
            validation_result=result,
            certainty=result.certainty.score,
            certainties=tuple(certainties),
        )

    @staticmethod
    def create_invalid_citation(
        result: ValidationResult, config: ValidatorConfig
    ) -> InvalidCitation:
        """Why a record failed or stayed ambiguous."""
        uncertainties = [issue.message for issue in result.exploration_issues]

        if result.certainty.score < config.low_certainty_threshold:
            uncertainties.append("Low confidence in validation")
        if result.state == ValidationState.UNCERTAIN:
            uncertainties.append("Contains ambiguities")

        reason = result.state.value
        if result.issues:
            reason += f": {result.issues[0].message}"

        return InvalidCitation(
            record=result.record,
            validation_result=result,
            reason=reason,
            uncertainties=tuple(uncertainties),
        )

    @staticmethod
    def create_payload(
        results: Sequence[ValidationResult],
        regions: Sequence[UncertaintyRegion],
        hints: Sequence[ContradictionHint],
        summary: EpistemicSummary,
        config: ValidatorConfig,
    ) -> HandoffPayload:
        """
        Assemble a payload from already-computed parts.

        Args:
            results: Validation results, in batch order
            regions: Detected uncertainty regions
            hints: Detected contradiction hints
            summary: Epistemic summary for the batch
            config: Validator configuration (thresholds, enabled features)

        Returns:
            HandoffPayload instance
        """
        validated: List[ValidatedCitation] = []
        invalid: List[InvalidCitation] = []
        for result in results:
            if is_confidently_validated(result, config):
                validated.append(HandoffProtocol.create_validated_citation(result))
            else:
                invalid.append(HandoffProtocol.create_invalid_citation(result, config))

        return HandoffPayload(
            validated_citations=tuple(validated),
            invalid_citations=tuple(invalid),
            uncertainty_regions=tuple(regions),
            contradiction_hints=tuple(hints),
            epistemic_summary=summary,
            exploration_features=config.exploration_features,
        )

    @staticmethod
    def build_payload(
        results: Sequence[ValidationResult],
        config: ValidatorConfig,
        relations: Optional[Sequence[CitationRelation]] = None,
    ) -> HandoffPayload:
        """
        Run region detection, contradiction detection and the summary, then
        assemble the payload.

        Raises:
            TitleGroupTooLargeError: If a same-title group exceeds the cap
        """
        regions = detect_uncertainty_regions(results, config, relations)
        hints = detect_contradictions(results, config, relations)
        summary = build_epistemic_summary(results, regions, config)
        return HandoffProtocol.create_payload(results, regions, hints, summary, config)

    @staticmethod
    def create_export(payload: HandoffPayload) -> HandoffExport:
        """Wrap a payload in the export envelope."""
        return HandoffExport(payload=payload)

    @staticmethod
    def to_wire(payload: HandoffPayload | HandoffExport) -> Dict[str, Any]:
        """camelCase, JSON-compatible dictionary."""
        return payload.model_dump(mode="json", by_alias=True)

    @staticmethod
    def to_json(payload: HandoffPayload | HandoffExport, indent: int = 2) -> str:
        return json.dumps(HandoffProtocol.to_wire(payload), indent=indent)

    @staticmethod
    def from_wire(data: Dict[str, Any]) -> HandoffPayload:
        """Rebuild a payload from its wire dictionary."""
        HandoffProtocol.validate_wire_payload(data)
        return HandoffPayload.model_validate(data)

    @staticmethod
    def validate_wire_payload(data: Dict[str, Any]) -> bool:
        """
        Validate a decoded payload's top-level shape.

        Args:
            data: Decoded JSON object

        Returns:
            True if valid

        Raises:
            ValueError: If a required key is missing, mistyped, or the version differs
        """
        if not isinstance(data, dict):
            raise ValueError("Payload must be a JSON object")

        properties = HANDOFF_SCHEMA["properties"]
        for key in HANDOFF_SCHEMA["required"]:
            if key not in data:
                raise ValueError(f"Payload must have {key}")
            expected = properties[key]["type"]
            if expected == "array" and not isinstance(data[key], list):
                raise ValueError(f"Payload field {key} must be an array")
            if expected == "object" and not isinstance(data[key], dict):
                raise ValueError(f"Payload field {key} must be an object")
            if expected == "string" and not isinstance(data[key], str):
                raise ValueError(f"Payload field {key} must be a string")

        if data["version"] != PAYLOAD_VERSION:
            raise ValueError(
                f"Unsupported payload version {data['version']!r}; expected {PAYLOAD_VERSION}"
            )

        return True


def requires_exploration_handoff(
    results: Sequence[ValidationResult],
    threshold: float = HANDOFF_TRIGGER_THRESHOLD,
) -> bool:
    """Host trigger convention: hand off when any score drops below the threshold."""
    return any(result.certainty.score < threshold for result in results)


# JSON Schema for the top-level wire shape (consumers may validate strictly)
HANDOFF_SCHEMA = {
    "type": "object",
    "required": [
        "version",
        "timestamp",
        "validatedCitations",
        "invalidCitations",
        "uncertaintyRegions",
        "contradictionHints",
        "epistemicSummary",
        "explorationFeatures",
    ],
    "properties": {
        "version": {"type": "string", "const": PAYLOAD_VERSION},
        "timestamp": {"type": "string"},
        "validatedCitations": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["record", "validationResult", "certainty", "certainties"],
            },
        },
        "invalidCitations": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["record", "validationResult", "reason", "uncertainties"],
            },
        },
        "uncertaintyRegions": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "cause", "recordIds", "uncertaintyLevel"],
            },
        },
        "contradictionHints": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["recordA", "recordB", "conflictType", "confidence"],
            },
        },
        "epistemicSummary": {
            "type": "object",
            "required": ["totalRecords", "validatedCount", "overallCertainty", "recommendation"],
        },
        "explorationFeatures": {"type": "object"},
    },
}
