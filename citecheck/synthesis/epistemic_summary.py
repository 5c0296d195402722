"""Epistemic summary of a validated batch.

Aggregates batch statistics, detects epistemic gaps (what is missing or
unclear), and picks a recommendation for the researcher. Also states the
certainty boundary: what rule validation covers and what it hands off.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from citecheck.models import (
    CertaintyBoundary,
    EpistemicGap,
    EpistemicSummary,
    GapSeverity,
    GapType,
    UncertaintyRegion,
    ValidationResult,
    ValidationState,
    ValidatorConfig,
)

logger = logging.getLogger(__name__)

_INCOMPLETE_HIGH_SHARE = 0.3
_MISSING_IDENTIFIER_SHARE = 0.5
_AMBIGUOUS_REGION_LEVEL = 0.7
_WELL_STRUCTURED_BAND = 0.8
_NEEDS_IMPROVEMENT_BAND = 0.5
_MINOR_UNCERTAINTY_SHARE = 0.2

VALIDATED_ASPECTS = (
    "Structural completeness of records",
    "Metadata format consistency",
    "Required field presence",
    "Date format validation",
    "URL format validation",
    "DOI/ISBN format checking",
)

BEYOND_VALIDATION = (
    "Semantic meaning of record content",
    "Contradictions between source claims",
    "Epistemic quality of sources",
    "Mood/tone of source material",
    "Mystery clustering of uncertain regions",
    "FogTrail visualization of ambiguity",
)


def is_confidently_validated(result: ValidationResult, config: ValidatorConfig) -> bool:
    """VALID and at or above the exploration threshold.

    Shared by the summary counts and the payload partition so both agree.
    """
    return (
        result.state == ValidationState.VALID
        and result.certainty.score >= config.exploration_threshold
    )


def detect_epistemic_gaps(
    results: Sequence[ValidationResult],
    regions: Sequence[UncertaintyRegion],
) -> List[EpistemicGap]:
    """Identify incomplete metadata, missing identifiers and ambiguous sources."""
    gaps: List[EpistemicGap] = []
    total = len(results)

    incomplete = [r for r in results if r.state == ValidationState.INCOMPLETE]
    if incomplete:
        gaps.append(
            EpistemicGap(
                gap_type=GapType.INCOMPLETE_METADATA,
                severity=(
                    GapSeverity.HIGH
                    if len(incomplete) > total * _INCOMPLETE_HIGH_SHARE
                    else GapSeverity.MEDIUM
                ),
                description=f"{len(incomplete)} records have incomplete metadata",
                suggestion="Add missing required fields (authors, dates, publishers)",
                # A data-entry problem, not an epistemic one.
                explorable_downstream=False,
            )
        )

    no_doi_or_isbn = [r for r in results if not r.record.doi and not r.record.isbn]
    if len(no_doi_or_isbn) > total * _MISSING_IDENTIFIER_SHARE:
        gaps.append(
            EpistemicGap(
                gap_type=GapType.MISSING_IDENTIFIERS,
                severity=GapSeverity.MEDIUM,
                description=f"{len(no_doi_or_isbn)} records lack a DOI or ISBN",
                suggestion="Add DOIs or ISBNs where possible for better tracking",
                explorable_downstream=True,
            )
        )

    ambiguous = [region for region in regions if region.uncertainty_level > _AMBIGUOUS_REGION_LEVEL]
    if ambiguous:
        gaps.append(
            EpistemicGap(
                gap_type=GapType.AMBIGUOUS_SOURCES,
                severity=GapSeverity.HIGH,
                description=f"{len(ambiguous)} high-uncertainty regions detected",
                suggestion="Explore these regions downstream",
                explorable_downstream=True,
            )
        )

    return gaps


def recommendation_for(overall_certainty: float, tool_name: str) -> str:
    if overall_certainty >= _WELL_STRUCTURED_BAND:
        return (
            f"Bibliography is well-structured. Minor uncertainties can be explored in {tool_name}."
        )
    if overall_certainty >= _NEEDS_IMPROVEMENT_BAND:
        return (
            "Bibliography needs improvement. Address incomplete records, "
            f"then explore uncertainties in {tool_name}."
        )
    return (
        "Bibliography requires significant work. Complete missing metadata "
        f"before exploring in {tool_name}."
    )


def build_epistemic_summary(
    results: Sequence[ValidationResult],
    regions: Sequence[UncertaintyRegion],
    config: ValidatorConfig,
) -> EpistemicSummary:
    """Summarize a batch.

    overall_certainty is the share of confidently validated records
    (validated / total), not a mean of scores.
    """
    total = len(results)
    validated = sum(1 for r in results if is_confidently_validated(r, config))
    invalid = sum(
        1
        for r in results
        if r.state in (ValidationState.INCOMPLETE, ValidationState.INCONSISTENT)
    )
    overall = round(validated / max(total, 1), 2)
    gaps = detect_epistemic_gaps(results, regions)

    logger.info(
        "Epistemic summary: %d/%d validated, %d gaps, overall certainty %.2f",
        validated,
        total,
        len(gaps),
        overall,
    )
    return EpistemicSummary(
        total_records=total,
        validated_count=validated,
        uncertain_count=total - validated,
        invalid_count=invalid,
        overall_certainty=overall,
        epistemic_gaps=tuple(gaps),
        recommendation=recommendation_for(overall, config.exploration_tool_name),
    )


def determine_certainty_boundary(
    results: Sequence[ValidationResult],
    config: ValidatorConfig,
) -> CertaintyBoundary:
    """What rule validation can and cannot settle for this batch."""
    tool = config.exploration_tool_name
    uncertain = sum(1 for r in results if r.certainty.score < config.exploration_threshold)

    if uncertain == 0:
        recommendation = f"All records validated. No {tool} exploration required."
    elif uncertain < len(results) * _MINOR_UNCERTAINTY_SHARE:
        recommendation = f"{uncertain} records require {tool} exploration for uncertainty resolution."
    else:
        recommendation = (
            f"Significant uncertainty detected ({uncertain} records). "
            f"Recommend comprehensive {tool} analysis."
        )

    return CertaintyBoundary(
        validated=VALIDATED_ASPECTS,
        beyond_validation=BEYOND_VALIDATION,
        handoff_recommendation=recommendation,
    )
