"""Certainty scoring.

Three factors, each in [0, 1], combined by a fixed weighting:

* structural  -- share of the kind's required fields that are present;
* consistency -- 1 - e / (e + 10) for e error-severity issues, so zero errors
  scores 1.0 and one error still leaves 0.91;
* referential -- 0.5 baseline, +0.3 for a well-formed DOI, +0.2 for a
  well-formed ISBN, +0.1 for a well-formed URL, capped at 1.0.

score = 0.5 * structural + 0.3 * consistency + 0.2 * referential
"""

from __future__ import annotations

from typing import Sequence

from citecheck.models import (
    CertaintyFactors,
    CertaintyScore,
    CitationRecord,
    ValidationIssue,
    clamp_unit,
)
from citecheck.validation.field_rules import (
    is_present,
    is_well_formed_doi,
    is_well_formed_isbn,
    is_well_formed_url,
    required_fields_for,
)

STRUCTURAL_WEIGHT = 0.5
CONSISTENCY_WEIGHT = 0.3
REFERENTIAL_WEIGHT = 0.2

# Smoothing constant for the consistency penalty.
CONSISTENCY_SMOOTHING = 10

REFERENTIAL_BASELINE = 0.5
DOI_BONUS = 0.3
ISBN_BONUS = 0.2
URL_BONUS = 0.1


def _round(value: float) -> float:
    return round(clamp_unit(value), 2)


def structural_factor(record: CitationRecord) -> float:
    required = required_fields_for(record.kind)
    if not required:
        return 1.0
    present = sum(1 for field in required if is_present(getattr(record, field, None)))
    return present / len(required)


def consistency_factor(issues: Sequence[ValidationIssue]) -> float:
    errors = sum(1 for issue in issues if issue.is_error)
    return 1.0 - errors / (errors + CONSISTENCY_SMOOTHING)


def referential_factor(record: CitationRecord) -> float:
    referential = REFERENTIAL_BASELINE
    if is_well_formed_doi(record.doi):
        referential += DOI_BONUS
    if is_well_formed_isbn(record.isbn):
        referential += ISBN_BONUS
    if is_well_formed_url(record.url):
        referential += URL_BONUS
    return min(referential, 1.0)


def certainty_reasoning(
    structural: float,
    consistency: float,
    referential: float,
    issues: Sequence[ValidationIssue],
    exploration_tool_name: str = "Fogbinder",
) -> str:
    """One human-readable sentence describing the three factors."""
    parts = []

    if structural >= 0.9:
        parts.append("Structurally complete")
    elif structural >= 0.7:
        parts.append("Mostly complete structure")
    else:
        parts.append("Missing required fields")

    if consistency >= 0.9:
        parts.append("internally consistent")
    elif consistency >= 0.7:
        parts.append("minor inconsistencies")
    else:
        parts.append("significant inconsistencies")

    if referential >= 0.8:
        parts.append("strong referential integrity")
    elif referential >= 0.5:
        parts.append("some referential identifiers")
    else:
        parts.append("weak referential integrity")

    exploration_count = sum(1 for issue in issues if issue.requires_exploration)
    if exploration_count:
        parts.append(f"{exploration_count} uncertainties require {exploration_tool_name} exploration")

    return ", ".join(parts) + "."


def score_record(
    record: CitationRecord,
    issues: Sequence[ValidationIssue],
    exploration_tool_name: str = "Fogbinder",
) -> CertaintyScore:
    """Compute the certainty score for a record given its issues."""
    structural = _round(structural_factor(record))
    consistency = _round(consistency_factor(issues))
    referential = _round(referential_factor(record))

    score = (
        structural * STRUCTURAL_WEIGHT
        + consistency * CONSISTENCY_WEIGHT
        + referential * REFERENTIAL_WEIGHT
    )

    return CertaintyScore(
        score=_round(score),
        factors=CertaintyFactors(
            structural=structural,
            consistency=consistency,
            referential=referential,
        ),
        reasoning=certainty_reasoning(
            structural, consistency, referential, issues, exploration_tool_name
        ),
    )
