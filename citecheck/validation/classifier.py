"""Validation-state classification from issues and certainty."""

from __future__ import annotations

from typing import Sequence

from citecheck.models import (
    CertaintyScore,
    IssueCategory,
    ValidationIssue,
    ValidationState,
    ValidatorConfig,
)


def classify_state(
    issues: Sequence[ValidationIssue],
    certainty: CertaintyScore,
    config: ValidatorConfig,
) -> ValidationState:
    """Map issues + score to a state.

    Order: errors first (format errors make a record INCONSISTENT, any other
    error INCOMPLETE), then exploration-flagged uncertainty below the
    exploration threshold, then the minimum-valid score floor.
    """
    errors = [issue for issue in issues if issue.is_error]
    if errors:
        if any(error.category == IssueCategory.FORMAT for error in errors):
            return ValidationState.INCONSISTENT
        return ValidationState.INCOMPLETE

    needs_exploration = any(issue.requires_exploration for issue in issues)
    if needs_exploration and certainty.score < config.exploration_threshold:
        return ValidationState.UNCERTAIN

    if certainty.score >= config.minimum_valid_certainty:
        return ValidationState.VALID
    return ValidationState.INCOMPLETE
