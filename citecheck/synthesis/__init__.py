"""Batch-level synthesis: uncertainty regions, contradictions and the epistemic summary."""

from citecheck.synthesis.contradiction_detector import detect_contradictions, group_by_title
from citecheck.synthesis.epistemic_summary import (
    build_epistemic_summary,
    detect_epistemic_gaps,
    determine_certainty_boundary,
    is_confidently_validated,
)
from citecheck.synthesis.uncertainty_regions import detect_uncertainty_regions

__all__ = [
    "build_epistemic_summary",
    "detect_contradictions",
    "detect_epistemic_gaps",
    "detect_uncertainty_regions",
    "determine_certainty_boundary",
    "group_by_title",
    "is_confidently_validated",
]
