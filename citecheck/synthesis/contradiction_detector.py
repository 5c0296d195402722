"""Metadata-level contradiction detection across validation results.

Identifies pairs of records that:
1. Share a normalized title (case-folded, trimmed) but credit different
   primary authors -> ``authorship`` hint.
2. Share a normalized title in a group holding more than one publication
   year -> ``temporal`` hint for every pair in the group.
3. Are linked by a host-supplied relation flagged as a contradiction
   -> ``relational`` hint.

Claims made *by* the sources are never compared; that is the exploration
tool's job. Grouping is O(N); comparison is O(k^2) inside each title group
of size k, and groups above ``max_title_group_size`` are refused.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, List, Optional, Sequence

from citecheck.exceptions import TitleGroupTooLargeError
from citecheck.models import (
    CitationRelation,
    ConflictType,
    ContradictionHint,
    ValidationResult,
    ValidatorConfig,
)

logger = logging.getLogger(__name__)

AUTHORSHIP_CONFIDENCE = 0.7
TEMPORAL_CONFIDENCE = 0.8


def normalize_title(title: str) -> str:
    return (title or "").casefold().strip()


def _primary_author_key(result: ValidationResult) -> Optional[str]:
    creator = result.record.primary_author
    if creator is None or creator.family_name is None:
        return None
    return creator.family_name.casefold()


def group_by_title(results: Sequence[ValidationResult]) -> Dict[str, List[ValidationResult]]:
    """Group results by normalized title, keeping first-seen order. Blank titles are skipped."""
    groups: Dict[str, List[ValidationResult]] = {}
    for result in results:
        key = normalize_title(result.record.title)
        if not key:
            continue
        groups.setdefault(key, []).append(result)
    return groups


def _authorship_hints(title: str, group: List[ValidationResult]) -> List[ContradictionHint]:
    authors = {_primary_author_key(result) for result in group} - {None}
    if len(authors) <= 1:
        return []

    hints = []
    for rec_a, rec_b in combinations(group, 2):
        author_a = _primary_author_key(rec_a)
        author_b = _primary_author_key(rec_b)
        if author_a is None or author_b is None or author_a == author_b:
            continue
        hints.append(
            ContradictionHint(
                record_a=rec_a.record.id,
                record_b=rec_b.record.id,
                conflict_type=ConflictType.AUTHORSHIP,
                description=f'Same title "{title}" but different primary authors',
                confidence=AUTHORSHIP_CONFIDENCE,
                requires_semantic_analysis=True,
            )
        )
    return hints


def _temporal_hints(title: str, group: List[ValidationResult]) -> List[ContradictionHint]:
    years = {result.record.year for result in group} - {None}
    if len(years) <= 1:
        return []

    # Once the group disagrees, every pair is flagged.
    hints = []
    for rec_a, rec_b in combinations(group, 2):
        year_a = "unknown" if rec_a.record.year is None else rec_a.record.year
        year_b = "unknown" if rec_b.record.year is None else rec_b.record.year
        hints.append(
            ContradictionHint(
                record_a=rec_a.record.id,
                record_b=rec_b.record.id,
                conflict_type=ConflictType.TEMPORAL,
                description=(
                    f'Same title "{title}" but disagreeing publication years ({year_a} vs {year_b})'
                ),
                confidence=TEMPORAL_CONFIDENCE,
                # Usually a metadata slip rather than a semantic question.
                requires_semantic_analysis=False,
            )
        )
    return hints


def _relational_hints(relations: Sequence[CitationRelation]) -> List[ContradictionHint]:
    return [
        ContradictionHint(
            record_a=relation.source,
            record_b=relation.target,
            conflict_type=ConflictType.RELATIONAL,
            description=f"Marked as contradictory in the citation graph ({relation.relation_type.value})",
            confidence=relation.confidence,
            requires_semantic_analysis=True,
        )
        for relation in relations
        if relation.is_contradiction
    ]


def detect_contradictions(
    results: Sequence[ValidationResult],
    config: ValidatorConfig,
    relations: Optional[Sequence[CitationRelation]] = None,
) -> List[ContradictionHint]:
    """Detect metadata-level contradictions across a batch.

    Args:
        results: Validation results for the whole batch.
        config: Validator configuration (title group size cap).
        relations: Optional host-supplied relations.

    Returns:
        Hints ordered by title group (authorship before temporal), then
        relational hints in relation order.

    Raises:
        TitleGroupTooLargeError: If a title group exceeds the configured cap.
    """
    groups = group_by_title(results)

    for title, group in groups.items():
        if len(group) > config.max_title_group_size:
            raise TitleGroupTooLargeError(title, len(group), config.max_title_group_size)

    hints: List[ContradictionHint] = []
    for title, group in groups.items():
        if len(group) < 2:
            continue
        hints.extend(_authorship_hints(title, group))
        hints.extend(_temporal_hints(title, group))

    if relations:
        hints.extend(_relational_hints(relations))

    logger.info("Contradiction detection: %d hints from %d records", len(hints), len(results))
    return hints
