"""Uncertainty region detection across a batch of validation results.

Groups records by the cause of their uncertainty. Regions are evaluated
independently, so one record may sit in several; empty regions are omitted.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from citecheck.models import (
    CitationRelation,
    ExplorationFeatures,
    RegionCause,
    UncertaintyRegion,
    ValidationResult,
    ValidatorConfig,
)
from citecheck.validation.field_rules import is_plausible_year

logger = logging.getLogger(__name__)

NO_IDENTIFIER_LEVEL = 0.6
TEMPORAL_LEVEL = 0.5
LOW_CERTAINTY_LEVEL = 0.8
CONTRADICTORY_RELATION_LEVEL = 0.9

# Per-cause suggestions, masked by the features enabled in the config.
_SUGGESTIONS: Dict[RegionCause, ExplorationFeatures] = {
    RegionCause.NO_PERSISTENT_IDENTIFIER: ExplorationFeatures(use_mystery_clustering=True),
    RegionCause.TEMPORAL_AMBIGUITY: ExplorationFeatures(
        use_mood_scoring=True,
        use_fog_trail_visualization=True,
    ),
    RegionCause.LOW_CERTAINTY: ExplorationFeatures(
        use_contradiction_detection=True,
        use_mood_scoring=True,
        use_mystery_clustering=True,
        use_fog_trail_visualization=True,
    ),
    RegionCause.CONTRADICTORY_RELATION: ExplorationFeatures(
        use_contradiction_detection=True,
        use_fog_trail_visualization=True,
    ),
}


def _unique(ids: Iterable[str]) -> tuple[str, ...]:
    """De-duplicate while keeping first-seen order."""
    return tuple(dict.fromkeys(ids))


def is_temporally_ambiguous(result: ValidationResult) -> bool:
    """Missing date, no leading year, or a year outside the plausible range."""
    year = result.record.year
    return year is None or not is_plausible_year(year)


def _region(
    region_id: str,
    cause: RegionCause,
    record_ids: Iterable[str],
    description: str,
    level: float,
    config: ValidatorConfig,
) -> UncertaintyRegion:
    return UncertaintyRegion(
        id=region_id,
        cause=cause,
        record_ids=_unique(record_ids),
        description=description,
        suggested_exploration=_SUGGESTIONS[cause].masked_by(config.exploration_features),
        uncertainty_level=level,
    )


def detect_uncertainty_regions(
    results: Sequence[ValidationResult],
    config: ValidatorConfig,
    relations: Optional[Sequence[CitationRelation]] = None,
) -> List[UncertaintyRegion]:
    """Identify regions of uncertainty for downstream exploration.

    Args:
        results: Validation results for the whole batch.
        config: Validator configuration (low-certainty threshold, features).
        relations: Optional inter-record links; only contradiction-flagged
            relations contribute a region.

    Returns:
        Regions in fixed order: no identifiers, temporal, low certainty,
        contradictory relations.
    """
    regions: List[UncertaintyRegion] = []

    no_identifier = [r.record.id for r in results if not r.record.has_persistent_identifier]
    if no_identifier:
        regions.append(
            _region(
                "no-persistent-identifiers",
                RegionCause.NO_PERSISTENT_IDENTIFIER,
                no_identifier,
                f"{len(no_identifier)} records lack persistent identifiers (DOI, ISBN, or URL)",
                NO_IDENTIFIER_LEVEL,
                config,
            )
        )

    temporal = [r.record.id for r in results if is_temporally_ambiguous(r)]
    if temporal:
        regions.append(
            _region(
                "temporal-ambiguity",
                RegionCause.TEMPORAL_AMBIGUITY,
                temporal,
                f"{len(temporal)} records have a missing or unusual publication date",
                TEMPORAL_LEVEL,
                config,
            )
        )

    low_certainty = [
        r.record.id for r in results if r.certainty.score < config.low_certainty_threshold
    ]
    if low_certainty:
        regions.append(
            _region(
                "low-certainty",
                RegionCause.LOW_CERTAINTY,
                low_certainty,
                f"{len(low_certainty)} records with low validation certainty "
                f"(below {config.low_certainty_threshold:.2f})",
                LOW_CERTAINTY_LEVEL,
                config,
            )
        )

    if relations:
        involved: List[str] = []
        for relation in relations:
            if relation.is_contradiction:
                involved.extend((relation.source, relation.target))
        if involved:
            regions.append(
                _region(
                    "contradictory-relations",
                    RegionCause.CONTRADICTORY_RELATION,
                    involved,
                    "Records connected by relations marked as contradictory",
                    CONTRADICTORY_RELATION_LEVEL,
                    config,
                )
            )

    logger.info("Uncertainty detection: %d regions from %d results", len(regions), len(results))
    return regions
