"""Records in, handoff payload out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from citecheck.models import (
    CitationRecord,
    CitationRelation,
    HandoffPayload,
    ValidationResult,
    ValidatorConfig,
)
from citecheck.orchestration.handoff_protocol import HandoffProtocol, requires_exploration_handoff
from citecheck.validation import CitationValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationRun:
    """One batch run: per-record results and the payload built from them."""

    results: List[ValidationResult]
    payload: HandoffPayload

    @property
    def needs_handoff(self) -> bool:
        return requires_exploration_handoff(self.results)


def run_validation(
    records: Iterable[CitationRecord],
    config: Optional[ValidatorConfig] = None,
    relations: Optional[Sequence[CitationRelation]] = None,
) -> ValidationRun:
    """Validate a batch and build its handoff payload.

    Raises:
        RecordPreconditionError: If any record has a blank or duplicate id
        TitleGroupTooLargeError: If a same-title group exceeds the cap
    """
    config = config or ValidatorConfig()
    results = CitationValidator(config).validate_batch(records)
    payload = HandoffProtocol.build_payload(results, config, relations)
    logger.info(
        "Handoff payload: %d validated, %d invalid/uncertain, %d regions, %d hints",
        len(payload.validated_citations),
        len(payload.invalid_citations),
        len(payload.uncertainty_regions),
        len(payload.contradiction_hints),
    )
    return ValidationRun(results=results, payload=payload)
