"""
Citation Validator

Runs the field rules, the certainty scorer and the state classifier for one
record or an ordered batch of records.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from citecheck.exceptions import RecordPreconditionError
from citecheck.models import (
    CitationRecord,
    ValidationResult,
    ValidatorConfig,
)
from citecheck.validation.classifier import classify_state
from citecheck.validation.field_rules import FieldRuleValidator
from citecheck.validation.scoring import score_record

logger = logging.getLogger(__name__)


def check_preconditions(records: Sequence[CitationRecord]) -> None:
    """Reject blank or duplicate record ids, reporting every offender once.

    Raises:
        RecordPreconditionError: If any record violates a precondition
    """
    offenders: List[Tuple[int, str]] = []
    counts = Counter(record.id for record in records)
    for index, record in enumerate(records):
        if not record.id or not record.id.strip():
            offenders.append((index, "record has no identifier"))
        elif counts[record.id] > 1:
            offenders.append((index, f"duplicate record id '{record.id}'"))

    if offenders:
        for index, reason in offenders:
            logger.error("Precondition violated by record #%d: %s", index, reason)
        raise RecordPreconditionError(offenders)


class CitationValidator:
    """Validates citation records against one explicit configuration."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()
        self.field_rules = FieldRuleValidator(self.config)

    def validate(self, record: CitationRecord) -> ValidationResult:
        """
        Validate a single record.

        Args:
            record: Record to validate

        Returns:
            ValidationResult with state, issues and certainty

        Raises:
            RecordPreconditionError: If the record has no identifier
        """
        check_preconditions([record])
        return self._validate(record)

    def validate_batch(self, records: Iterable[CitationRecord]) -> List[ValidationResult]:
        """
        Validate records in order; one result per record.

        Preconditions are checked for the whole batch before any record is
        validated, so a bad batch produces no partial output.
        """
        batch = list(records)
        check_preconditions(batch)
        results = [self._validate(record) for record in batch]
        logger.info(
            "Validated %d records (%s strictness)", len(results), self.config.strictness.value
        )
        return results

    def _validate(self, record: CitationRecord) -> ValidationResult:
        issues = self.field_rules.check(record)
        certainty = score_record(record, issues, self.config.exploration_tool_name)
        state = classify_state(issues, certainty, self.config)
        return ValidationResult(
            record=record,
            state=state,
            issues=tuple(issues),
            certainty=certainty,
        )


def validate_record(
    record: CitationRecord, config: Optional[ValidatorConfig] = None
) -> ValidationResult:
    """Convenience function for single-record validation."""
    return CitationValidator(config).validate(record)
