"""
Unit tests for the citation validator.
"""

import logging

import pytest

from citecheck.exceptions import RecordPreconditionError
from citecheck.models import ValidationState, ValidatorConfig
from citecheck.validation import CitationValidator, check_preconditions, validate_record
from tests.fixtures.records import (
    make_incomplete_book,
    make_journal_article,
    make_journal_articles,
    make_valid_book,
)


class TestValidate:
    """Test single-record validation."""

    def test_complete_book_valid(self, valid_book):
        """Test a complete book with an ISBN."""
        result = validate_record(valid_book)
        assert result.state == ValidationState.VALID
        assert result.errors == []
        assert result.certainty.factors.referential >= 0.7
        assert result.record == valid_book

    def test_incomplete_book(self, incomplete_book):
        result = validate_record(incomplete_book)
        assert result.state == ValidationState.INCOMPLETE
        assert {issue.field for issue in result.errors} == {"publisher", "date"}

    def test_invalid_date_is_inconsistent(self):
        result = validate_record(make_valid_book(date="May 2024"))
        assert result.state == ValidationState.INCONSISTENT

    def test_implausible_year_warning(self):
        """Test date 0380: warning requiring exploration, no error."""
        result = validate_record(make_journal_article(date="0380"))
        assert result.errors == []
        assert [issue.field for issue in result.exploration_issues] == ["date"]
        assert result.state == ValidationState.VALID

    def test_implausible_year_uncertain_with_high_threshold(self):
        config = ValidatorConfig.from_strictness("standard", exploration_threshold=0.99)
        result = validate_record(make_journal_article(date="0380"), config)
        assert result.state == ValidationState.UNCERTAIN

    def test_strict_missing_identifier(self, strict_config):
        result = CitationValidator(strict_config).validate(make_valid_book(isbn=None))
        assert result.state == ValidationState.INCOMPLETE
        assert result.errors[0].field == "identifiers"

    def test_deterministic(self, default_config, valid_book):
        """Test same record and config give identical issues, state and score."""
        validator = CitationValidator(default_config)
        first = validator.validate(valid_book)
        second = validator.validate(valid_book)
        assert first.issues == second.issues
        assert first.state == second.state
        assert first.certainty == second.certainty

    def test_blank_id_rejected(self):
        with pytest.raises(RecordPreconditionError):
            validate_record(make_valid_book(record_id="  "))


class TestValidateBatch:
    """Test batch validation."""

    def test_order_and_length_preserved(self, default_config):
        records = [make_incomplete_book("b"), make_valid_book("a")] + make_journal_articles(3)
        results = CitationValidator(default_config).validate_batch(records)
        assert [r.record.id for r in results] == [r.id for r in records]

    def test_empty_batch(self, default_config):
        assert CitationValidator(default_config).validate_batch([]) == []

    def test_accepts_generators(self, default_config):
        results = CitationValidator(default_config).validate_batch(
            record for record in make_journal_articles(2)
        )
        assert len(results) == 2

    def test_duplicate_ids_report_every_offender(self, caplog):
        """Test one offender entry, and one log line, per offending record."""
        records = [make_valid_book("dup"), make_valid_book("ok"), make_valid_book("dup")]

        with caplog.at_level(logging.ERROR, logger="citecheck"):
            with pytest.raises(RecordPreconditionError) as exc_info:
                CitationValidator().validate_batch(records)

        assert [index for index, _ in exc_info.value.offenders] == [0, 2]
        precondition_logs = [r for r in caplog.records if "Precondition violated" in r.message]
        assert len(precondition_logs) == 2

    def test_blank_and_duplicate_together(self):
        records = [make_valid_book(""), make_valid_book("x"), make_valid_book("x")]
        with pytest.raises(RecordPreconditionError) as exc_info:
            check_preconditions(records)
        reasons = dict(exc_info.value.offenders)
        assert reasons[0] == "record has no identifier"
        assert "duplicate" in reasons[1]
        assert "duplicate" in reasons[2]
