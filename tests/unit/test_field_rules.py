"""
Unit tests for field-level rules.
"""

import pytest

from citecheck.models import (
    CitationRecord,
    Creator,
    CreatorRole,
    IssueCategory,
    RecordKind,
    Severity,
)
from citecheck.validation.field_rules import (
    FieldRuleValidator,
    is_well_formed_date,
    is_well_formed_doi,
    is_well_formed_isbn,
    is_well_formed_url,
    required_fields_for,
)
from tests.fixtures.records import make_incomplete_book, make_journal_article, make_valid_book


def _fields(issues):
    return [issue.field for issue in issues]


class TestFormatHelpers:
    """Test the individual format checks."""

    @pytest.mark.parametrize("date", ["2024", "2024-05", "2024-05-01", "0380"])
    def test_well_formed_dates(self, date):
        assert is_well_formed_date(date)

    @pytest.mark.parametrize("date", ["May 2024", "24", "2024/05/01", "", None])
    def test_malformed_dates(self, date):
        assert not is_well_formed_date(date)

    def test_doi(self):
        assert is_well_formed_doi("10.1234/abc.def")
        assert not is_well_formed_doi("doi:10.1234/abc")
        assert not is_well_formed_doi("11.1234/abc")

    def test_isbn(self):
        """Test ISBN-10, ISBN-10 with X and ISBN-13."""
        assert is_well_formed_isbn("978-3-16-148410-0")
        assert is_well_formed_isbn("0-306-40615-2")
        assert is_well_formed_isbn("0 8044 2957 X")
        assert not is_well_formed_isbn("12345")
        assert not is_well_formed_isbn("97831614841000")

    def test_url(self):
        assert is_well_formed_url("https://example.com/paper")
        assert is_well_formed_url("http://example.org")
        assert not is_well_formed_url("not a url")
        assert not is_well_formed_url("example.com")

    def test_required_fields_per_kind(self):
        assert required_fields_for(RecordKind.BOOK) == ("title", "creators", "publisher", "date")
        assert "url" in required_fields_for(RecordKind.WEBPAGE)
        assert "date" not in required_fields_for(RecordKind.MANUSCRIPT)


class TestStructure:
    """Test required fields and creators."""

    def test_complete_book_has_no_issues(self, default_config, valid_book):
        assert FieldRuleValidator(default_config).check(valid_book) == []

    def test_missing_publisher_and_date(self, default_config, incomplete_book):
        """Test that each missing required field is an error."""
        issues = FieldRuleValidator(default_config).check_structure(incomplete_book)
        assert _fields(issues) == ["publisher", "date"]
        assert all(issue.severity == Severity.ERROR for issue in issues)
        assert all(issue.category == IssueCategory.MISSING for issue in issues)
        assert issues[0].message == 'Required field "publisher" is missing'

    def test_creator_without_last_name(self, default_config):
        record = make_valid_book(creators=(Creator(first_name="Jane"),))
        issues = FieldRuleValidator(default_config).check_structure(record)
        assert len(issues) == 1
        assert issues[0].message == "Creator #1 is missing a last name"

    def test_institutional_creator_needs_no_last_name(self, default_config):
        institution = Creator(role=CreatorRole.INSTITUTIONAL_AUTHOR, name="UNESCO")
        record = make_valid_book(creators=(institution,))
        assert FieldRuleValidator(default_config).check_structure(record) == []

    def test_empty_creators_error_when_not_required(self, default_config):
        """Test that a webpage without creators still gets a creators error."""
        record = CitationRecord(
            id="web-1",
            kind=RecordKind.WEBPAGE,
            title="Page",
            url="https://example.com",
            date="2024",
        )
        issues = FieldRuleValidator(default_config).check_structure(record)
        assert _fields(issues) == ["creators"]
        assert issues[0].message == "Record must have at least one creator"


class TestConsistency:
    """Test date, URL and page checks."""

    def test_invalid_date_format(self, default_config):
        issues = FieldRuleValidator(default_config).check_consistency(
            make_valid_book(date="May 2024")
        )
        assert len(issues) == 1
        assert issues[0].severity == Severity.ERROR
        assert issues[0].category == IssueCategory.FORMAT
        assert issues[0].message == 'Invalid date format: "May 2024"'

    def test_implausible_year(self, default_config):
        """Test that year 380 is a warning requiring exploration."""
        issues = FieldRuleValidator(default_config).check_consistency(make_valid_book(date="0380"))
        assert len(issues) == 1
        issue = issues[0]
        assert issue.field == "date"
        assert issue.severity == Severity.WARNING
        assert issue.requires_exploration
        assert issue.message == "Unusual publication year: 380"

    def test_invalid_url(self, default_config):
        issues = FieldRuleValidator(default_config).check_consistency(
            make_valid_book(url="not a url")
        )
        assert _fields(issues) == ["url"]
        assert issues[0].is_error

    def test_unusual_pages_warning(self, default_config):
        issues = FieldRuleValidator(default_config).check_consistency(
            make_journal_article(pages="ten to twenty")
        )
        assert _fields(issues) == ["pages"]
        assert issues[0].severity == Severity.WARNING


class TestReferences:
    """Test identifier checks."""

    def test_bad_doi_and_isbn_warnings(self, default_config):
        record = make_valid_book(doi="not-a-doi", isbn="12345")
        issues = FieldRuleValidator(default_config).check_references(record)
        assert _fields(issues) == ["doi", "isbn"]
        assert all(issue.severity == Severity.WARNING for issue in issues)

    def test_missing_identifier_standard(self, default_config):
        issues = FieldRuleValidator(default_config).check_references(make_valid_book(isbn=None))
        assert len(issues) == 1
        assert issues[0].field == "identifiers"
        assert issues[0].severity == Severity.WARNING
        assert not issues[0].requires_exploration

    def test_missing_identifier_strict(self, strict_config):
        """Test that strict mode makes a missing identifier an error."""
        issues = FieldRuleValidator(strict_config).check_references(make_valid_book(isbn=None))
        assert issues[0].severity == Severity.ERROR
        assert issues[0].requires_exploration

    def test_missing_identifier_lenient(self, lenient_config):
        issues = FieldRuleValidator(lenient_config).check_references(make_valid_book(isbn=None))
        assert issues[0].severity == Severity.INFO

    def test_manuscript_exempt(self, strict_config):
        record = CitationRecord(
            id="ms-1",
            kind=RecordKind.MANUSCRIPT,
            title="Draft",
            creators=(Creator(last_name="Author"),),
        )
        assert FieldRuleValidator(strict_config).check_references(record) == []


def test_issue_order_follows_passes(default_config):
    """Test that structural issues precede consistency and reference issues."""
    record = make_incomplete_book().model_copy(update={"url": "bad url", "doi": "bad"})
    issues = FieldRuleValidator(default_config).check(record)
    assert _fields(issues) == ["publisher", "date", "url", "doi"]
