"""
Field Rule Validator

Runs structural, consistency and referential-integrity checks on one record.
Every malformed or missing value becomes a ValidationIssue; nothing here raises
for bad field data.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import HttpUrl, TypeAdapter, ValidationError

from citecheck.models import (
    CitationRecord,
    IssueCategory,
    RecordKind,
    Severity,
    StrictnessLevel,
    ValidationIssue,
    ValidatorConfig,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: Dict[RecordKind, Tuple[str, ...]] = {
    RecordKind.BOOK: ("title", "creators", "publisher", "date"),
    RecordKind.BOOK_SECTION: ("title", "creators", "publication_title", "date"),
    RecordKind.JOURNAL_ARTICLE: ("title", "creators", "publication_title", "date"),
    RecordKind.CONFERENCE_PAPER: ("title", "creators", "date"),
    RecordKind.THESIS: ("title", "creators", "date"),
    RecordKind.WEBPAGE: ("title", "url", "date"),
    RecordKind.MANUSCRIPT: ("title", "creators"),
    RecordKind.REPORT: ("title", "creators", "date"),
    RecordKind.PREPRINT: ("title", "creators", "date"),
    RecordKind.PATENT: ("title", "creators", "date"),
}

# Unpublished kinds are not expected to carry a DOI, ISBN or URL.
IDENTIFIER_EXEMPT_KINDS: frozenset[RecordKind] = frozenset({RecordKind.MANUSCRIPT})

MIN_PLAUSIBLE_YEAR = 1000
MAX_PLAUSIBLE_YEAR = 2100

_DATE_PATTERN = re.compile(r"^(\d{4})(-\d{2}(-\d{2})?)?$")
_PAGES_PATTERN = re.compile(r"^\d+(-\d+)?$")
_DOI_PATTERN = re.compile(r"^10\.\d{4,}/\S+$")
_ISBN_PATTERN = re.compile(r"^(\d{9}[\dXx]|\d{13})$")

_HTTP_URL = TypeAdapter(HttpUrl)


def required_fields_for(kind: RecordKind) -> Tuple[str, ...]:
    return REQUIRED_FIELDS.get(kind, ())


def is_present(value: Any) -> bool:
    """True when a field carries content: non-blank string or non-empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    return True


def is_well_formed_date(date: Optional[str]) -> bool:
    return bool(date) and _DATE_PATTERN.match(date.strip()) is not None


def is_plausible_year(year: int) -> bool:
    return MIN_PLAUSIBLE_YEAR <= year <= MAX_PLAUSIBLE_YEAR


def is_well_formed_url(url: Optional[str]) -> bool:
    """Absolute HTTP(S) URL check."""
    if not url:
        return False
    try:
        _HTTP_URL.validate_python(url.strip())
    except ValidationError:
        return False
    return True


def is_well_formed_doi(doi: Optional[str]) -> bool:
    return bool(doi) and _DOI_PATTERN.match(doi.strip()) is not None


def normalize_isbn(isbn: str) -> str:
    return re.sub(r"[-\s]", "", isbn)


def is_well_formed_isbn(isbn: Optional[str]) -> bool:
    """ISBN-10 (check digit may be X) or ISBN-13, ignoring hyphens and spaces."""
    return bool(isbn) and _ISBN_PATTERN.match(normalize_isbn(isbn)) is not None


class FieldRuleValidator:
    """
    Validates field-level rules for CitationRecord objects.

    Issues come back in pass order: structural, consistency, referential.
    """

    def __init__(self, config: ValidatorConfig):
        """
        Initialize field rule validator.

        Args:
            config: Validator configuration (strictness, identifier requirement)
        """
        self.config = config

    def check(self, record: CitationRecord) -> List[ValidationIssue]:
        """
        Run all three passes on a record.

        Args:
            record: Record to check

        Returns:
            Ordered list of issues (empty when the record is clean)
        """
        issues: List[ValidationIssue] = []
        issues.extend(self.check_structure(record))
        issues.extend(self.check_consistency(record))
        issues.extend(self.check_references(record))
        logger.debug("Field rules: %d issues for record %s", len(issues), record.id)
        return issues

    def check_structure(self, record: CitationRecord) -> List[ValidationIssue]:
        """Required-field presence and creator completeness."""
        issues: List[ValidationIssue] = []
        required = required_fields_for(record.kind)

        for field in required:
            if not is_present(getattr(record, field, None)):
                issues.append(
                    ValidationIssue(
                        field=field,
                        message=f'Required field "{field}" is missing',
                        severity=Severity.ERROR,
                        category=IssueCategory.MISSING,
                        suggestion=f"Add {field} to complete the record structure",
                    )
                )

        # Empty creators is an error even for kinds that do not require creators.
        if not record.creators and "creators" not in required:
            issues.append(
                ValidationIssue(
                    field="creators",
                    message="Record must have at least one creator",
                    severity=Severity.ERROR,
                    category=IssueCategory.MISSING,
                    suggestion="Add an author, editor or contributor",
                )
            )

        for position, creator in enumerate(record.creators, start=1):
            if creator.is_institutional:
                continue
            if not is_present(creator.last_name):
                issues.append(
                    ValidationIssue(
                        field="creators",
                        message=f"Creator #{position} is missing a last name",
                        severity=Severity.ERROR,
                        category=IssueCategory.MISSING,
                        suggestion="Add a last name, or record the creator as an institutional name",
                    )
                )

        return issues

    def check_consistency(self, record: CitationRecord) -> List[ValidationIssue]:
        """Date, URL and page formats."""
        issues: List[ValidationIssue] = []

        if record.date:
            if not is_well_formed_date(record.date):
                issues.append(
                    ValidationIssue(
                        field="date",
                        message=f'Invalid date format: "{record.date}"',
                        severity=Severity.ERROR,
                        category=IssueCategory.FORMAT,
                        suggestion="Use ISO 8601 format (YYYY, YYYY-MM, or YYYY-MM-DD)",
                    )
                )
            elif record.year is not None and not is_plausible_year(record.year):
                issues.append(
                    ValidationIssue(
                        field="date",
                        message=f"Unusual publication year: {record.year}",
                        severity=Severity.WARNING,
                        category=IssueCategory.PLAUSIBILITY,
                        suggestion="Verify the publication date is correct",
                        requires_exploration=True,
                    )
                )

        if record.url and not is_well_formed_url(record.url):
            issues.append(
                ValidationIssue(
                    field="url",
                    message=f'Invalid URL format: "{record.url}"',
                    severity=Severity.ERROR,
                    category=IssueCategory.FORMAT,
                    suggestion="Use an absolute http(s) URL such as https://example.com",
                )
            )

        if record.pages and not _PAGES_PATTERN.match(re.sub(r"\s", "", record.pages)):
            issues.append(
                ValidationIssue(
                    field="pages",
                    message=f'Unusual page format: "{record.pages}"',
                    severity=Severity.WARNING,
                    category=IssueCategory.FORMAT,
                    suggestion='Use a format like "123" or "123-456"',
                )
            )

        return issues

    def check_references(self, record: CitationRecord) -> List[ValidationIssue]:
        """DOI/ISBN formats and persistent-identifier presence."""
        issues: List[ValidationIssue] = []

        if record.doi and not is_well_formed_doi(record.doi):
            issues.append(
                ValidationIssue(
                    field="doi",
                    message="DOI format may be invalid",
                    severity=Severity.WARNING,
                    category=IssueCategory.FORMAT,
                    suggestion='A DOI starts with "10." followed by a registrant code and suffix',
                )
            )

        if record.isbn and not is_well_formed_isbn(record.isbn):
            issues.append(
                ValidationIssue(
                    field="isbn",
                    message="ISBN should be 10 or 13 digits",
                    severity=Severity.WARNING,
                    category=IssueCategory.FORMAT,
                    suggestion="Verify the ISBN is correct",
                )
            )

        if not record.has_persistent_identifier and record.kind not in IDENTIFIER_EXEMPT_KINDS:
            issues.append(self._missing_identifier_issue())

        return issues

    def _missing_identifier_issue(self) -> ValidationIssue:
        if self.config.require_persistent_identifiers:
            severity, explore = Severity.ERROR, True
        elif self.config.strictness == StrictnessLevel.LENIENT:
            severity, explore = Severity.INFO, False
        else:
            severity, explore = Severity.WARNING, False
        return ValidationIssue(
            field="identifiers",
            message="No persistent identifier (DOI, ISBN, or URL)",
            severity=severity,
            category=IssueCategory.MISSING,
            suggestion="Add a DOI or ISBN if available",
            requires_exploration=explore,
        )
