"""Enum definitions for records, issues, states and handoff entities."""

from enum import Enum


class RecordKind(str, Enum):
    BOOK = "book"
    BOOK_SECTION = "book-section"
    JOURNAL_ARTICLE = "journal-article"
    CONFERENCE_PAPER = "conference-paper"
    THESIS = "thesis"
    WEBPAGE = "webpage"
    MANUSCRIPT = "manuscript"
    REPORT = "report"
    PREPRINT = "preprint"
    PATENT = "patent"


class CreatorRole(str, Enum):
    AUTHOR = "author"
    EDITOR = "editor"
    TRANSLATOR = "translator"
    CONTRIBUTOR = "contributor"
    INSTITUTIONAL_AUTHOR = "institutional-author"


class RelationType(str, Enum):
    CITES = "cites"
    CITED_BY = "cited-by"
    RELATED_TO = "related-to"
    CONTRADICTS = "contradicts"
    SUPPORTS = "supports"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(str, Enum):
    MISSING = "missing"  # absent or empty value
    FORMAT = "format"  # value present but malformed
    PLAUSIBILITY = "plausibility"  # well-formed but unlikely, e.g. year 380


class ValidationState(str, Enum):
    VALID = "VALID"
    INCOMPLETE = "INCOMPLETE"
    INCONSISTENT = "INCONSISTENT"
    UNCERTAIN = "UNCERTAIN"


class StrictnessLevel(str, Enum):
    STRICT = "strict"
    STANDARD = "standard"
    LENIENT = "lenient"


class RegionCause(str, Enum):
    NO_PERSISTENT_IDENTIFIER = "no-persistent-identifier"
    TEMPORAL_AMBIGUITY = "temporal-ambiguity"
    LOW_CERTAINTY = "low-certainty"
    CONTRADICTORY_RELATION = "contradictory-relation"


class ConflictType(str, Enum):
    AUTHORSHIP = "authorship"
    TEMPORAL = "temporal"
    RELATIONAL = "relational"


class GapType(str, Enum):
    INCOMPLETE_METADATA = "incomplete-metadata"
    MISSING_IDENTIFIERS = "missing-identifiers"
    AMBIGUOUS_SOURCES = "ambiguous-sources"


class GapSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
