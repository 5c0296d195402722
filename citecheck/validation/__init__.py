"""
Validation Module

Field rules, certainty scoring and state classification for citation records.
"""

from .classifier import classify_state
from .field_rules import FieldRuleValidator, REQUIRED_FIELDS
from .scoring import score_record
from .validator import CitationValidator, check_preconditions, validate_record

__all__ = [
    "CitationValidator",
    "FieldRuleValidator",
    "REQUIRED_FIELDS",
    "check_preconditions",
    "classify_state",
    "score_record",
    "validate_record",
]
