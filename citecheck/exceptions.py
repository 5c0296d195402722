"""
Custom exceptions for caller precondition violations.

Malformed record data never raises; it is reported as a ValidationIssue.
These exceptions signal a programming error in the caller and are not retried.
"""

from typing import List, Tuple


class CitecheckError(Exception):
    """Base exception for citecheck errors."""

    pass


class ConfigurationError(CitecheckError):
    """Raised when a configuration value is invalid or inconsistent."""

    pass


class RecordPreconditionError(CitecheckError):
    """Raised when records violate caller preconditions (blank or duplicate ids).

    ``offenders`` holds one ``(index, reason)`` entry per offending record.
    """

    def __init__(self, offenders: List[Tuple[int, str]]):
        self.offenders = list(offenders)
        details = "; ".join(f"record #{index}: {reason}" for index, reason in self.offenders)
        super().__init__(f"{len(self.offenders)} record(s) violate preconditions: {details}")


class TitleGroupTooLargeError(CitecheckError):
    """Raised when a same-title group exceeds the configured pairwise-comparison cap."""

    def __init__(self, title: str, size: int, limit: int):
        self.title = title
        self.size = size
        self.limit = limit
        super().__init__(
            f"Title group '{title}' has {size} records, above the cap of {limit}; "
            "shard the batch or raise max_title_group_size"
        )


class UnsupportedRecordKindError(CitecheckError):
    """Raised when an imported item type is outside the supported record kinds."""

    pass
