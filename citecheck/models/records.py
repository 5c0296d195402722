"""Citation record and creator models."""

from __future__ import annotations

import re
from typing import FrozenSet, Optional, Tuple

from nameparser import HumanName
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from citecheck.models.enums import CreatorRole, RecordKind, RelationType

_LEADING_YEAR = re.compile(r"^(\d{4})")

# Roles that count as the "primary author" of a record.
AUTHORIAL_ROLES: frozenset[CreatorRole] = frozenset({
    CreatorRole.AUTHOR,
    CreatorRole.INSTITUTIONAL_AUTHOR,
})


class WireModel(BaseModel):
    """Frozen model with camelCase aliases for the handoff wire format."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Creator(WireModel):
    """A person or institution credited on a record.

    Institutional creators carry a single-field ``name`` and need no last name.
    """

    role: CreatorRole = CreatorRole.AUTHOR
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_institutional(self) -> bool:
        return bool(self.name and self.name.strip())

    @property
    def family_name(self) -> Optional[str]:
        """Last name, or the institutional name for single-field creators."""
        if self.last_name and self.last_name.strip():
            return self.last_name.strip()
        if self.is_institutional:
            return self.name.strip()
        return None

    @classmethod
    def from_display_name(
        cls, display_name: str, role: CreatorRole = CreatorRole.AUTHOR
    ) -> "Creator":
        """Build a creator from "Last, First" or "First Last" text.

        Uses nameparser so titles, particles and suffixes (Dr., van, Jr.)
        land in the right slot. A lone token is treated as a surname.
        """
        text = (display_name or "").strip()
        if role == CreatorRole.INSTITUTIONAL_AUTHOR:
            return cls(role=role, name=text or None)

        parsed = HumanName(text)
        first = " ".join(part for part in (parsed.first, parsed.middle) if part)
        last = parsed.last
        if not last and first and " " not in first:
            last, first = first, ""
        return cls(role=role, first_name=first or None, last_name=last or None)


class CitationRecord(WireModel):
    """One immutable bibliographic entry.

    Field values are stored verbatim; malformed values are reported by the
    validator as issues, never rejected here.
    """

    id: str
    kind: RecordKind
    title: str = ""
    creators: Tuple[Creator, ...] = ()
    date: Optional[str] = None
    publisher: Optional[str] = None
    publication_title: Optional[str] = None
    place: Optional[str] = None
    doi: Optional[str] = None
    isbn: Optional[str] = None
    issn: Optional[str] = None
    url: Optional[str] = None
    pages: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    edition: Optional[str] = None
    tags: FrozenSet[str] = Field(default_factory=frozenset)
    notes: Optional[str] = None

    @field_validator(
        "date", "publisher", "publication_title", "place", "doi", "isbn", "issn",
        "url", "pages", "volume", "issue", "edition", "notes",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_serializer("tags")
    def _serialize_tags(self, tags: FrozenSet[str]) -> list[str]:
        return sorted(tags)

    @property
    def year(self) -> Optional[int]:
        """Year taken from the leading four digits of ``date``, if any."""
        if not self.date:
            return None
        match = _LEADING_YEAR.match(self.date.strip())
        return int(match.group(1)) if match else None

    @property
    def has_persistent_identifier(self) -> bool:
        return bool(self.doi or self.isbn or self.url)

    @property
    def primary_author(self) -> Optional[Creator]:
        """First creator credited in an authorial role."""
        for creator in self.creators:
            if creator.role in AUTHORIAL_ROLES:
                return creator
        return None


class CitationRelation(WireModel):
    """A link between two records supplied by the host (e.g. a citation graph)."""

    relation_type: RelationType
    source: str
    target: str
    confidence: float = Field(default=1.0)
    is_contradiction: bool = False

    @field_validator("confidence", mode="after")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(1.0, max(0.0, value))
