"""Zotero JSON importer.

Converts items exported from a Zotero library (web API JSON or the plain
item objects used by the desktop export) into immutable CitationRecords.
Field values are copied verbatim; judging them is the validator's job.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from citecheck.exceptions import UnsupportedRecordKindError
from citecheck.models import (
    CitationRecord,
    CitationRelation,
    Creator,
    CreatorRole,
    RecordKind,
    RelationType,
)

logger = logging.getLogger(__name__)

# Zotero itemType -> RecordKind. The kebab-case kind values are accepted too.
_ITEM_TYPES: Dict[str, RecordKind] = {
    "book": RecordKind.BOOK,
    "bookSection": RecordKind.BOOK_SECTION,
    "journalArticle": RecordKind.JOURNAL_ARTICLE,
    "conferencePaper": RecordKind.CONFERENCE_PAPER,
    "thesis": RecordKind.THESIS,
    "webpage": RecordKind.WEBPAGE,
    "manuscript": RecordKind.MANUSCRIPT,
    "report": RecordKind.REPORT,
    "preprint": RecordKind.PREPRINT,
    "patent": RecordKind.PATENT,
}
_ITEM_TYPES.update({kind.value: kind for kind in RecordKind})

_CREATOR_TYPES: Dict[str, CreatorRole] = {
    "author": CreatorRole.AUTHOR,
    "inventor": CreatorRole.AUTHOR,
    "programmer": CreatorRole.AUTHOR,
    "editor": CreatorRole.EDITOR,
    "seriesEditor": CreatorRole.EDITOR,
    "translator": CreatorRole.TRANSLATOR,
    "contributor": CreatorRole.CONTRIBUTOR,
    "institutional-author": CreatorRole.INSTITUTIONAL_AUTHOR,
}

# Zotero field name -> CitationRecord field name.
_FIELD_MAP: Dict[str, str] = {
    "title": "title",
    "date": "date",
    "publisher": "publisher",
    "publicationTitle": "publication_title",
    "bookTitle": "publication_title",
    "proceedingsTitle": "publication_title",
    "websiteTitle": "publication_title",
    "university": "publisher",
    "institution": "publisher",
    "place": "place",
    "DOI": "doi",
    "ISBN": "isbn",
    "ISSN": "issn",
    "url": "url",
    "pages": "pages",
    "volume": "volume",
    "issue": "issue",
    "edition": "edition",
    "extra": "notes",
}


def _parse_creator(raw: Any) -> Creator:
    """Zotero creator object, or a display-name string ("Last, First")."""
    if isinstance(raw, str):
        return Creator.from_display_name(raw)
    if not isinstance(raw, Mapping):
        raise ValueError(f"Unreadable creator entry: {raw!r}")

    role = _CREATOR_TYPES.get(str(raw.get("creatorType", "author")), CreatorRole.CONTRIBUTOR)
    single_name = (raw.get("name") or "").strip()
    if single_name:
        # Single-field creators are institutions in Zotero.
        if role == CreatorRole.AUTHOR:
            role = CreatorRole.INSTITUTIONAL_AUTHOR
        return Creator(role=role, name=single_name)

    return Creator(
        role=role,
        first_name=raw.get("firstName") or None,
        last_name=raw.get("lastName") or None,
    )


def _parse_tags(raw: Any) -> List[str]:
    """Zotero tags are [{"tag": "x"}]; plain strings are accepted too."""
    if isinstance(raw, str):
        raw = [raw]
    elif raw is not None and not isinstance(raw, (list, tuple)):
        raise ValueError(f"Expected a list of tags, got {type(raw).__name__}")
    tags: List[str] = []
    for entry in raw or []:
        value = entry.get("tag") if isinstance(entry, Mapping) else entry
        if isinstance(value, str) and value.strip():
            tags.append(value.strip())
    return tags


def _item_data(item: Mapping[str, Any]) -> Mapping[str, Any]:
    """Web API items nest the fields under "data"."""
    data = item.get("data")
    return data if isinstance(data, Mapping) else item


def record_from_zotero_item(item: Mapping[str, Any]) -> CitationRecord:
    """Convert one Zotero item into a CitationRecord.

    Raises:
        UnsupportedRecordKindError: If the itemType is outside the supported kinds
        ValueError: If the item or one of its lists is malformed
    """
    if not isinstance(item, Mapping):
        raise ValueError(f"Expected a Zotero item object, got {type(item).__name__}")
    data = _item_data(item)
    item_type = str(data.get("itemType", ""))
    kind = _ITEM_TYPES.get(item_type)
    if kind is None:
        raise UnsupportedRecordKindError(f"Unsupported Zotero itemType: {item_type!r}")

    record_id = data.get("id") or data.get("key") or item.get("key") or ""
    fields: Dict[str, Any] = {}
    for zotero_name, field_name in _FIELD_MAP.items():
        value = data.get(zotero_name)
        if isinstance(value, str) and value.strip() and field_name not in fields:
            fields[field_name] = value

    creators = data.get("creators") or []
    if not isinstance(creators, (list, tuple)):
        raise ValueError(f"Expected a list of creators, got {type(creators).__name__}")

    return CitationRecord(
        id=str(record_id),
        kind=kind,
        creators=tuple(_parse_creator(raw) for raw in creators),
        tags=frozenset(_parse_tags(data.get("tags"))),
        **fields,
    )


def records_from_zotero_items(items: Sequence[Mapping[str, Any]]) -> List[CitationRecord]:
    records = [record_from_zotero_item(item) for item in items]
    logger.info("Imported %d Zotero items", len(records))
    return records


def relation_from_dict(raw: Mapping[str, Any]) -> CitationRelation:
    """Accepts camelCase (relationType/isContradiction) or snake_case keys.

    Raises:
        ValueError: If source or target is missing, or the relation type is unknown
    """
    missing = [key for key in ("source", "target") if not raw.get(key)]
    if missing:
        raise ValueError(f"Relation is missing {', '.join(missing)}: {dict(raw)!r}")
    relation_type = raw.get("relationType", raw.get("relation_type", raw.get("type", "related-to")))
    return CitationRelation(
        relation_type=RelationType(relation_type),
        source=str(raw["source"]),
        target=str(raw["target"]),
        confidence=float(raw.get("confidence", 1.0)),
        is_contradiction=bool(raw.get("isContradiction", raw.get("is_contradiction", False))),
    )


def _read_json(path: str) -> Any:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing input file: {path}")
    with resolved.open("r", encoding="utf-8") as file_obj:
        return json.load(file_obj)


def _as_list(loaded: Any, key: str, path: str) -> List[Any]:
    if isinstance(loaded, Mapping):
        loaded = loaded.get(key, [])
    if not isinstance(loaded, list):
        raise ValueError(f"Expected a list (or an object with '{key}') in {path}")
    return loaded


def load_zotero_json(path: str) -> List[CitationRecord]:
    """Read a JSON file holding a list of Zotero items (or {"items": [...]})."""
    return records_from_zotero_items(_as_list(_read_json(path), "items", path))


def load_relations_json(path: Optional[str]) -> List[CitationRelation]:
    """Read a JSON file holding a list of relations (or {"relations": [...]})."""
    if not path:
        return []
    return [relation_from_dict(raw) for raw in _as_list(_read_json(path), "relations", path)]
