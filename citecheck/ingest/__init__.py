"""Host-side importers that turn exported library items into records."""

from citecheck.ingest.zotero import (
    load_relations_json,
    load_zotero_json,
    record_from_zotero_item,
    records_from_zotero_items,
    relation_from_dict,
)

__all__ = [
    "load_relations_json",
    "load_zotero_json",
    "record_from_zotero_item",
    "records_from_zotero_items",
    "relation_from_dict",
]
