"""
Integration tests for the records-in, payload-out pipeline.
"""

import pytest

from citecheck.exceptions import RecordPreconditionError
from citecheck.ingest import records_from_zotero_items
from citecheck.models import (
    CitationRelation,
    ConflictType,
    RelationType,
    StrictnessLevel,
    ValidationState,
    ValidatorConfig,
)
from citecheck.orchestration import HandoffProtocol, run_validation
from tests.fixtures.records import (
    make_author,
    make_incomplete_book,
    make_journal_article,
    make_journal_articles,
    make_valid_book,
    make_zotero_item,
)

pytestmark = pytest.mark.integration


def test_well_structured_bibliography(journal_articles):
    """Test a clean batch of 10 articles with DOIs."""
    run = run_validation(journal_articles)

    assert not run.needs_handoff
    assert len(run.payload.validated_citations) == 10
    assert run.payload.invalid_citations == ()
    assert run.payload.uncertainty_regions == ()
    assert run.payload.contradiction_hints == ()
    assert run.payload.epistemic_summary.recommendation.startswith(
        "Bibliography is well-structured."
    )


def test_mixed_bibliography():
    """Test a batch touching every synthesis stage."""
    records = [
        make_valid_book("smith", title="shared title", creators=(make_author("Smith"),)),
        make_valid_book("jones", title="shared title", creators=(make_author("Jones"),)),
        make_journal_article("ancient", date="0380"),
        make_incomplete_book("partial"),
    ]
    relations = [
        CitationRelation(
            relation_type=RelationType.CONTRADICTS,
            source="smith",
            target="ancient",
            is_contradiction=True,
        )
    ]

    run = run_validation(records, ValidatorConfig(), relations)

    assert [r.record.id for r in run.results] == ["smith", "jones", "ancient", "partial"]
    states = {r.record.id: r.state for r in run.results}
    assert states["partial"] == ValidationState.INCOMPLETE
    assert states["ancient"] == ValidationState.VALID

    hint_types = [(h.record_a, h.record_b, h.conflict_type) for h in run.payload.contradiction_hints]
    assert ("smith", "jones", ConflictType.AUTHORSHIP) in hint_types
    assert ("smith", "ancient", ConflictType.RELATIONAL) in hint_types

    regions = {region.id: region for region in run.payload.uncertainty_regions}
    assert regions["temporal-ambiguity"].record_ids == ("ancient", "partial")
    assert regions["no-persistent-identifiers"].record_ids == ("partial",)
    assert "contradictory-relations" in regions

    summary = run.payload.epistemic_summary
    assert summary.total_records == 4
    assert summary.validated_count == 3
    assert summary.overall_certainty == 0.75
    assert run.needs_handoff


def test_strict_mode_rejects_records_without_identifiers():
    config = ValidatorConfig.from_strictness(StrictnessLevel.STRICT)
    run = run_validation([make_valid_book("a", isbn=None), make_valid_book("b")], config)

    assert [c.record.id for c in run.payload.invalid_citations] == ["a"]
    assert run.payload.invalid_citations[0].reason.startswith("INCOMPLETE: No persistent identifier")


def test_zotero_items_through_pipeline():
    items = [
        make_zotero_item("Z1"),
        make_zotero_item("Z2", itemType="webpage", url="https://example.com/page", DOI=""),
    ]
    run = run_validation(records_from_zotero_items(items))
    wire = HandoffProtocol.to_wire(run.payload)

    assert wire["epistemicSummary"]["totalRecords"] == 2
    assert {c["record"]["id"] for c in wire["validatedCitations"]} == {"Z1", "Z2"}


def test_precondition_failure_produces_no_payload():
    with pytest.raises(RecordPreconditionError):
        run_validation([make_valid_book("same"), make_journal_article("same")])


def test_deterministic_payload_content(journal_articles):
    """Test that two runs differ only in timestamps."""
    first = HandoffProtocol.to_wire(run_validation(journal_articles).payload)
    second = HandoffProtocol.to_wire(run_validation(journal_articles).payload)

    def strip(wire):
        wire = dict(wire)
        wire.pop("timestamp")
        for key in ("validatedCitations", "invalidCitations"):
            for citation in wire[key]:
                citation["validationResult"].pop("timestamp")
        return wire

    assert strip(first) == strip(second)


def test_empty_batch():
    run = run_validation([])
    assert run.results == []
    assert run.payload.epistemic_summary.total_records == 0
    assert not run.needs_handoff
