from __future__ import annotations

import json

import pytest

from citecheck.main import EXIT_HANDOFF, EXIT_OK, EXIT_USAGE, build_parser, main
from citecheck.utils import structured_log
from tests.fixtures.records import make_zotero_item


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("CITECHECK_CONFIG", raising=False)
    monkeypatch.delenv("CITECHECK_STRICTNESS", raising=False)
    monkeypatch.delenv("CITECHECK_EXPLORATION_TOOL", raising=False)


def _write_items(tmp_path, items) -> str:
    path = tmp_path / "items.json"
    path.write_text(json.dumps(items), encoding="utf-8")
    return str(path)


def test_parser_requires_command() -> None:
    parser = build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args([])
    parsed = parser.parse_args(["validate", "items.json", "--strictness", "strict"])
    assert parsed.command == "validate"
    assert parsed.strictness == "strict"


def test_validate_clean_batch_exits_zero(tmp_path, capsys) -> None:
    records = _write_items(tmp_path, [make_zotero_item("A"), make_zotero_item("B", title="Other")])
    output = tmp_path / "out" / "payload.json"

    code = main(["validate", records, "--output", str(output)])

    assert code == EXIT_OK
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["version"] == "1.0.0"
    assert [c["record"]["id"] for c in payload["validatedCitations"]] == ["A", "B"]
    assert "All records validated. No Fogbinder exploration required." in capsys.readouterr().out


def test_validate_incomplete_batch_needs_handoff(tmp_path) -> None:
    incomplete = make_zotero_item("C", itemType="book", date="", DOI="")
    records = _write_items(tmp_path, [make_zotero_item("A"), incomplete])
    output = tmp_path / "export.json"

    code = main(["validate", records, "--output", str(output), "--envelope"])

    assert code == EXIT_HANDOFF
    export = json.loads(output.read_text(encoding="utf-8"))
    assert export["format"] == "citecheck-to-fogbinder"
    assert export["payload"]["invalidCitations"][0]["record"]["id"] == "C"


def test_duplicate_ids_exit_two(tmp_path, capsys) -> None:
    records = _write_items(tmp_path, [make_zotero_item("A"), make_zotero_item("A")])
    assert main(["validate", records]) == EXIT_USAGE
    assert "duplicate record id" in capsys.readouterr().out


def test_missing_input_exit_two(tmp_path) -> None:
    assert main(["validate", str(tmp_path / "missing.json")]) == EXIT_USAGE


def test_malformed_creator_exit_two(tmp_path) -> None:
    records = _write_items(
        tmp_path, [{"key": "a", "itemType": "book", "title": "T", "creators": [None]}]
    )
    assert main(["validate", records]) == EXIT_USAGE


def test_bad_config_exit_two(tmp_path) -> None:
    records = _write_items(tmp_path, [make_zotero_item("A")])
    config = tmp_path / "settings.yaml"
    config.write_text("validation:\n  exploration_threshold: 3\n", encoding="utf-8")
    assert main(["validate", records, "--config", str(config)]) == EXIT_USAGE


def test_relations_and_audit_trail(tmp_path) -> None:
    records = _write_items(tmp_path, [make_zotero_item("A"), make_zotero_item("B", title="Other")])
    relations = tmp_path / "relations.json"
    relations.write_text(
        json.dumps([{"relationType": "contradicts", "source": "A", "target": "B", "isContradiction": True}]),
        encoding="utf-8",
    )
    output = tmp_path / "payload.json"
    audit_dir = tmp_path / "audit"

    code = main(
        [
            "validate",
            records,
            "--relations",
            str(relations),
            "--output",
            str(output),
            "--audit-dir",
            str(audit_dir),
        ]
    )

    assert code == EXIT_OK
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["contradictionHints"][0]["conflictType"] == "relational"
    events = structured_log.load_events_from_jsonl(str(audit_dir / "app.jsonl"))
    assert events[-1]["event"] == "handoff"
    assert events[-1]["regions"] == ["contradictory-relations"]


def test_schema_command(capsys) -> None:
    assert main(["schema"]) == EXIT_OK
    schema = json.loads(capsys.readouterr().out)
    assert "validatedCitations" in schema["required"]


def test_full_schema_command(capsys) -> None:
    assert main(["schema", "--full"]) == EXIT_OK
    schema = json.loads(capsys.readouterr().out)
    assert "epistemicSummary" in schema["properties"]
