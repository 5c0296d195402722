#!/usr/bin/env python3
"""
Main Entry Point

citecheck - rule-based bibliography validation with exploration handoff
"""

import argparse
import json
import os
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from citecheck.config import load_validator_config
from citecheck.exceptions import CitecheckError, RecordPreconditionError
from citecheck.ingest import load_relations_json, load_zotero_json
from citecheck.models import (
    HandoffPayload,
    StrictnessLevel,
    ValidationResult,
    ValidationState,
    ValidatorConfig,
)
from citecheck.orchestration import HANDOFF_SCHEMA, HandoffProtocol, ValidationRun, run_validation
from citecheck.synthesis import determine_certainty_boundary
from citecheck.utils import structured_log
from citecheck.utils.logging_config import LogLevel, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_HANDOFF = 1
EXIT_USAGE = 2

_STATE_STYLES = {
    ValidationState.VALID: "green",
    ValidationState.INCOMPLETE: "yellow",
    ValidationState.INCONSISTENT: "red",
    ValidationState.UNCERTAIN: "magenta",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="citecheck",
        description="Validate bibliographic records and build an exploration handoff payload",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a Zotero JSON export")
    validate.add_argument("records", type=str, help="Path to a JSON list of Zotero items")
    validate.add_argument(
        "--config",
        type=str,
        default=os.getenv("CITECHECK_CONFIG"),
        help="Path to a YAML settings file with a 'validation' section",
    )
    validate.add_argument(
        "--strictness",
        type=str,
        choices=[level.value for level in StrictnessLevel],
        default=None,
        help="Strictness preset (overrides the config file)",
    )
    validate.add_argument(
        "--relations",
        type=str,
        default=None,
        help="Optional JSON list of citation relations",
    )
    validate.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the handoff payload JSON to this path",
    )
    validate.add_argument(
        "--envelope",
        action="store_true",
        help="Wrap the written payload in the export envelope",
    )
    validate.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output (detailed logging)",
    )
    validate.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Enable debug mode (full logging with all details)",
    )
    validate.add_argument(
        "--verbose-level",
        type=str,
        choices=[level.value for level in LogLevel],
        default="normal",
        help="Set verbose level: minimal, normal, detailed, or full (default: normal)",
    )
    validate.add_argument(
        "--log-file",
        type=str,
        nargs="?",
        const="logs/citecheck.log",
        default=None,
        help="Enable file logging. Use --log-file for logs/citecheck.log or --log-file <path>",
    )
    validate.add_argument(
        "--audit-dir",
        type=str,
        default=None,
        help="Append a JSONL audit trail of this run to <dir>/app.jsonl",
    )

    schema = subparsers.add_parser("schema", help="Print the handoff payload JSON schema")
    schema.add_argument(
        "--full",
        action="store_true",
        help="Print the complete model schema instead of the top-level wire shape",
    )
    return parser


def _render_results(results: Sequence[ValidationResult]) -> None:
    table = Table(title="Validation results")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("State")
    table.add_column("Score", justify="right")
    table.add_column("Issues", justify="right")
    table.add_column("First issue")

    for result in results:
        style = _STATE_STYLES.get(result.state, "white")
        first_issue = result.issues[0].message if result.issues else ""
        table.add_row(
            escape(result.record.id),
            result.record.kind.value,
            f"[{style}]{result.state.value}[/{style}]",
            f"{result.certainty.score:.2f}",
            str(len(result.issues)),
            escape(first_issue),
        )
    console.print(table)


def _render_summary(run: ValidationRun, config: ValidatorConfig, needs_handoff: bool) -> None:
    payload = run.payload
    summary = payload.epistemic_summary
    console.print(
        f"[bold]{summary.validated_count}/{summary.total_records}[/bold] validated, "
        f"{summary.uncertain_count} uncertain, {summary.invalid_count} invalid "
        f"(overall certainty {summary.overall_certainty:.2f})"
    )
    for region in payload.uncertainty_regions:
        console.print(
            f"  [magenta]region[/magenta] {region.id}: {len(region.record_ids)} record(s), "
            f"level {region.uncertainty_level:.1f}"
        )
    for hint in payload.contradiction_hints:
        console.print(
            f"  [red]hint[/red] {escape(hint.record_a)} <> {escape(hint.record_b)}: {escape(hint.description)}"
        )
    for gap in summary.epistemic_gaps:
        console.print(f"  [yellow]gap[/yellow] {gap.gap_type.value}: {gap.description}")
    console.print(summary.recommendation)
    boundary = determine_certainty_boundary(run.results, config)
    console.print(escape(boundary.handoff_recommendation))
    if needs_handoff:
        console.print(
            f"[bold yellow]Exploration handoff to {config.exploration_tool_name} recommended[/bold yellow]"
        )


def _write_output(run: ValidationRun, output: str, envelope: bool) -> Path:
    target = Path(output)
    target.parent.mkdir(parents=True, exist_ok=True)
    document = HandoffProtocol.create_export(run.payload) if envelope else run.payload
    target.write_text(HandoffProtocol.to_json(document), encoding="utf-8")
    return target


def _command_schema(args: argparse.Namespace) -> int:
    if args.full:
        schema = HandoffPayload.model_json_schema(by_alias=True)
    else:
        schema = HANDOFF_SCHEMA
    print(json.dumps(schema, indent=2))
    return EXIT_OK


def _command_validate(args: argparse.Namespace) -> int:
    log_to_file = args.log_file is not None
    setup_logging(
        level=LogLevel(args.verbose_level),
        log_to_file=log_to_file,
        log_file=args.log_file,
        verbose=args.verbose,
        debug=args.debug,
    )

    audit_enabled = args.audit_dir is not None
    if audit_enabled:
        audit_path = structured_log.configure_run_logging(args.audit_dir)
        structured_log.bind_run(uuid.uuid4().hex, source=args.records)
        logger.debug("Audit trail: %s", audit_path)

    try:
        return _run_validate(args)
    finally:
        if audit_enabled:
            structured_log.reset_run_logging()


def _run_validate(args: argparse.Namespace) -> int:
    try:
        config = load_validator_config(args.config, strictness=args.strictness)
        records = load_zotero_json(args.records)
        relations = load_relations_json(args.relations)
        run = run_validation(records, config, relations)
    except RecordPreconditionError as e:
        for index, reason in e.offenders:
            console.print(f"[red]record #{index}[/red]: {escape(reason)}")
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return EXIT_USAGE
    except (CitecheckError, FileNotFoundError, ValueError) as e:
        # ValueError covers malformed JSON and records the models reject.
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return EXIT_USAGE

    for result in run.results:
        structured_log.log_validation_result(result)
    needs_handoff = run.needs_handoff
    structured_log.log_handoff(run.payload, needs_handoff)

    console.print()
    console.print(Rule(f"[bold cyan]citecheck ({config.strictness.value})[/bold cyan]", style="cyan"))
    _render_results(run.results)
    _render_summary(run, config, needs_handoff)

    if args.output:
        written = _write_output(run, args.output, args.envelope)
        console.print(f"Payload written to {written}")

    return EXIT_HANDOFF if needs_handoff else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    if args.command == "schema":
        return _command_schema(args)
    return _command_validate(args)


if __name__ == "__main__":
    sys.exit(main())
