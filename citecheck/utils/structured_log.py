"""Structured logging for a machine-parseable audit trail of validation runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TextIO

import structlog
from structlog.typing import Processor

from citecheck.models import HandoffPayload, ValidationResult

AUDIT_FILE_NAME = "app.jsonl"

_configured = False
_logger: Any = None
_file_handle: TextIO | None = None


def _processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def configure_run_logging(log_dir: str) -> Path:
    """Start the audit trail: JSON lines appended to {log_dir}/app.jsonl.

    A second call while configured is a no-op returning the given path.
    """
    global _configured, _logger, _file_handle
    audit_path = Path(log_dir) / AUDIT_FILE_NAME
    if _configured:
        return audit_path
    audit_path.parent.mkdir(parents=True, exist_ok=True)
    _file_handle = audit_path.open("a", encoding="utf-8")
    structlog.configure(
        processors=_processors(),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=_file_handle),
        cache_logger_on_first_use=False,
    )
    _configured = True
    _logger = structlog.get_logger("citecheck.audit")
    return audit_path


def reset_run_logging() -> None:
    """Close the audit file and return to the unconfigured (no-op) state."""
    global _configured, _logger, _file_handle
    if _file_handle is not None:
        _file_handle.close()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    _configured = False
    _logger = None
    _file_handle = None


def bind_run(run_id: str, source: str | None = None) -> None:
    """Bind run context so every event includes run_id (and the input source)."""
    context: dict[str, Any] = {"run_id": run_id}
    if source is not None:
        context["source"] = source
    structlog.contextvars.bind_contextvars(**context)


def log_validation_result(result: ValidationResult) -> None:
    """One event per record."""
    if _logger is None:
        return
    _logger.info(
        "validation_result",
        record_id=result.record.id,
        kind=result.record.kind.value,
        state=result.state.value,
        score=result.certainty.score,
        errors=len(result.errors),
        issues=len(result.issues),
        exploration_issues=len(result.exploration_issues),
    )


def log_handoff(payload: HandoffPayload, handoff_triggered: bool) -> None:
    """One event per batch, summarising the payload."""
    if _logger is None:
        return
    summary = payload.epistemic_summary
    _logger.info(
        "handoff",
        version=payload.version,
        validated=len(payload.validated_citations),
        invalid=len(payload.invalid_citations),
        regions=[region.id for region in payload.uncertainty_regions],
        hints=len(payload.contradiction_hints),
        overall_certainty=summary.overall_certainty,
        gaps=[gap.gap_type.value for gap in summary.epistemic_gaps],
        handoff_triggered=handoff_triggered,
    )


def load_events_from_jsonl(path: str) -> list[dict[str, Any]]:
    """Read back audit events; blank and malformed lines are skipped."""
    jsonl_path = Path(path)
    if not jsonl_path.exists():
        return []
    events: list[dict[str, Any]] = []
    with jsonl_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(entry, dict):
                events.append(entry)
    return events
