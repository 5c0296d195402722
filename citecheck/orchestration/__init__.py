"""Handoff payload assembly and the batch pipeline."""

from citecheck.orchestration.handoff_protocol import (
    HANDOFF_SCHEMA,
    HandoffProtocol,
    requires_exploration_handoff,
)
from citecheck.orchestration.pipeline import ValidationRun, run_validation

__all__ = [
    "HANDOFF_SCHEMA",
    "HandoffProtocol",
    "ValidationRun",
    "requires_exploration_handoff",
    "run_validation",
]
