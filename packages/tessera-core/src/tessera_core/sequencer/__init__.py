"""Deployment sequencer.

Validates a sequence of deploy/invoke steps, then executes it in order
against a target environment, propagating deployed addresses.
"""

from __future__ import annotations

from tessera_core.sequencer.builder import SequenceBuilder
from tessera_core.sequencer.models import SequenceResult, StepRecord, StepStatus
from tessera_core.sequencer.output import (
    format_result_json,
    format_result_table,
    print_result,
)
from tessera_core.sequencer.resolver import resolve_arguments, resolve_reference
from tessera_core.sequencer.runner import Sequencer, run_sequence
from tessera_core.sequencer.validator import (
    SequenceValidationResult,
    Violation,
    collect_violations,
    validate_sequence,
)

__all__ = [
    "SequenceBuilder",
    "SequenceResult",
    "SequenceValidationResult",
    "Sequencer",
    "StepRecord",
    "StepStatus",
    "Violation",
    "collect_violations",
    "format_result_json",
    "format_result_table",
    "print_result",
    "resolve_arguments",
    "resolve_reference",
    "run_sequence",
    "validate_sequence",
]
