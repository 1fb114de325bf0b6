"""Static validation of deployment sequences.

Runs before any step executes. A sequence is valid when:
- every Reference(i) in step k satisfies i < k
- every referenced step is a deploy step
- every ``0x`` string literal is well-formed hex
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tessera_core.errors import InvalidSequenceError, UnresolvedReferenceError
from tessera_core.schemas.address import is_hex_literal
from tessera_core.schemas.reference import Reference, iter_literals
from tessera_core.schemas.sequence import Sequence
from tessera_core.schemas.step import DeployStep, InvokeStep


@dataclass(frozen=True)
class Violation:
    """One problem found in a sequence.

    Attributes:
        step_index: Index of the offending step.
        message: Human-readable description.
        error_type: Exception class the violation is reported as.
    """

    step_index: int
    message: str
    error_type: type[InvalidSequenceError] = InvalidSequenceError


@dataclass
class SequenceValidationResult:
    """Result of sequence validation.

    Attributes:
        valid: True if the sequence can be executed.
        violations: Problems found, in step order.
    """

    valid: bool
    violations: list[Violation] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        """Violation messages, in step order."""
        return [v.message for v in self.violations]


def _check_reference(
    sequence: Sequence, step_index: int, ref: Reference, role: str
) -> Violation | None:
    if ref.step >= step_index:
        return Violation(
            step_index,
            f"Step {step_index}: {role} references step {ref.step}, "
            "which does not precede it",
        )
    if not isinstance(sequence.steps[ref.step], DeployStep):
        return Violation(
            step_index,
            f"Step {step_index}: {role} references step {ref.step}, "
            "which is not a deploy step",
            UnresolvedReferenceError,
        )
    return None


def _check_literals(step_index: int, values: list[Any]) -> list[Violation]:
    return [
        Violation(step_index, f"Step {step_index}: malformed hex literal {value!r}")
        for value in iter_literals(values)
        if isinstance(value, str) and value[:2].lower() == "0x" and not is_hex_literal(value)
    ]


def collect_violations(sequence: Sequence) -> SequenceValidationResult:
    """Check a sequence without executing it.

    Args:
        sequence: Sequence to check.

    Returns:
        SequenceValidationResult listing every violation found.

    Example:
        >>> result = collect_violations(sequence)
        >>> if not result.valid:
        ...     print("\\n".join(result.messages))
    """
    violations: list[Violation] = []

    for index, step in enumerate(sequence.steps):
        if isinstance(step, InvokeStep):
            checks = [(step.target, "call target")]
            checks += [(ref, "argument") for ref in step.references()[1:]]
            values = step.args
        else:
            checks = [(ref, "constructor argument") for ref in step.references()]
            values = step.artifact.constructor_args

        for ref, role in checks:
            violation = _check_reference(sequence, index, ref, role)
            if violation is not None:
                violations.append(violation)

        violations.extend(_check_literals(index, values))

    return SequenceValidationResult(valid=not violations, violations=violations)


def validate_sequence(sequence: Sequence) -> None:
    """Raise if a sequence cannot be executed.

    The first violation decides the exception type; all violations are
    attached as ``violations``.

    Raises:
        InvalidSequenceError: On a forward/self reference or malformed literal.
        UnresolvedReferenceError: If the first violation is a reference to a
            step that is not a deploy step.
    """
    result = collect_violations(sequence)
    if result.valid:
        return

    first = result.violations[0]
    raise first.error_type(first.message, violations=result.messages)
