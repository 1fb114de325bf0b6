"""Custom exception hierarchy for tessera-core.

This module defines the exception classes used throughout tessera:
- TesseraError: Base exception for all tessera-related errors
- SequencingError: Base for everything raised by the deployment sequencer
- InvalidSequenceError / UnresolvedReferenceError: static validation failures
- DeploymentFailure / InvocationFailure: runtime step failures

Design:
- User-facing messages are safe to display (no internal details)
- Technical details logged internally via structlog
- Runtime failures keep the environment's exception verbatim as ``cause``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tessera_core.sequencer.models import SequenceResult

logger = structlog.get_logger(__name__)


class TesseraError(Exception):
    """Base exception for tessera.

    All tessera exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but NEVER exposed in the message.

    Example:
        >>> raise TesseraError(
        ...     "Deployment environment unavailable",
        ...     internal_details="connection refused at 127.0.0.1:8545",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize TesseraError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "tessera_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ArtifactNotFoundError(TesseraError):
    """Raised when a named artifact is not registered.

    Always includes the list of available artifacts for actionable feedback.

    Attributes:
        artifact_name: Name of the requested artifact.
        available: Names of registered artifacts.

    Example:
        >>> raise ArtifactNotFoundError("TokenVote", ["SampleToken"])
        # User sees: "Artifact 'TokenVote' not found. Available: SampleToken"
    """

    def __init__(
        self,
        artifact_name: str,
        available: list[str],
        *,
        internal_details: str | None = None,
    ) -> None:
        available_str = ", ".join(available) if available else "none"
        super().__init__(
            f"Artifact '{artifact_name}' not found. Available: {available_str}",
            internal_details=internal_details,
        )
        self.artifact_name = artifact_name
        self.available = available


class ArtifactLoadError(TesseraError):
    """Raised when a compiled artifact file cannot be loaded.

    Attributes:
        file_path: Path of the offending file (if known).
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        full_message = f"{user_message} (in {file_path})" if file_path else user_message
        super().__init__(full_message, internal_details=internal_details)
        self.file_path = file_path


class EnvironmentRejectedError(TesseraError):
    """Raised by a target environment that refuses a deployment or call.

    Use this exception when:
    - Artifact deployment is rejected (bad bytecode, out of gas analogue)
    - A call targets an address with no deployed code
    - A call names a method the deployed artifact does not expose
    """

    pass


class SequencingError(TesseraError):
    """Base class for all deployment sequencer errors."""

    pass


class InvalidSequenceError(SequencingError):
    """Raised when a sequence fails static validation.

    Raised before any step executes, so no side effects have happened.

    Attributes:
        violations: Every problem found during validation, in step order.

    Example:
        >>> raise InvalidSequenceError(
        ...     "Step 1 references step 5, which does not precede it",
        ...     violations=["Step 1 references step 5, which does not precede it"],
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        violations: list[str] | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message, internal_details=internal_details)
        self.violations = violations if violations is not None else [user_message]


class UnresolvedReferenceError(InvalidSequenceError):
    """Raised when a reference points at a step that produces no address.

    The referenced step precedes the referring step but is not a deploy step,
    so there is no deployed instance to resolve it against.
    """

    pass


class DeploymentFailure(SequencingError):
    """Raised when the environment fails to deploy an artifact.

    Attributes:
        step_index: Index of the failing deploy step.
        artifact_name: Name of the artifact being deployed.
        cause: The exception raised by the environment, unchanged.
        result: Partial SequenceResult (steps before ``step_index`` succeeded).
    """

    def __init__(
        self,
        step_index: int,
        artifact_name: str,
        cause: BaseException,
        *,
        result: SequenceResult | None = None,
    ) -> None:
        super().__init__(
            f"Step {step_index}: deployment of '{artifact_name}' failed: {cause}",
        )
        self.step_index = step_index
        self.artifact_name = artifact_name
        self.cause = cause
        self.result = result


class InvocationFailure(SequencingError):
    """Raised when the environment fails to execute a method call.

    Attributes:
        step_index: Index of the failing invoke step.
        method: Name of the invoked method.
        cause: The exception raised by the environment, unchanged.
        result: Partial SequenceResult (steps before ``step_index`` succeeded).
    """

    def __init__(
        self,
        step_index: int,
        method: str,
        cause: BaseException,
        *,
        result: SequenceResult | None = None,
    ) -> None:
        super().__init__(f"Step {step_index}: call to '{method}' failed: {cause}")
        self.step_index = step_index
        self.method = method
        self.cause = cause
        self.result = result
