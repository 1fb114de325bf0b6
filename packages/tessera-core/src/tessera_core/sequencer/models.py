"""Sequencer result models.

Models for representing the outcome of a sequence run, step by step.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from tessera_core.schemas.deployment import DeployedInstance


class StepStatus(str, Enum):
    """Status of a sequence step.

    Attributes:
        SUCCEEDED: Step was executed and confirmed by the environment
        FAILED: Step was attempted and failed; the sequence stopped here
        SKIPPED: Step was not executed (dry run)
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepRecord(BaseModel):
    """Record of a single step.

    Attributes:
        index: Step index in the sequence
        kind: "deploy" or "invoke"
        label: Display label
        status: Step status
        artifact_name: Deployed artifact (deploy) or artifact at the target (invoke)
        address: Deployed address (deploy) or called address (invoke)
        method: Called method (invoke only)
        resolved_args: Arguments after reference resolution
        error: Failure message (failed steps only)
        duration_ms: Step duration in milliseconds

    Example:
        >>> record = StepRecord(
        ...     index=0,
        ...     kind="deploy",
        ...     label="SampleToken",
        ...     status=StepStatus.SUCCEEDED,
        ...     artifact_name="SampleToken",
        ...     address="0x" + "ab" * 20,
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: int = Field(..., ge=0, description="Step index")
    kind: Literal["deploy", "invoke"] = Field(..., description="Step kind")
    label: str = Field(..., min_length=1, description="Display label")
    status: StepStatus = Field(..., description="Step status")
    artifact_name: str | None = Field(default=None, description="Artifact name")
    address: str | None = Field(default=None, description="Deployed or called address")
    method: str | None = Field(default=None, description="Invoked method")
    resolved_args: list[Any] = Field(default_factory=list, description="Resolved arguments")
    error: str = Field(default="", description="Failure message")
    duration_ms: int = Field(default=0, ge=0, description="Duration in milliseconds")

    @property
    def succeeded(self) -> bool:
        """Check if the step was executed successfully."""
        return self.status == StepStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return self.status == StepStatus.FAILED


class SequenceResult(BaseModel):
    """Outcome of a sequence run.

    On failure ``records`` ends with the failing step; steps after it have
    no record because they never ran.

    Attributes:
        sequence_name: Name of the sequence
        environment: Name of the target environment
        records: Step records in execution order
        instances: Deployed instances in step order
        dry_run: Whether the run was a dry run
        started_at: When the run started
        finished_at: When the run finished
        total_duration_ms: Total duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sequence_name: str = Field(..., min_length=1, description="Sequence name")
    environment: str = Field(default="", description="Target environment name")
    records: list[StepRecord] = Field(default_factory=list, description="Step records")
    instances: list[DeployedInstance] = Field(
        default_factory=list, description="Deployed instances"
    )
    dry_run: bool = Field(default=False, description="Dry run")
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Start time"
    )
    finished_at: datetime | None = Field(default=None, description="End time")
    total_duration_ms: int = Field(default=0, ge=0, description="Total duration")

    @property
    def failed(self) -> bool:
        """Check if any step failed."""
        return any(r.failed for r in self.records)

    @property
    def succeeded(self) -> bool:
        """Check if no step failed."""
        return not self.failed

    @property
    def failed_step(self) -> StepRecord | None:
        """The record of the failing step, if any."""
        return next((r for r in self.records if r.failed), None)

    @property
    def succeeded_count(self) -> int:
        """Count of executed, successful steps."""
        return sum(1 for r in self.records if r.succeeded)

    def instance_for(self, step_index: int) -> DeployedInstance:
        """Return the instance produced by a deploy step.

        Raises:
            KeyError: If step_index produced no instance.
        """
        for instance in self.instances:
            if instance.step_index == step_index:
                return instance
        raise KeyError(step_index)

    def deployed(self, artifact_name: str) -> DeployedInstance:
        """Return the most recent instance of an artifact.

        Raises:
            KeyError: If the artifact was not deployed in this run.
        """
        for instance in reversed(self.instances):
            if instance.artifact_name == artifact_name:
                return instance
        raise KeyError(artifact_name)
