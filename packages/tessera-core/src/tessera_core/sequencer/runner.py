"""Deployment sequencer.

Executes a validated sequence step by step against a target environment,
propagating deployed addresses into later steps.
"""

from __future__ import annotations

import copy
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from tessera_core.config import SequencerConfig
from tessera_core.errors import (
    DeploymentFailure,
    EnvironmentRejectedError,
    InvalidSequenceError,
    InvocationFailure,
)
from tessera_core.schemas.deployment import DeployedInstance
from tessera_core.schemas.step import DeployStep, InvokeStep
from tessera_core.sequencer.models import SequenceResult, StepRecord, StepStatus
from tessera_core.sequencer.resolver import resolve_arguments, resolve_reference
from tessera_core.sequencer.validator import validate_sequence

if TYPE_CHECKING:
    from tessera_core.environment.base import TargetEnvironment
    from tessera_core.schemas.sequence import Sequence

logger = structlog.get_logger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class _Run:
    """Mutable state of one sequence run, owned by the Sequencer."""

    def __init__(self, sequence: Sequence) -> None:
        self.sequence = sequence
        self.started_at = datetime.now(UTC)
        self.start = time.monotonic()
        self.records: list[StepRecord] = []
        self.instances: list[DeployedInstance] = []
        self.by_step: dict[int, DeployedInstance] = {}

    def add_instance(self, instance: DeployedInstance) -> None:
        self.instances.append(instance)
        self.by_step[instance.step_index] = instance


class Sequencer:
    """Runs deployment sequences in order against one environment.

    Each step starts only after the previous one has completed. A failing
    step stops the sequence; steps already executed are not undone and no
    step is retried.

    Attributes:
        environment: Target environment steps are submitted to
        config: Sequencer configuration

    Example:
        >>> from tessera_core.environment import InMemoryEnvironment
        >>> sequencer = Sequencer(InMemoryEnvironment())
        >>> instances = sequencer.run(sequence)
        >>> [i.artifact_name for i in instances]
        ['SampleToken', 'TokenVote1202']
    """

    def __init__(
        self,
        environment: TargetEnvironment,
        config: SequencerConfig | None = None,
    ) -> None:
        """Initialize the sequencer.

        Args:
            environment: Target environment to deploy to
            config: Sequencer configuration (defaults to SequencerConfig())
        """
        self.environment = environment
        self.config = config if config is not None else SequencerConfig()
        self._log = logger.bind(component="sequencer", environment=environment.name)

    def run(self, sequence: Sequence) -> list[DeployedInstance]:
        """Execute a sequence and return the deployed instances in step order.

        Raises:
            InvalidSequenceError: If validation fails (nothing was executed).
            DeploymentFailure: If a deploy step fails.
            InvocationFailure: If an invoke step fails.
        """
        return self.execute(sequence).instances

    def execute(self, sequence: Sequence) -> SequenceResult:
        """Execute a sequence and return the full step-by-step result.

        Args:
            sequence: Sequence to execute

        Returns:
            SequenceResult with one record per executed step

        Raises:
            InvalidSequenceError: If validation fails (nothing was executed).
            DeploymentFailure: If a deploy step fails; carries the partial result.
            InvocationFailure: If an invoke step fails; carries the partial result.
        """
        log = self._log.bind(sequence=sequence.name)

        try:
            validate_sequence(sequence)
        except InvalidSequenceError as e:
            log.warning("sequence_validation_failed", violations=e.violations)
            raise

        log.info("sequence_started", steps=len(sequence), dry_run=self.config.dry_run)
        state = _Run(sequence)

        if self.config.dry_run:
            state.records.extend(
                self._skipped_record(i, step) for i, step in enumerate(sequence.steps)
            )
            return self._finish(state, log)

        for index, step in enumerate(sequence.steps):
            log.info("step_started", step=index, kind=step.kind, label=step.display_name)
            if isinstance(step, DeployStep):
                self._deploy(state, index, step, log)
            else:
                self._invoke(state, index, step, log)

        return self._finish(state, log)

    def _deploy(self, state: _Run, index: int, step: DeployStep, log: Any) -> None:
        start = time.monotonic()
        args = resolve_arguments(step.artifact.constructor_args, state.by_step)
        artifact = step.artifact.model_copy(update={"constructor_args": args})
        self._log_arguments(log, index, args)
        recorded = self._recorded(args)

        try:
            address = self.environment.deploy(artifact)
            if not isinstance(address, str) or not address:
                raise EnvironmentRejectedError(
                    f"Environment {self.environment.name!r} returned no address"
                    f" for {artifact.name}"
                )
        except Exception as e:
            state.records.append(
                StepRecord(
                    index=index,
                    kind="deploy",
                    label=step.display_name,
                    status=StepStatus.FAILED,
                    artifact_name=artifact.name,
                    resolved_args=recorded,
                    error=str(e),
                    duration_ms=_elapsed_ms(start),
                )
            )
            log.error("step_failed", step=index, kind="deploy", error=str(e))
            result = self._finish(state, log)
            raise DeploymentFailure(index, artifact.name, e, result=result) from e

        state.add_instance(
            DeployedInstance(step_index=index, artifact_name=artifact.name, address=address)
        )
        state.records.append(
            StepRecord(
                index=index,
                kind="deploy",
                label=step.display_name,
                status=StepStatus.SUCCEEDED,
                artifact_name=artifact.name,
                address=address,
                resolved_args=recorded,
                duration_ms=_elapsed_ms(start),
            )
        )
        log.info("step_completed", step=index, kind="deploy", address=address)

    def _invoke(self, state: _Run, index: int, step: InvokeStep, log: Any) -> None:
        start = time.monotonic()
        address = resolve_reference(step.target, state.by_step)
        target = state.by_step[step.target.step]
        args = resolve_arguments(step.args, state.by_step)
        self._log_arguments(log, index, args)
        recorded = self._recorded(args)

        try:
            self.environment.invoke(address, step.method, args)
        except Exception as e:
            state.records.append(
                StepRecord(
                    index=index,
                    kind="invoke",
                    label=step.display_name,
                    status=StepStatus.FAILED,
                    artifact_name=target.artifact_name,
                    address=address,
                    method=step.method,
                    resolved_args=recorded,
                    error=str(e),
                    duration_ms=_elapsed_ms(start),
                )
            )
            log.error("step_failed", step=index, kind="invoke", method=step.method, error=str(e))
            result = self._finish(state, log)
            raise InvocationFailure(index, step.method, e, result=result) from e

        state.records.append(
            StepRecord(
                index=index,
                kind="invoke",
                label=step.display_name,
                status=StepStatus.SUCCEEDED,
                artifact_name=target.artifact_name,
                address=address,
                method=step.method,
                resolved_args=recorded,
                duration_ms=_elapsed_ms(start),
            )
        )
        log.info("step_completed", step=index, kind="invoke", method=step.method)

    def _skipped_record(self, index: int, step: DeployStep | InvokeStep) -> StepRecord:
        if isinstance(step, DeployStep):
            return StepRecord(
                index=index,
                kind="deploy",
                label=step.display_name,
                status=StepStatus.SKIPPED,
                artifact_name=step.artifact.name,
            )
        return StepRecord(
            index=index,
            kind="invoke",
            label=step.display_name,
            status=StepStatus.SKIPPED,
            method=step.method,
        )

    def _recorded(self, args: list[Any]) -> list[Any]:
        return copy.deepcopy(args) if self.config.record_arguments else []

    def _log_arguments(self, log: Any, index: int, args: list[Any]) -> None:
        if self.config.verbose:
            log.info("step_arguments", step=index, args=args)
        else:
            log.debug("step_arguments", step=index, args=args)

    def _finish(self, state: _Run, log: Any) -> SequenceResult:
        total_duration_ms = _elapsed_ms(state.start)
        result = SequenceResult(
            sequence_name=state.sequence.name,
            environment=self.environment.name,
            records=state.records,
            instances=state.instances,
            dry_run=self.config.dry_run,
            started_at=state.started_at,
            finished_at=datetime.now(UTC),
            total_duration_ms=total_duration_ms,
        )
        log.info(
            "sequence_completed",
            succeeded=result.succeeded,
            steps_executed=result.succeeded_count,
            deployed=len(result.instances),
            total_duration_ms=total_duration_ms,
        )
        return result


def run_sequence(
    sequence: Sequence,
    environment: TargetEnvironment,
    config: SequencerConfig | None = None,
) -> list[DeployedInstance]:
    """Run a sequence against an environment.

    Convenience function that creates a Sequencer and runs the sequence.

    Args:
        sequence: Sequence to execute
        environment: Target environment
        config: Optional sequencer configuration

    Returns:
        Deployed instances in step order

    Example:
        >>> instances = run_sequence(sequence, InMemoryEnvironment())
    """
    return Sequencer(environment, config).run(sequence)
