"""Unit tests for the deployment sequencer."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from tessera_core.config import SequencerConfig
from tessera_core.environment import InMemoryEnvironment, TargetEnvironment
from tessera_core.errors import (
    DeploymentFailure,
    EnvironmentRejectedError,
    InvalidSequenceError,
    InvocationFailure,
    UnresolvedReferenceError,
)
from tessera_core.schemas import Artifact, DeployStep, InvokeStep, Reference, Sequence
from tessera_core.sequencer.models import StepStatus
from tessera_core.sequencer.runner import Sequencer, run_sequence


class TestSequencer:
    """Tests for Sequencer initialization."""

    def test_initialization(self, environment: InMemoryEnvironment) -> None:
        sequencer = Sequencer(environment)

        assert sequencer.environment is environment
        assert sequencer.config == SequencerConfig()

    def test_initialization_with_config(self, environment: InMemoryEnvironment) -> None:
        config = SequencerConfig(dry_run=True)
        assert Sequencer(environment, config).config is config


class TestRun:
    """Tests for successful runs."""

    def test_init_sequence(
        self,
        environment: InMemoryEnvironment,
        init_sequence: Sequence,
        accounts: list[str],
    ) -> None:
        """Two deploys yield two instances; init receives the token address first."""
        instances = Sequencer(environment).run(init_sequence)

        assert [i.artifact_name for i in instances] == ["SampleToken", "TokenVote1202"]
        assert [i.step_index for i in instances] == [0, 1]
        assert len(environment.calls) == 1
        call = environment.calls[0]
        assert call.address == instances[1].address
        assert call.method == "init"
        assert call.args == [instances[0].address, [1, 2, 3], accounts]

    def test_instances_match_deploy_steps(self, environment: InMemoryEnvironment) -> None:
        """One instance per deploy step, in step order."""
        sequence = Sequence(
            steps=[
                DeployStep(artifact=Artifact(name="A")),
                InvokeStep(target=Reference(step=0), method="setup"),
                DeployStep(artifact=Artifact(name="B")),
                DeployStep(artifact=Artifact(name="C")),
                InvokeStep(target=Reference(step=3), method="link", args=[Reference(step=2)]),
            ]
        )

        instances = Sequencer(environment).run(sequence)

        assert [(i.step_index, i.artifact_name) for i in instances] == [
            (0, "A"),
            (2, "B"),
            (3, "C"),
        ]
        assert environment.calls[1].args == [instances[1].address]

    def test_constructor_references_resolved(self, environment: InMemoryEnvironment) -> None:
        """References in constructor arguments receive earlier addresses."""
        sequence = Sequence(
            steps=[
                DeployStep(artifact=Artifact(name="SampleToken")),
                DeployStep(
                    artifact=Artifact(name="TokenVote1202", constructor_args=[Reference(step=0), 3])
                ),
            ]
        )

        instances = Sequencer(environment).run(sequence)

        deployed_vote = environment.deployments[1].artifact
        assert deployed_vote.constructor_args == [instances[0].address, 3]

    def test_empty_sequence(self, environment: InMemoryEnvironment) -> None:
        assert Sequencer(environment).run(Sequence()) == []
        assert environment.side_effect_count == 0

    def test_execute_records_every_step(
        self, environment: InMemoryEnvironment, init_sequence: Sequence
    ) -> None:
        result = Sequencer(environment).execute(init_sequence)

        assert result.succeeded is True
        assert result.sequence_name == "token-vote"
        assert result.environment == "memory"
        assert [r.status for r in result.records] == [StepStatus.SUCCEEDED] * 3
        assert result.records[2].artifact_name == "TokenVote1202"
        assert result.records[2].resolved_args[0] == result.instances[0].address
        assert result.deployed("TokenVote1202") == result.instances[1]
        assert result.finished_at is not None

    def test_run_sequence_helper(
        self, environment: InMemoryEnvironment, init_sequence: Sequence
    ) -> None:
        assert len(run_sequence(init_sequence, environment)) == 2

    def test_logs_step_events(
        self,
        environment: InMemoryEnvironment,
        init_sequence: Sequence,
    ) -> None:
        with capture_logs() as logs:
            Sequencer(environment).run(init_sequence)

        events = [entry["event"] for entry in logs]
        assert events[0] == "sequence_started"
        assert events.count("step_completed") == 3
        assert events[-1] == "sequence_completed"


class TestValidationFailures:
    """Invalid sequences fail before any side effect."""

    def test_future_reference(
        self, environment: InMemoryEnvironment, sample_token: Artifact
    ) -> None:
        """[Deploy(A), Invoke(0, init, [Reference(5)])] deploys nothing."""
        sequence = Sequence(
            steps=[
                DeployStep(artifact=sample_token),
                InvokeStep(target=Reference(step=0), method="init", args=[Reference(step=5)]),
            ]
        )

        with pytest.raises(InvalidSequenceError):
            Sequencer(environment).run(sequence)
        assert environment.side_effect_count == 0

    def test_reference_to_invoke_step(
        self, environment: InMemoryEnvironment, init_sequence: Sequence
    ) -> None:
        steps = [*init_sequence.steps, InvokeStep(target=Reference(step=2), method="vote")]

        with pytest.raises(UnresolvedReferenceError):
            Sequencer(environment).run(Sequence(steps=steps))
        assert environment.side_effect_count == 0


class TestDeploymentFailure:
    """Deploy steps rejected by the environment."""

    def test_first_deploy_fails(self, sample_token: Artifact, token_vote: Artifact) -> None:
        environment = InMemoryEnvironment(fail_deploy={"SampleToken"})
        sequence = Sequence(
            steps=[DeployStep(artifact=sample_token), DeployStep(artifact=token_vote)]
        )

        with pytest.raises(DeploymentFailure) as exc_info:
            Sequencer(environment).run(sequence)

        error = exc_info.value
        assert error.step_index == 0
        assert error.artifact_name == "SampleToken"
        assert isinstance(error.cause, EnvironmentRejectedError)
        assert error.__cause__ is error.cause
        assert error.result is not None
        assert error.result.instances == []
        assert environment.deployments == []

    def test_later_deploy_fails(self, init_sequence: Sequence) -> None:
        """Earlier steps keep their effects; later steps never run."""
        environment = InMemoryEnvironment(fail_deploy={"TokenVote1202"})

        with pytest.raises(DeploymentFailure) as exc_info:
            Sequencer(environment).run(init_sequence)

        result = exc_info.value.result
        assert result is not None
        assert [r.status for r in result.records] == [StepStatus.SUCCEEDED, StepStatus.FAILED]
        assert result.failed_step is not None
        assert "rejected" in result.failed_step.error
        assert [d.artifact.name for d in environment.deployments] == ["SampleToken"]
        assert environment.calls == []

    def test_opaque_address_is_kept(self, sample_token: Artifact, token_vote: Artifact) -> None:
        """Addresses in a non-hex format are propagated, not rejected."""
        environment = MagicMock(spec=TargetEnvironment)
        environment.name = "mock"
        environment.deploy.side_effect = ["node-0", "node-1"]
        sequence = Sequence(
            steps=[
                DeployStep(artifact=sample_token),
                DeployStep(artifact=token_vote),
                InvokeStep(target=Reference(step=1), method="init", args=[Reference(step=0)]),
            ]
        )

        result = Sequencer(environment).execute(sequence)

        assert [i.address for i in result.instances] == ["node-0", "node-1"]
        assert result.records[0].status == StepStatus.SUCCEEDED
        assert result.records[0].address == "node-0"
        environment.invoke.assert_called_once_with("node-1", "init", ["node-0"])

    def test_environment_returns_no_address(self, sample_token: Artifact) -> None:
        environment = MagicMock(spec=TargetEnvironment)
        environment.name = "mock"
        environment.deploy.return_value = ""

        with pytest.raises(DeploymentFailure) as exc_info:
            Sequencer(environment).run(Sequence(steps=[DeployStep(artifact=sample_token)]))

        assert isinstance(exc_info.value.cause, EnvironmentRejectedError)
        assert "returned no address" in str(exc_info.value.cause)

    def test_no_retry(self, sample_token: Artifact) -> None:
        """A failing step is attempted exactly once."""
        environment = MagicMock(spec=TargetEnvironment)
        environment.name = "mock"
        environment.deploy.side_effect = RuntimeError("nonce too low")

        with pytest.raises(DeploymentFailure):
            Sequencer(environment).run(Sequence(steps=[DeployStep(artifact=sample_token)]))

        assert environment.deploy.call_count == 1


class TestInvocationFailure:
    """Invoke steps rejected by the environment."""

    def test_init_reverts(self, init_sequence: Sequence) -> None:
        environment = InMemoryEnvironment(fail_invoke={"init"})

        with pytest.raises(InvocationFailure) as exc_info:
            Sequencer(environment).run(init_sequence)

        error = exc_info.value
        assert error.step_index == 2
        assert error.method == "init"
        assert isinstance(error.cause, EnvironmentRejectedError)
        assert error.result is not None
        assert len(error.result.instances) == 2
        assert error.result.records[-1].failed is True
        assert len(environment.deployments) == 2

    def test_steps_after_failure_do_not_run(
        self, init_sequence: Sequence, sample_token: Artifact
    ) -> None:
        environment = InMemoryEnvironment(fail_invoke={"init"})
        steps = [*init_sequence.steps, DeployStep(artifact=sample_token)]

        with pytest.raises(InvocationFailure):
            Sequencer(environment).run(Sequence(steps=steps))

        assert len(environment.deployments) == 2

    def test_failure_is_logged(self, init_sequence: Sequence) -> None:
        with capture_logs() as logs, pytest.raises(InvocationFailure):
            Sequencer(InMemoryEnvironment(fail_invoke={"init"})).run(init_sequence)

        failed = [entry for entry in logs if entry["event"] == "step_failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "error"
        assert failed[0]["step"] == 2


class TestConfiguration:
    """Tests for SequencerConfig effects."""

    def test_dry_run_has_no_side_effects(
        self, environment: InMemoryEnvironment, init_sequence: Sequence
    ) -> None:
        result = Sequencer(environment, SequencerConfig(dry_run=True)).execute(init_sequence)

        assert environment.side_effect_count == 0
        assert result.dry_run is True
        assert result.instances == []
        assert [r.status for r in result.records] == [StepStatus.SKIPPED] * 3
        assert result.succeeded is True

    def test_dry_run_still_validates(self, environment: InMemoryEnvironment) -> None:
        sequence = Sequence(steps=[InvokeStep(target=Reference(step=0), method="init")])

        with pytest.raises(InvalidSequenceError):
            Sequencer(environment, SequencerConfig(dry_run=True)).execute(sequence)

    def test_record_arguments_disabled(
        self, environment: InMemoryEnvironment, init_sequence: Sequence
    ) -> None:
        config = SequencerConfig(record_arguments=False)
        result = Sequencer(environment, config).execute(init_sequence)

        assert all(r.resolved_args == [] for r in result.records)
        assert environment.calls[0].args[1] == [1, 2, 3]

    def test_recorded_arguments_are_a_snapshot(self, init_sequence: Sequence) -> None:
        """Mutation of arguments by the environment does not reach the record."""
        environment = MagicMock(spec=TargetEnvironment)
        environment.name = "mock"
        environment.deploy.side_effect = ["0x" + "aa" * 20, "0x" + "bb" * 20]
        environment.invoke.side_effect = lambda address, method, args: args[1].append(4)

        result = Sequencer(environment).execute(init_sequence)

        assert environment.invoke.call_args.args[2][1] == [1, 2, 3, 4]
        assert result.records[2].resolved_args[1] == [1, 2, 3]

    def test_verbose_logs_arguments(
        self,
        environment: InMemoryEnvironment,
        init_sequence: Sequence,
    ) -> None:
        with capture_logs() as logs:
            Sequencer(environment, SequencerConfig(verbose=True)).run(init_sequence)

        arguments = [entry for entry in logs if entry["event"] == "step_arguments"]
        assert {entry["log_level"] for entry in arguments} == {"info"}
        assert arguments[-1]["args"][1] == [1, 2, 3]
