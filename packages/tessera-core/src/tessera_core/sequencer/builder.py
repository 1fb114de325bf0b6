"""Fluent construction of deployment sequences."""

from __future__ import annotations

from typing import Any

from tessera_core.schemas.artifact import Artifact
from tessera_core.schemas.reference import Reference
from tessera_core.schemas.sequence import Sequence
from tessera_core.schemas.step import DeployStep, InvokeStep


class SequenceBuilder:
    """Build a Sequence step by step.

    ``deploy`` returns a Reference to the new step, which can be passed as
    the target or as an argument of later steps.

    Example:
        >>> builder = SequenceBuilder("vote")
        >>> token = builder.deploy(Artifact(name="SampleToken"))
        >>> vote = builder.deploy(Artifact(name="TokenVote1202"))
        >>> builder.invoke(vote, "init", token, [1, 2, 3], accounts)
        2
        >>> sequence = builder.build()
    """

    def __init__(self, name: str = "sequence") -> None:
        self.name = name
        self._steps: list[DeployStep | InvokeStep] = []

    def __len__(self) -> int:
        return len(self._steps)

    def deploy(self, artifact: Artifact, *, label: str = "") -> Reference:
        """Append a deploy step and return a reference to its address."""
        self._steps.append(DeployStep(artifact=artifact, label=label))
        return Reference(step=len(self._steps) - 1)

    def invoke(self, target: Reference, method: str, *args: Any, label: str = "") -> int:
        """Append an invoke step and return its step index."""
        self._steps.append(InvokeStep(target=target, method=method, args=list(args), label=label))
        return len(self._steps) - 1

    def build(self) -> Sequence:
        """Return the sequence built so far."""
        return Sequence(name=self.name, steps=list(self._steps))
