"""Deployment sequence model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tessera_core.schemas.step import DeployStep, Step


class Sequence(BaseModel):
    """An ordered list of deployment steps.

    The reference-ordering invariant (every reference points at an earlier
    deploy step) is checked by the sequencer before execution, so invalid
    sequences can still be constructed, inspected and reported on.

    Attributes:
        name: Sequence name used in logs and reports.
        steps: Steps in execution order.

    Example:
        >>> seq = Sequence.model_validate({
        ...     "name": "vote",
        ...     "steps": [
        ...         {"kind": "deploy", "artifact": {"name": "SampleToken"}},
        ...         {"kind": "deploy", "artifact": {"name": "TokenVote1202"}},
        ...         {"kind": "invoke", "target": {"$ref": 1}, "method": "init",
        ...          "args": [{"$ref": 0}]},
        ...     ],
        ... })
        >>> len(seq)
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="sequence", min_length=1, description="Sequence name")
    steps: list[Step] = Field(default_factory=list, description="Ordered steps")

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def deploy_steps(self) -> list[tuple[int, DeployStep]]:
        """Deploy steps paired with their step index."""
        return [(i, step) for i, step in enumerate(self.steps) if isinstance(step, DeployStep)]
