"""Deployable artifact model.

An Artifact is a named deployable unit: its compiled form (opaque to
tessera) plus the constructor arguments to deploy it with.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tessera_core.schemas.reference import coerce_references

IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
"""Pattern for artifact and method names."""


class Artifact(BaseModel):
    """A deployable unit (contract).

    ``bytecode`` and ``abi`` are carried through to the target environment
    without interpretation. ``constructor_args`` may contain References to
    earlier deploy steps; they are resolved before the artifact is submitted.

    Attributes:
        name: Symbolic artifact name (e.g., "SampleToken").
        bytecode: Compiled bytecode, opaque.
        abi: Interface description, opaque list of entries.
        constructor_args: Ordered constructor arguments.

    Example:
        >>> token = Artifact(name="SampleToken")
        >>> vote = Artifact(
        ...     name="TokenVote1202",
        ...     abi=[{"type": "function", "name": "init"}],
        ... )
        >>> sorted(vote.methods)
        ['init']
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        pattern=IDENTIFIER_PATTERN,
        max_length=128,
        description="Symbolic artifact name",
    )
    bytecode: str = Field(default="", description="Compiled bytecode (opaque)")
    abi: list[dict[str, Any]] = Field(default_factory=list, description="Interface (opaque)")
    constructor_args: list[Any] = Field(
        default_factory=list,
        description="Constructor arguments; may contain references",
    )

    @field_validator("constructor_args", mode="before")
    @classmethod
    def coerce_constructor_references(cls, value: Any) -> Any:
        return coerce_references(value)

    @property
    def methods(self) -> frozenset[str]:
        """Names of the functions declared in the ABI.

        Entries without a ``type`` are treated as functions, matching the
        compiler convention.
        """
        return frozenset(
            entry["name"]
            for entry in self.abi
            if entry.get("type", "function") == "function" and "name" in entry
        )
