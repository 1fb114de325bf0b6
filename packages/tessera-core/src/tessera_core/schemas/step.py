"""Sequence step models.

A step is either a deployment of an artifact or a method call on an
instance deployed by an earlier step.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tessera_core.schemas.artifact import IDENTIFIER_PATTERN, Artifact
from tessera_core.schemas.reference import Reference, coerce_references, iter_references


class DeployStep(BaseModel):
    """Deploy an artifact to the target environment.

    Attributes:
        kind: Discriminator, always "deploy".
        artifact: Artifact to deploy.
        label: Optional display label (defaults to the artifact name).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["deploy"] = "deploy"
    artifact: Artifact = Field(..., description="Artifact to deploy")
    label: str = Field(default="", description="Display label")

    @property
    def display_name(self) -> str:
        """Label, or the artifact name when no label is set."""
        return self.label or self.artifact.name

    def references(self) -> list[Reference]:
        """References contained in the constructor arguments, in order."""
        return list(iter_references(self.artifact.constructor_args))


class InvokeStep(BaseModel):
    """Call a method on a previously deployed instance.

    Attributes:
        kind: Discriminator, always "invoke".
        target: Reference to the deploy step whose instance is called.
        method: Method name.
        args: Ordered arguments; literals, nested lists/dicts, or References.
        label: Optional display label (defaults to ``method``).

    Example:
        >>> step = InvokeStep(
        ...     target=Reference(step=1),
        ...     method="init",
        ...     args=[{"$ref": 0}, [1, 2, 3]],
        ... )
        >>> step.args[0]
        Reference(step=0)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["invoke"] = "invoke"
    target: Reference = Field(..., description="Instance to call")
    method: str = Field(..., pattern=IDENTIFIER_PATTERN, description="Method name")
    args: list[Any] = Field(default_factory=list, description="Call arguments")
    label: str = Field(default="", description="Display label")

    @field_validator("args", mode="before")
    @classmethod
    def coerce_arg_references(cls, value: Any) -> Any:
        return coerce_references(value)

    @property
    def display_name(self) -> str:
        """Label, or the method name when no label is set."""
        return self.label or self.method

    def references(self) -> list[Reference]:
        """The target followed by every reference in the arguments, in order."""
        return [self.target, *iter_references(self.args)]


Step = Annotated[DeployStep | InvokeStep, Field(discriminator="kind")]
