"""Deployed instance model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class DeployedInstance(BaseModel):
    """Result of a successful deploy step.

    Created exactly once per successful deployment and never modified.

    Attributes:
        step_index: Index of the deploy step that produced this instance.
        artifact_name: Name of the deployed artifact.
        address: Network address of the instance. Opaque; the environment
            decides its format.
        deployed_at: When the deployment completed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    step_index: int = Field(..., ge=0, description="Producing step index")
    artifact_name: str = Field(..., min_length=1, description="Deployed artifact name")
    address: str = Field(..., min_length=1, description="Address returned by the environment")
    deployed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Deployment time"
    )
