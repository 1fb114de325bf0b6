"""Sequencer configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SequencerConfig(BaseModel):
    """Configuration for a sequencer run.

    Attributes:
        dry_run: Validate the sequence and report it without calling the
            target environment.
        record_arguments: Store resolved call arguments in step records.
        verbose: Log resolved arguments at info level instead of debug.

    Example:
        >>> config = SequencerConfig(dry_run=True)
        >>> config.record_arguments
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dry_run: bool = Field(default=False, description="Validate only, no side effects")
    record_arguments: bool = Field(default=True, description="Keep resolved args in records")
    verbose: bool = Field(default=False, description="Verbose logging")
