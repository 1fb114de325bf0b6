"""tessera-core: ordered deploy-and-initialize sequencing.

This package provides:
- Sequence data model (artifacts, deploy/invoke steps, references)
- Sequencer: validate and execute sequences with address propagation
- Target environment interface and an in-memory environment
- Artifact registry for named artifact lookup
"""

from __future__ import annotations

__version__ = "0.1.0"

from tessera_core.config import SequencerConfig
from tessera_core.environment import InMemoryEnvironment, TargetEnvironment

# Error types
from tessera_core.errors import (
    ArtifactLoadError,
    ArtifactNotFoundError,
    DeploymentFailure,
    EnvironmentRejectedError,
    InvalidSequenceError,
    InvocationFailure,
    SequencingError,
    TesseraError,
    UnresolvedReferenceError,
)
from tessera_core.registry import ArtifactRegistry

# Schema models
from tessera_core.schemas import (
    Address,
    Artifact,
    DeployedInstance,
    DeployStep,
    InvokeStep,
    Reference,
    Sequence,
    Step,
    is_address,
    to_address,
)

# Sequencer
from tessera_core.sequencer import (
    SequenceBuilder,
    SequenceResult,
    Sequencer,
    StepRecord,
    StepStatus,
    collect_violations,
    print_result,
    run_sequence,
    validate_sequence,
)

__all__ = [
    "__version__",
    # Sequencer
    "Sequencer",
    "SequencerConfig",
    "SequenceBuilder",
    "SequenceResult",
    "StepRecord",
    "StepStatus",
    "run_sequence",
    "validate_sequence",
    "collect_violations",
    "print_result",
    # Environments
    "TargetEnvironment",
    "InMemoryEnvironment",
    "ArtifactRegistry",
    # Errors
    "TesseraError",
    "SequencingError",
    "InvalidSequenceError",
    "UnresolvedReferenceError",
    "DeploymentFailure",
    "InvocationFailure",
    "EnvironmentRejectedError",
    "ArtifactNotFoundError",
    "ArtifactLoadError",
    # Schema models
    "Address",
    "Artifact",
    "DeployStep",
    "InvokeStep",
    "Step",
    "Reference",
    "Sequence",
    "DeployedInstance",
    "is_address",
    "to_address",
]
