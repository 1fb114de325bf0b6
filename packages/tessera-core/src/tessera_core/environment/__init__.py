"""Target environments that sequences are executed against."""

from __future__ import annotations

from tessera_core.environment.base import TargetEnvironment
from tessera_core.environment.memory import (
    InMemoryEnvironment,
    RecordedCall,
    RecordedDeployment,
)

__all__ = [
    "InMemoryEnvironment",
    "RecordedCall",
    "RecordedDeployment",
    "TargetEnvironment",
]
