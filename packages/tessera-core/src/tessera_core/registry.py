"""Artifact registry.

Named lookup of deployable artifacts, optionally populated from a build
directory of compiled artifact JSON files (one file per contract with
``contractName``, ``abi`` and ``bytecode`` keys).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import ValidationError

from tessera_core.errors import ArtifactLoadError, ArtifactNotFoundError
from tessera_core.schemas.artifact import Artifact

logger = structlog.get_logger(__name__)


def load_artifact_file(path: Path) -> Artifact:
    """Load one compiled artifact JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Artifact named after ``contractName`` with its ABI and bytecode.

    Raises:
        ArtifactLoadError: If the file is unreadable or malformed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ArtifactLoadError(
            "Cannot read compiled artifact",
            file_path=str(path),
            internal_details=str(e),
        ) from e

    if not isinstance(data, dict) or "contractName" not in data:
        raise ArtifactLoadError("Compiled artifact has no contractName", file_path=str(path))

    try:
        return Artifact(
            name=data["contractName"],
            abi=data.get("abi") or [],
            bytecode=data.get("bytecode") or "",
        )
    except ValidationError as e:
        raise ArtifactLoadError(
            "Compiled artifact is malformed",
            file_path=str(path),
            internal_details=str(e),
        ) from e


class ArtifactRegistry:
    """Artifacts addressable by name.

    Registering an artifact under a name that is already taken replaces the
    earlier one.

    Example:
        >>> registry = ArtifactRegistry([Artifact(name="SampleToken")])
        >>> registry.require("SampleToken").name
        'SampleToken'
        >>> "TokenVote1202" in registry
        False
    """

    def __init__(self, artifacts: Iterable[Artifact] = ()) -> None:
        self._artifacts: dict[str, Artifact] = {}
        for artifact in artifacts:
            self.register(artifact)

    def __contains__(self, name: object) -> bool:
        return name in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)

    @property
    def names(self) -> list[str]:
        """Registered artifact names, sorted."""
        return sorted(self._artifacts)

    def register(self, artifact: Artifact) -> Artifact:
        """Add an artifact and return it."""
        if artifact.name in self._artifacts:
            logger.debug("artifact_replaced", artifact=artifact.name)
        self._artifacts[artifact.name] = artifact
        return artifact

    def require(self, name: str) -> Artifact:
        """Look up an artifact by name.

        Raises:
            ArtifactNotFoundError: If no artifact is registered under name.
        """
        try:
            return self._artifacts[name]
        except KeyError:
            raise ArtifactNotFoundError(name, self.names) from None

    @classmethod
    def from_build_dir(cls, path: Path | str) -> ArtifactRegistry:
        """Load every ``*.json`` compiled artifact in a directory.

        Args:
            path: Build directory (e.g., ``build/contracts``).

        Returns:
            Registry holding one artifact per file.

        Raises:
            ArtifactLoadError: If the directory is missing or a file is malformed.
        """
        build_dir = Path(path)
        if not build_dir.is_dir():
            raise ArtifactLoadError("Build directory not found", file_path=str(build_dir))

        registry = cls()
        for file_path in sorted(build_dir.glob("*.json")):
            registry.register(load_artifact_file(file_path))

        logger.info("artifacts_loaded", path=str(build_dir), count=len(registry))
        return registry
