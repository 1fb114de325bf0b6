"""In-memory target environment.

Behaves like a local development network: deployments get deterministic
addresses, calls are checked against deployed code, and every side effect
is recorded for inspection.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import structlog

from tessera_core.environment.base import TargetEnvironment
from tessera_core.errors import EnvironmentRejectedError
from tessera_core.schemas.artifact import Artifact

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RecordedDeployment:
    """A deployment accepted by the in-memory environment."""

    address: str
    artifact: Artifact


@dataclass(frozen=True)
class RecordedCall:
    """A method call accepted by the in-memory environment."""

    address: str
    method: str
    args: list[Any] = field(default_factory=list)


class InMemoryEnvironment(TargetEnvironment):
    """Target environment that keeps all state in process.

    Addresses are the first 20 bytes of a SHA-256 over the environment name,
    a deployment nonce and the artifact name, so the same sequence always
    lands on the same addresses.

    Attributes:
        name: Environment name (part of the address derivation).
        fail_deploy: Artifact names whose deployment is rejected.
        fail_invoke: Method names whose calls are rejected.
        deployments: Accepted deployments, in order.
        calls: Accepted calls, in order.

    Example:
        >>> env = InMemoryEnvironment()
        >>> address = env.deploy(Artifact(name="SampleToken"))
        >>> env.code_at(address).name
        'SampleToken'
    """

    def __init__(
        self,
        name: str = "memory",
        *,
        fail_deploy: Iterable[str] = (),
        fail_invoke: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.fail_deploy = frozenset(fail_deploy)
        self.fail_invoke = frozenset(fail_invoke)
        self.deployments: list[RecordedDeployment] = []
        self.calls: list[RecordedCall] = []
        self._code: dict[str, Artifact] = {}
        self._nonce = 0
        self._log = logger.bind(component="memory_environment", environment=name)

    @property
    def side_effect_count(self) -> int:
        """Number of accepted deployments and calls."""
        return len(self.deployments) + len(self.calls)

    def code_at(self, address: str) -> Artifact | None:
        """Return the artifact deployed at address, if any."""
        return self._code.get(address.lower())

    def deploy(self, artifact: Artifact) -> str:
        if artifact.name in self.fail_deploy:
            raise EnvironmentRejectedError(f"Deployment of '{artifact.name}' was rejected")

        address = self._next_address(artifact)
        self._code[address.lower()] = artifact
        self.deployments.append(RecordedDeployment(address=address, artifact=artifact))
        self._log.debug("artifact_deployed", artifact=artifact.name, address=address)
        return address

    def invoke(self, address: str, method: str, args: list[Any]) -> None:
        artifact = self.code_at(address)
        if artifact is None:
            raise EnvironmentRejectedError(f"No code deployed at {address}")
        if method in self.fail_invoke:
            raise EnvironmentRejectedError(f"Call to '{method}' at {address} was reverted")
        if artifact.methods and method not in artifact.methods:
            raise EnvironmentRejectedError(
                f"'{artifact.name}' has no method '{method}'",
            )

        self.calls.append(RecordedCall(address=address, method=method, args=list(args)))
        self._log.debug("method_invoked", address=address, method=method)

    def _next_address(self, artifact: Artifact) -> str:
        seed = f"{self.name}:{self._nonce}:{artifact.name}".encode()
        self._nonce += 1
        return "0x" + hashlib.sha256(seed).hexdigest()[:40]
