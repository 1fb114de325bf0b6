"""Base class for target environments.

A target environment is where artifacts are deployed and called: a local
test network, a remote node, or an in-memory double. The sequencer only
sees this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tessera_core.schemas.artifact import Artifact


class TargetEnvironment(ABC):
    """Capability to deploy artifacts and call deployed instances.

    Both operations block until the environment has confirmed or rejected
    the action. Failure is signalled by raising; the sequencer wraps whatever
    is raised without altering it.

    Attributes:
        name: Environment name for logs and reports.

    Example:
        >>> class NodeEnvironment(TargetEnvironment):
        ...     def deploy(self, artifact: Artifact) -> str:
        ...         return client.deploy(artifact.bytecode, artifact.constructor_args)
        ...     def invoke(self, address: str, method: str, args: list[Any]) -> Any:
        ...         return client.transact(address, method, args)
    """

    name: str = "environment"

    @abstractmethod
    def deploy(self, artifact: Artifact) -> str:
        """Deploy an artifact whose constructor arguments are fully resolved.

        Args:
            artifact: Artifact to deploy.

        Returns:
            The address of the new instance, a non-empty string in whatever
            format the environment uses.
        """

    @abstractmethod
    def invoke(self, address: str, method: str, args: list[Any]) -> Any:
        """Call a method on a deployed instance.

        Args:
            address: Address of the instance.
            method: Method name.
            args: Fully resolved arguments.

        Returns:
            Environment-specific receipt; the sequencer ignores it.
        """
