"""Reference resolution against deployed instances."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tessera_core.errors import UnresolvedReferenceError
from tessera_core.schemas.deployment import DeployedInstance
from tessera_core.schemas.reference import Reference


def resolve_reference(ref: Reference, instances: Mapping[int, DeployedInstance]) -> str:
    """Return the address deployed by the referenced step.

    Args:
        ref: Reference to resolve.
        instances: Deployed instances keyed by step index.

    Raises:
        UnresolvedReferenceError: If the referenced step has no instance.
    """
    instance = instances.get(ref.step)
    if instance is None:
        raise UnresolvedReferenceError(f"No deployed instance for step {ref.step}")
    return instance.address


def resolve_arguments(value: Any, instances: Mapping[int, DeployedInstance]) -> Any:
    """Replace every Reference nested in value with its deployed address.

    Lists and dicts are rebuilt; tuples come back as lists. Other values
    are returned as-is.

    Example:
        >>> resolve_arguments([Reference(step=0), [1, 2, 3]], {0: token})
        ['0x…', [1, 2, 3]]
    """
    if isinstance(value, Reference):
        return resolve_reference(value, instances)
    if isinstance(value, dict):
        return {key: resolve_arguments(item, instances) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [resolve_arguments(item, instances) for item in value]
    return value
