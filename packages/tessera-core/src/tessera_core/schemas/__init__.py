"""Data model for deployment sequences.

- Artifact: deployable unit plus constructor arguments
- Reference: placeholder for an earlier step's deployed address
- DeployStep / InvokeStep: the two kinds of sequence step
- Sequence: ordered list of steps
- DeployedInstance: result of a successful deployment
"""

from __future__ import annotations

from tessera_core.schemas.address import Address, is_address, is_hex_literal, to_address
from tessera_core.schemas.artifact import Artifact
from tessera_core.schemas.deployment import DeployedInstance
from tessera_core.schemas.reference import (
    REF_KEY,
    Reference,
    coerce_references,
    iter_literals,
    iter_references,
)
from tessera_core.schemas.sequence import Sequence
from tessera_core.schemas.step import DeployStep, InvokeStep, Step

__all__ = [
    "REF_KEY",
    "Address",
    "Artifact",
    "DeployStep",
    "DeployedInstance",
    "InvokeStep",
    "Reference",
    "Sequence",
    "Step",
    "coerce_references",
    "is_address",
    "is_hex_literal",
    "iter_literals",
    "iter_references",
    "to_address",
]
