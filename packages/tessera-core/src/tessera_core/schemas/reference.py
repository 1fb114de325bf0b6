"""Reference placeholders for deployment addresses.

A Reference stands in for the address of the instance deployed by an
earlier step. In plain data it is written as ``{"$ref": <step index>}``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

REF_KEY = "$ref"
"""Key marking a reference in plain dict data."""


class Reference(BaseModel):
    """Placeholder resolved to the address deployed by step ``step``.

    Attributes:
        step: Index of the deploy step whose address is referenced.

    Example:
        >>> Reference(step=0)
        Reference(step=0)
        >>> Reference.model_validate({"$ref": 2}).step
        2
        >>> Reference(step=1).model_dump()
        {'$ref': 1}
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    step: int = Field(..., ge=0, description="Index of the referenced deploy step")

    @model_validator(mode="before")
    @classmethod
    def accept_ref_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and REF_KEY in data:
            if len(data) != 1:
                raise ValueError(f"'{REF_KEY}' must be the only key of a reference")
            return {"step": data[REF_KEY]}
        return data

    @model_serializer
    def serialize_ref(self) -> dict[str, int]:
        return {REF_KEY: self.step}


def coerce_references(value: Any) -> Any:
    """Turn ``{"$ref": n}`` dicts into References at any nesting depth.

    Any dict holding the ``$ref`` key is parsed as a Reference, so a
    placeholder with extra keys fails validation instead of passing as data.
    Tuples become lists; everything else is returned unchanged.
    """
    if isinstance(value, Reference):
        return value
    if isinstance(value, dict) and REF_KEY in value:
        return Reference.model_validate(value)
    if isinstance(value, dict):
        return {key: coerce_references(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [coerce_references(item) for item in value]
    return value


def iter_references(value: Any) -> Iterator[Reference]:
    """Yield every Reference nested in value, depth first, in order."""
    if isinstance(value, Reference):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_references(item)


def iter_literals(value: Any) -> Iterator[Any]:
    """Yield every non-container, non-reference value nested in value."""
    if isinstance(value, Reference):
        return
    if isinstance(value, dict):
        for item in value.values():
            yield from iter_literals(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_literals(item)
    else:
        yield value
