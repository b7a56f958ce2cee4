"""
Annotation helpers for caller-defined data types.

Secrecy tags live in dataclass field metadata::

    @dataclass
    class Credentials:
        password: str                                 # redacted
        username: str = nonsecret(default="")         # kept
        email: str = tagged("mask_email", default="") # custom transform
        _cache: dict = opaque(default_factory=dict)   # never walked
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, TypeVar

from .config import DEFAULT_TAG_KEY, NONSECRET, OPAQUE_KEY

T = TypeVar("T")


def tagged(tag: str, *, tag_key: str = DEFAULT_TAG_KEY, **kwargs: Any) -> Any:
    """``dataclasses.field`` carrying a secrecy tag."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_key] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


def nonsecret(**kwargs: Any) -> Any:
    """Field whose strings are never redacted, at any depth."""
    return tagged(NONSECRET, **kwargs)


def opaque(**kwargs: Any) -> Any:
    """Field the walker never enters: shallow-copied by as_copy, untouched by redact."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[OPAQUE_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


class Ref(Generic[T]):
    """
    Mutable single-value cell.

    Gives a value a writable location, so ``redact(Ref("token"))`` can
    rewrite a bare string, and lets graphs express explicit references.
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"
