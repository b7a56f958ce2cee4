"""
Alias validation for graph-redact.

Finds mutable objects reachable from two value graphs at once. A redacted
copy must share no such object with its original through public fields,
otherwise mutating one could silently change the other.

Private and opaque dataclass fields are skipped: ``as_copy`` only copies
them shallowly, so they are expected to alias.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_PRIVATE_PREFIX
from .walker import Kind, is_exported, is_frozen, is_shared, kind_of


@dataclass
class AliasConflict:
    """One object reachable from both graphs."""

    address: int
    a_paths: list[str] = field(default_factory=list)
    b_paths: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{', '.join(self.a_paths)} and {', '.join(self.b_paths)} are aliases"


def _save_address(index: dict[int, list[str]], path: str, value: Any) -> bool:
    """Record a path for a mutable value. Returns False if it was seen before."""
    address = id(value)
    seen = address in index
    index.setdefault(address, []).append(path)
    return not seen


def _record(
    index: dict[int, list[str]],
    path: str,
    value: Any,
    private_prefix: str,
    root: bool = False,
) -> None:
    kind = kind_of(value)

    if kind is Kind.NIL or is_shared(value):
        return

    if kind is Kind.SET and isinstance(value, frozenset):
        for item in value:
            _record(index, f"{path}{{{item!r}}}", item, private_prefix)
        return

    if kind is Kind.ARRAY:
        for i, item in enumerate(value):
            _record(index, f"{path}[{i}]", item, private_prefix)
        return

    if kind is Kind.STRUCT:
        # Frozen instances can't be mutated through a field, only their contents can
        if not root and not is_frozen(value) and not _save_address(index, path, value):
            return
        for f in dataclasses.fields(value):
            if is_exported(f, private_prefix) and hasattr(value, f.name):
                _record(index, f"{path}.{f.name}", getattr(value, f.name), private_prefix)
        return

    # Containers are recorded even when empty
    if not root and not _save_address(index, path, value):
        return

    if kind is Kind.SEQUENCE:
        for i, item in enumerate(value):
            _record(index, f"{path}[{i}]", item, private_prefix)

    elif kind is Kind.MAP:
        for key, item in value.items():
            _record(index, f"{path}[{key!r};key]", key, private_prefix)
            _record(index, f"{path}[{key!r}]", item, private_prefix)

    elif kind is Kind.SET:
        for item in value:
            _record(index, f"{path}{{{item!r}}}", item, private_prefix)

    elif kind is Kind.REFERENCE:
        _record(index, path, value.value, private_prefix)


def exported_addresses(
    path: str,
    value: Any,
    private_prefix: str = DEFAULT_PRIVATE_PREFIX,
) -> dict[int, list[str]]:
    """
    Map the address of every mutable object reachable through public fields
    of ``value`` to the paths that reach it.

    The root itself is not recorded; traversal starts one level below it.
    """
    index: dict[int, list[str]] = {}
    _record(index, path, value, private_prefix, root=True)
    return index


def find_aliases(
    a: Any,
    b: Any,
    private_prefix: str = DEFAULT_PRIVATE_PREFIX,
) -> list[AliasConflict]:
    """Report every mutable object reachable from both ``a`` and ``b``."""
    a_index = exported_addresses("a", a, private_prefix)
    b_index = exported_addresses("b", b, private_prefix)

    conflicts = []
    for address, a_paths in a_index.items():
        b_paths = b_index.get(address)
        if b_paths:
            conflicts.append(AliasConflict(address, a_paths, b_paths))

    return sorted(conflicts, key=lambda c: c.a_paths)


def validate_no_exported_aliases(
    a: Any,
    b: Any,
    private_prefix: str = DEFAULT_PRIVATE_PREFIX,
) -> list[str]:
    """Describe each alias between ``a`` and ``b``; empty when there are none."""
    return [str(conflict) for conflict in find_aliases(a, b, private_prefix)]
