"""
Value-graph walker for graph-redact.

One traversal, parameterized by mode (rewrite in place or build a copy) and
by the secrecy tag in effect. Every reachable string is passed through the
transform its nearest enclosing dataclass field selects; containers and
references hand the tag down unchanged.

Kind dispatch is centralized in ``kind_of`` so every structural shape is
handled in one place.
"""

from __future__ import annotations

import copy
import dataclasses
import datetime
import io
import queue
import socket
import threading
import types
import uuid
from collections import deque
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any

from .config import DEFAULT_PRIVATE_PREFIX, DEFAULT_TAG_KEY, NONSECRET, OPAQUE_KEY, SECRET
from .fields import Ref
from .registry import TagRegistry


class Kind(str, Enum):
    """Structural kind of a node in a value graph."""

    NIL = "nil"
    STRING = "string"
    ARRAY = "array"
    SEQUENCE = "sequence"
    SET = "set"
    MAP = "map"
    REFERENCE = "reference"
    STRUCT = "struct"
    OTHER = "other"


class Mode(str, Enum):
    """Walker operation mode."""

    MUTATE = "mutate"
    COPY = "copy"


# Immutable values that can be shared freely between graphs
ATOMIC_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    range,
    Decimal,
    Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    PurePath,
    type,
    Enum,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
)

# Resources that stay shared with the original in copies, like channels
HANDLE_TYPES: tuple[type, ...] = (
    io.IOBase,
    socket.socket,
    type(threading.Lock()),
    type(threading.RLock()),
    threading.Condition,
    threading.Event,
    threading.Semaphore,
    threading.Thread,
    queue.Queue,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
)


def kind_of(value: Any) -> Kind:
    """Classify a value. Enum members are OTHER even when they subclass str."""
    if value is None:
        return Kind.NIL
    if isinstance(value, Enum):
        return Kind.OTHER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, Ref):
        return Kind.REFERENCE
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if isinstance(value, tuple):
        return Kind.ARRAY
    if isinstance(value, (list, deque)):
        return Kind.SEQUENCE
    if isinstance(value, (set, frozenset)):
        return Kind.SET
    if isinstance(value, dict):
        return Kind.MAP
    return Kind.OTHER


def is_atomic(value: Any) -> bool:
    """Check if a value is immutable and holds no other nodes."""
    return isinstance(value, ATOMIC_TYPES)


def is_shared(value: Any) -> bool:
    """Check if copies hold the same object as the original instead of a copy."""
    return is_atomic(value) or isinstance(value, HANDLE_TYPES)


def is_frozen(value: Any) -> bool:
    """Check if a dataclass instance is frozen."""
    params = getattr(type(value), "__dataclass_params__", None)
    return bool(params and params.frozen)


def is_addressable(value: Any) -> bool:
    """
    Check if a value can be rewritten in place.

    Strings, tuples, frozensets and frozen dataclasses are values: the walker
    can only replace them in the slot that holds them, so they can't be a
    root for in-place redaction.
    """
    kind = kind_of(value)
    if kind is Kind.STRUCT:
        return not is_frozen(value)
    if kind is Kind.SET:
        return not isinstance(value, frozenset)
    return kind in (Kind.SEQUENCE, Kind.MAP, Kind.REFERENCE)


def is_exported(f: dataclasses.Field, private_prefix: str = DEFAULT_PRIVATE_PREFIX) -> bool:
    """Check if the walker may enter a dataclass field."""
    if private_prefix and f.name.startswith(private_prefix):
        return False
    return not f.metadata.get(OPAQUE_KEY, False)


def rebuild_tuple(original: tuple, items: list[Any]) -> tuple:
    """Build a tuple of the same type as ``original`` holding ``items``."""
    cls = type(original)
    if cls is tuple:
        return tuple(items)
    if hasattr(cls, "_make"):
        return cls._make(items)
    return cls(items)


class GraphWalker:
    """
    Walks a value graph once, in one mode.

    Create one per call. Shells for containers are memoized by
    ``(id(node), tag)`` before their children are visited, so cyclic graphs
    terminate and shared sub-objects stay shared in the copy.
    """

    def __init__(
        self,
        registry: TagRegistry,
        mode: Mode,
        tag_key: str = DEFAULT_TAG_KEY,
        private_prefix: str = DEFAULT_PRIVATE_PREFIX,
    ) -> None:
        self.registry = registry
        self.mode = mode
        self.tag_key = tag_key
        self.private_prefix = private_prefix
        self.redaction_counts: dict[str, int] = {}
        # (id, tag) -> (node, result); holding node keeps its id from being reused
        self._memo: dict[tuple[int, str], tuple[Any, Any]] = {}

    def walk(self, node: Any, tag: str) -> Any:
        """Return the transformed node (the same object for in-place rewrites)."""
        kind = kind_of(node)

        if kind is Kind.NIL:
            return node
        if kind is Kind.STRING:
            return self._walk_string(node, tag)
        if kind is Kind.ARRAY:
            return self._walk_array(node, tag)
        if kind is Kind.SET and isinstance(node, frozenset):
            return self._walk_frozenset(node, tag)
        if kind is Kind.OTHER and (self.mode is Mode.MUTATE or is_shared(node)):
            return node

        # Structs pick their own tags and other objects hold no strings
        key = (id(node), "" if kind in (Kind.STRUCT, Kind.OTHER) else tag)
        if key in self._memo:
            return self._memo[key][1]

        if kind is Kind.SEQUENCE:
            return self._walk_sequence(node, tag, key)
        if kind is Kind.SET:
            return self._walk_set(node, tag, key)
        if kind is Kind.MAP:
            return self._walk_map(node, tag, key)
        if kind is Kind.REFERENCE:
            return self._walk_reference(node, tag, key)
        if kind is Kind.STRUCT:
            return self._walk_struct(node, key)
        return self._walk_other(node, key)

    def _remember(self, key: tuple[int, str], node: Any, result: Any) -> None:
        self._memo[key] = (node, result)

    def _walk_string(self, node: str, tag: str) -> str:
        # Empty strings are transformed too
        if self.registry.is_exempt(tag):
            return node

        label = tag or SECRET
        self.redaction_counts[label] = self.redaction_counts.get(label, 0) + 1

        result = self.registry.resolve(tag)(str(node))
        if type(node) is not str:
            return type(node)(result)
        return result

    def _walk_other(self, node: Any, key: tuple[int, str]) -> Any:
        # Only reached in copy mode; attributes of the copy are shared
        out = copy.copy(node)
        self._remember(key, node, out)
        return out

    def _walk_array(self, node: tuple, tag: str) -> tuple:
        return rebuild_tuple(node, [self.walk(item, tag) for item in node])

    def _walk_frozenset(self, node: frozenset, tag: str) -> frozenset:
        return type(node)(self.walk(item, tag) for item in node)

    def _walk_sequence(self, node: list | deque, tag: str, key: tuple[int, str]) -> list | deque:
        out = copy.copy(node) if self.mode is Mode.COPY else node
        self._remember(key, node, out)

        for i, item in enumerate(list(node)):
            out[i] = self.walk(item, tag)
        return out

    def _walk_set(self, node: set, tag: str, key: tuple[int, str]) -> set:
        # Elements that redact to the same value collapse into one
        out = copy.copy(node) if self.mode is Mode.COPY else node
        self._remember(key, node, out)

        items = [self.walk(item, tag) for item in list(node)]
        out.clear()
        out.update(items)
        return out

    def _walk_map(self, node: dict, tag: str, key: tuple[int, str]) -> dict:
        out = copy.copy(node) if self.mode is Mode.COPY else node
        self._remember(key, node, out)

        # Keys are never transformed
        for k in list(node):
            out[k] = self.walk(node[k], tag)
        return out

    def _walk_reference(self, node: Ref, tag: str, key: tuple[int, str]) -> Ref:
        out = copy.copy(node) if self.mode is Mode.COPY else node
        self._remember(key, node, out)

        out.value = self.walk(node.value, tag)
        return out

    def _walk_struct(self, node: Any, key: tuple[int, str]) -> Any:
        # copy.copy carries private fields over as-is, sharing their contents
        in_place = self.mode is Mode.MUTATE and not is_frozen(node)
        out = node if in_place else copy.copy(node)
        self._remember(key, node, out)

        for f in dataclasses.fields(node):
            if not is_exported(f, self.private_prefix):
                continue
            if not hasattr(node, f.name):
                continue

            # Fields are the only place a new tag is picked up
            field_tag = f.metadata.get(self.tag_key, "")
            value = self.walk(getattr(node, f.name), field_tag)

            if in_place:
                setattr(out, f.name, value)
            else:
                object.__setattr__(out, f.name, value)
        return out


def walk(
    node: Any,
    registry: TagRegistry,
    mode: Mode,
    tag: str = NONSECRET,
    **options: Any,
) -> Any:
    """Walk a graph once with a fresh walker."""
    return GraphWalker(registry, mode, **options).walk(node, tag)
