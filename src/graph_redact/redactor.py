"""
Redaction entry points for graph-redact.

Every string reached through a dataclass field is secret unless the field
says otherwise:

- ``redact`` rewrites a graph in place
- ``as_copy`` returns a redacted copy and leaves the original untouched

Private (``_``-prefixed) and opaque fields are never walked. ``as_copy``
copies them shallowly, so their contents stay shared between the original
and the copy; mutating one can be observed through the other.
"""

from __future__ import annotations

from typing import Any, TypeVar

from .config import NONSECRET, RedactionConfig, RedactionError
from .registry import TagRegistry, default_registry
from .walker import GraphWalker, Mode, is_addressable

T = TypeVar("T")


class UnaddressableRootError(RedactionError):
    """The value given to ``redact`` has no location that can be rewritten."""

    pass


class Redactor:
    """
    Redacts value graphs using a tag registry and configuration.

    Tracks how many strings each tag transformed across calls.
    """

    def __init__(
        self,
        registry: TagRegistry | None = None,
        config: RedactionConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.config = config or RedactionConfig()
        self.redaction_counts: dict[str, int] = {}

    def _walker(self, mode: Mode) -> GraphWalker:
        return GraphWalker(
            self.registry,
            mode,
            tag_key=self.config.tag_key,
            private_prefix=self.config.private_prefix,
        )

    def _collect(self, walker: GraphWalker) -> None:
        for label, count in walker.redaction_counts.items():
            self.redaction_counts[label] = self.redaction_counts.get(label, 0) + count

    def redact(self, value: Any, tag: str = NONSECRET) -> None:
        """
        Redact a value graph in place.

        Args:
            value: A list, deque, set, dict, Ref or non-frozen dataclass instance
            tag: Tag in effect at the root

        Raises:
            UnaddressableRootError: If ``value`` can't be rewritten in place.
                Raised before anything is modified.
        """
        if not is_addressable(value):
            raise UnaddressableRootError(
                f"Cannot redact {type(value).__name__} in place: "
                "pass a list, deque, set, dict, Ref or mutable dataclass instance"
            )

        walker = self._walker(Mode.MUTATE)
        walker.walk(value, tag)
        self._collect(walker)

    def as_copy(self, value: T, tag: str = NONSECRET) -> T:
        """
        Return a redacted copy of a value graph.

        The original is not modified. Public containers in the copy are new
        objects; private and opaque fields are shared shallow copies.
        """
        walker = self._walker(Mode.COPY)
        result = walker.walk(value, tag)
        self._collect(walker)
        return result

    def get_stats(self) -> dict[str, int]:
        """Get redaction statistics."""
        return dict(sorted(self.redaction_counts.items(), key=lambda x: (-x[1], x[0])))

    def reset_stats(self) -> None:
        """Reset redaction statistics."""
        self.redaction_counts.clear()


def create_redactor(
    config: RedactionConfig | None = None,
    registry: TagRegistry | None = None,
) -> Redactor:
    """
    Factory function to create a redactor instance.

    The placeholder and custom tags from ``config`` go into a private copy
    of the registry, so the shared one is left alone.
    """
    if config is not None:
        registry = (registry or default_registry).copy()
        registry.placeholder = config.placeholder
        for rule in config.custom_tags:
            registry.register(rule.name, rule.to_transform())

    return Redactor(registry=registry, config=config)


def redact(
    value: Any,
    *,
    tag: str = NONSECRET,
    registry: TagRegistry | None = None,
    config: RedactionConfig | None = None,
) -> None:
    """Redact a value graph in place. See ``Redactor.redact``."""
    create_redactor(config, registry).redact(value, tag)


def as_copy(
    value: T,
    *,
    tag: str = NONSECRET,
    registry: TagRegistry | None = None,
    config: RedactionConfig | None = None,
) -> T:
    """Return a redacted copy of a value graph. See ``Redactor.as_copy``."""
    return create_redactor(config, registry).as_copy(value, tag)
