"""
Tag registry for graph-redact.

Maps secrecy tag names to string transforms. Two entries always exist:
the default secret transform (replace with the placeholder) and the
no-op ``nonsecret`` transform.

The registry is plain process-wide state with no locking. Register custom
tags at start-up, before redaction runs concurrently.
"""

from __future__ import annotations

from collections.abc import Callable

from .config import NONSECRET, REDACTED, SECRET

Transform = Callable[[str], str]


def _identity(s: str) -> str:
    return s


class TagRegistry:
    """Lookup table from tag name to string transform."""

    def __init__(self, placeholder: str = REDACTED) -> None:
        self.placeholder = placeholder
        self._transforms: dict[str, Transform] = {
            "": self._secret,
            SECRET: self._secret,
            NONSECRET: _identity,
        }

    def _secret(self, s: str) -> str:
        return self.placeholder

    def register(self, name: str, transform: Transform) -> None:
        """Add or overwrite the transform for a tag name."""
        if not isinstance(name, str):
            raise TypeError(f"Tag name must be a string, got {type(name).__name__}")
        if not callable(transform):
            raise TypeError(f"Transform for tag {name!r} is not callable")
        self._transforms[name] = transform

    def resolve(self, name: str | None) -> Transform:
        """
        Get the transform for a tag name.

        Empty and unknown names resolve to the secret transform, so a typo
        in a tag never leaks a value.
        """
        return self._transforms.get(name or "", self._secret)

    def is_exempt(self, name: str | None) -> bool:
        """Check if strings under this tag pass through untouched."""
        return self.resolve(name) is _identity

    def names(self) -> list[str]:
        """Registered tag names, built-ins included (sorted)."""
        return sorted(name for name in self._transforms if name)

    def copy(self) -> TagRegistry:
        """Independent registry with the same entries."""
        clone = TagRegistry(self.placeholder)
        for name, transform in self._transforms.items():
            if transform != self._secret:
                clone._transforms[name] = transform
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._transforms


# Process-wide registry used when callers don't pass their own
default_registry = TagRegistry()


def add_redactor(name: str, transform: Transform) -> None:
    """Register a custom tag transform in the default registry."""
    default_registry.register(name, transform)
