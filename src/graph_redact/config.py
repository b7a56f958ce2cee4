"""
Configuration models and defaults for graph-redact.

Covers the placeholder text, how secrecy tags are read from dataclass fields,
which fields count as private, and custom tag rules loaded from config files.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# Substituted for every string reached through a default-tagged field
REDACTED = "[REDACTED]"

# Built-in tag names
SECRET = "secret"
NONSECRET = "nonsecret"

# Dataclass field metadata keys
DEFAULT_TAG_KEY = "redact"
OPAQUE_KEY = "redact_opaque"

# Fields whose names start with this are treated as private (never walked)
DEFAULT_PRIVATE_PREFIX = "_"


class RedactionError(Exception):
    """Base error for graph-redact."""

    pass


class ConfigError(RedactionError):
    """Error while building redaction configuration."""

    pass


@dataclass
class TagRule:
    """A named string transform declared in configuration."""

    name: str
    # When set, only matches are replaced; otherwise the whole string is
    pattern: re.Pattern[str] | None = None
    replacement: str = REDACTED

    def to_transform(self) -> Callable[[str], str]:
        """Build the string transform for this rule."""
        if self.pattern is None:
            replacement = self.replacement
            return lambda s: replacement

        pattern = self.pattern
        replacement = self.replacement
        return lambda s: pattern.sub(replacement, s)


@dataclass
class RedactionConfig:
    """
    Configuration for graph redaction.

    Loaded from a config file or set programmatically.
    """

    placeholder: str = REDACTED

    # Metadata key holding a field's secrecy tag
    tag_key: str = DEFAULT_TAG_KEY

    private_prefix: str = DEFAULT_PRIVATE_PREFIX

    # Extra tags registered on top of the built-in ones
    custom_tags: list[TagRule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RedactionConfig:
        """Create RedactionConfig from a dictionary (e.g., from config file)."""
        config = cls()

        if "placeholder" in data:
            config.placeholder = str(data["placeholder"])
        if "tag_key" in data:
            config.tag_key = str(data["tag_key"])
        if "private_prefix" in data:
            config.private_prefix = str(data["private_prefix"])

        tags = data.get("custom_tags") or data.get("tags") or []
        if isinstance(tags, dict):
            # TOML tables: [graph-redact.tags.lower] pattern = ...
            for name, body in tags.items():
                if body is not None and not isinstance(body, dict):
                    raise ConfigError(f"Custom tag {name!r} must be a table, got {body!r}")
            tags = [{"name": name, **(body or {})} for name, body in tags.items()]
        elif not isinstance(tags, list):
            raise ConfigError(f"Custom tags must be a list or a table, got {tags!r}")

        for rule_data in tags:
            if not isinstance(rule_data, dict):
                raise ConfigError(f"Custom tag must be a table, got {rule_data!r}")

            name = rule_data.get("name")
            if not name:
                raise ConfigError(f"Custom tag is missing a name: {rule_data!r}")

            pattern = None
            if rule_data.get("pattern"):
                try:
                    pattern = re.compile(rule_data["pattern"])
                except re.error as e:
                    raise ConfigError(f"Invalid pattern for tag {name!r}: {e}") from e

            config.custom_tags.append(TagRule(
                name=str(name),
                pattern=pattern,
                replacement=str(rule_data.get("replacement", config.placeholder)),
            ))

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display (sorted keys for determinism)."""
        return {
            "custom_tags": [
                {
                    "name": rule.name,
                    "pattern": rule.pattern.pattern if rule.pattern else None,
                    "replacement": rule.replacement,
                }
                for rule in self.custom_tags
            ],
            "placeholder": self.placeholder,
            "private_prefix": self.private_prefix,
            "tag_key": self.tag_key,
        }
