"""Tag-driven redaction of secret strings in nested Python data."""

from .aliases import AliasConflict, find_aliases, validate_no_exported_aliases
from .config import NONSECRET, REDACTED, SECRET, ConfigError, RedactionConfig, RedactionError, TagRule
from .fields import Ref, nonsecret, opaque, tagged
from .redactor import Redactor, UnaddressableRootError, as_copy, create_redactor, redact
from .registry import TagRegistry, add_redactor, default_registry

__version__ = "0.1.0"

__all__ = [
    "NONSECRET",
    "REDACTED",
    "SECRET",
    "AliasConflict",
    "ConfigError",
    "RedactionConfig",
    "RedactionError",
    "Redactor",
    "Ref",
    "TagRegistry",
    "TagRule",
    "UnaddressableRootError",
    "add_redactor",
    "as_copy",
    "create_redactor",
    "default_registry",
    "find_aliases",
    "nonsecret",
    "opaque",
    "redact",
    "tagged",
    "validate_no_exported_aliases",
]
