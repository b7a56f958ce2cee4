"""
Utility functions for graph-redact.

Includes encoding detection, safe file reading, and JSON/YAML document
loading for the command-line front end.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import chardet
import yaml

YAML_SUFFIXES = {".yml", ".yaml"}


def detect_encoding(file_path: Path, sample_size: int = 8192) -> str:
    """
    Detect the encoding of a file.

    Strategy:
    1. Check for BOM markers first
    2. Try UTF-8
    3. Fall back to chardet only if UTF-8 fails

    Args:
        file_path: Path to the file
        sample_size: Number of bytes to sample for detection

    Returns:
        Detected encoding name (e.g., 'utf-8', 'latin-1')
    """
    with open(file_path, "rb") as f:
        sample = f.read(sample_size)

    if not sample:
        return "utf-8"

    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe"):
        return "utf-16-le"
    if sample.startswith(b"\xfe\xff"):
        return "utf-16-be"

    try:
        sample.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    encoding = chardet.detect(sample).get("encoding")
    if encoding is None:
        return "utf-8"

    encoding = encoding.lower()
    if encoding in ("ascii", "utf-8", "utf8"):
        return "utf-8"
    return encoding


def read_file_safe(file_path: Path, encoding: str | None = None) -> tuple[str, str]:
    """
    Read a text file, detecting its encoding when not given.

    Returns:
        Tuple of (content, encoding_used)
    """
    if encoding is None:
        encoding = detect_encoding(file_path)

    with open(file_path, encoding=encoding, errors="replace") as f:
        return f.read(), encoding


def is_yaml_path(path: Path) -> bool:
    """Check if a path names a YAML document."""
    return path.suffix.lower() in YAML_SUFFIXES


def load_document(path: Path) -> Any:
    """
    Load a JSON or YAML document.

    The format is chosen by file suffix; anything that is not YAML is
    parsed as JSON.

    Raises:
        ValueError: If the document can't be parsed
    """
    content, _ = read_file_safe(path)
    if is_yaml_path(path):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path.name}: {e}") from e
    return json.loads(content)


def dump_document(data: Any, yaml_format: bool = False) -> str:
    """Serialize a document as YAML or pretty-printed JSON."""
    if yaml_format:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    # Dates and other YAML scalars JSON has no type for are written as strings
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"
