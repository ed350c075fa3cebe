"""
Utility functions for file system operations and filename sanitization.

This module provides helper functions for:
- Sanitizing uploaded filenames for safe filesystem usage
- Ensuring directory creation
- Generating record and upload identifiers
"""

from __future__ import annotations

import re
from pathlib import Path
from uuid import uuid4

# Pattern to match characters that are not safe for filesystem paths
# Allows: alphanumeric characters, dots, underscores, and hyphens
SANITIZE_PATTERN = re.compile(r"[^a-zA-Z0-9._-]+")


def sanitize_filename(filename: str, fallback: str = "document.pdf") -> str:
    """
    Generate a filesystem-safe filename from an uploaded file's original name.

    Directory components are dropped so the name can never escape the upload
    directory. The extension is preserved.

    Args:
        filename: The original filename supplied by the client
        fallback: Value to return if sanitization results in an empty name

    Returns:
        A filesystem-safe filename or the fallback value

    Example:
        >>> sanitize_filename("My Manual (v2).pdf")
        "My-Manual-v2.pdf"
        >>> sanitize_filename("../../etc/passwd")
        "passwd"
    """
    name = Path(filename.replace("\\", "/")).name
    stem, suffix = split_extension(name)
    safe_stem = SANITIZE_PATTERN.sub("-", stem.strip()).strip("-_.")
    safe_suffix = SANITIZE_PATTERN.sub("", suffix)
    if not safe_stem:
        return fallback
    return f"{safe_stem}{safe_suffix}"


def ensure_directory(path: Path) -> Path:
    """
    Create a directory if it doesn't exist, including parent directories.

    Args:
        path: The directory path to create

    Returns:
        The same path object for chaining

    Raises:
        OSError: If directory creation fails due to permissions or other I/O errors
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def split_extension(filename: str) -> tuple[str, str]:
    """
    Split a filename into stem and extension components.

    Example:
        >>> split_extension("document.pdf")
        ("document", ".pdf")
    """
    path = Path(filename)
    return path.stem, path.suffix


def new_identifier() -> str:
    return uuid4().hex
