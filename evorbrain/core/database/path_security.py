"""Containment checks for files the backend opens inside its data directory."""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Union

from evorbrain.core.errors import SecurityError

_WINDOWS_RESERVED = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)
_WINDOWS_INVALID_CHARS = '<>:"|?*'

PathLike = Union[str, "os.PathLike[str]"]


def validate_path(base_dir: PathLike, requested: PathLike) -> Path:
    """Resolve ``requested`` against ``base_dir`` and refuse anything outside it.

    Absolute paths are rejected outright. The result is canonical: symlinks and
    ``..`` segments are resolved. A file that does not exist yet is resolved
    through its parent directory, which must exist.
    """
    try:
        canonical_base = Path(base_dir).resolve(strict=True)
    except OSError as exc:
        raise SecurityError(f"Failed to resolve base directory: {exc}") from exc

    requested_path = PurePath(requested)
    if requested_path.is_absolute() or requested_path.drive or requested_path.root:
        raise SecurityError("Absolute paths are not allowed")

    candidate = canonical_base / requested_path
    # Lexical check first so escapes through missing directories report as traversal.
    _ensure_within(Path(os.path.normpath(candidate)), canonical_base)
    try:
        canonical = candidate.resolve(strict=True)
    except OSError:
        if not candidate.name or candidate.name in (".", ".."):
            raise SecurityError("Invalid file name")
        try:
            canonical = candidate.parent.resolve(strict=True) / candidate.name
        except OSError as exc:
            raise SecurityError(f"Failed to resolve path: {exc}") from exc

    _ensure_within(canonical, canonical_base)
    return canonical


def _ensure_within(path: Path, base: Path) -> None:
    if path != base and base not in path.parents:
        raise SecurityError(
            "Path traversal attempt detected: requested path is outside the allowed directory"
        )


def validate_filename(filename: str, *, windows: bool | None = None) -> str:
    """Accept a bare file name with no directory parts or special entries."""
    if not filename:
        raise SecurityError("Filename cannot be empty")
    if "/" in filename or "\\" in filename:
        raise SecurityError("Filename cannot contain directory separators")
    if filename in (".", ".."):
        raise SecurityError("Invalid filename: cannot use . or ..")
    if "\0" in filename:
        raise SecurityError("Filename cannot contain null bytes")

    if windows is None:
        windows = os.name == "nt"
    if windows:
        stem = filename.upper().split(".", 1)[0]
        if stem in _WINDOWS_RESERVED:
            raise SecurityError(f"Invalid filename: {filename} is a reserved name on Windows")
        for ch in _WINDOWS_INVALID_CHARS:
            if ch in filename:
                raise SecurityError(f"Invalid filename: cannot contain '{ch}'")
    return filename


__all__ = ["validate_path", "validate_filename"]
