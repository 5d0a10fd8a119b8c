"""Versioned SQL scripts shipped with the package."""

from __future__ import annotations

import hashlib
import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from evorbrain.core.errors import MigrationError

SQL_DIR = Path(__file__).resolve().parent / "sql"

_FILENAME = re.compile(r"^(?P<version>\d{3,})_(?P<slug>[A-Za-z0-9_]+)\.(?P<direction>up|down)\.sql$")


@dataclass(frozen=True)
class MigrationScript:
    version: int
    description: str
    up: str
    down: str

    @property
    def checksum(self) -> str:
        return checksum(self.up)


def checksum(body: str) -> str:
    """SHA-256 hex digest of a script body."""
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def _description(slug: str, up: str) -> str:
    first_line = up.lstrip().splitlines()[0] if up.strip() else ""
    if first_line.startswith("-- "):
        return first_line[3:].strip()
    return slug.replace("_", " ")


def load_scripts(directory: Optional[Path] = None) -> List[MigrationScript]:
    """Load every ``NNN_slug.up.sql``/``.down.sql`` pair, sorted by version."""
    directory = Path(directory) if directory is not None else SQL_DIR
    found: Dict[int, Dict[str, Tuple[str, Path]]] = {}
    for path in sorted(directory.glob("*.sql")):
        match = _FILENAME.match(path.name)
        if not match:
            raise MigrationError(f"Unrecognised migration file name: {path.name}")
        version = int(match.group("version"))
        slot = found.setdefault(version, {})
        direction = match.group("direction")
        if direction in slot:
            raise MigrationError(f"Duplicate {direction} script for version {version}")
        slot[direction] = (match.group("slug"), path)

    scripts: List[MigrationScript] = []
    for version in sorted(found):
        slot = found[version]
        if "up" not in slot:
            raise MigrationError(f"Migration {version} has no up script")
        if "down" not in slot:
            raise MigrationError(f"Migration {version} has no down script")
        slug, up_path = slot["up"]
        up = up_path.read_text(encoding="utf-8")
        down = slot["down"][1].read_text(encoding="utf-8")
        scripts.append(
            MigrationScript(version=version, description=_description(slug, up), up=up, down=down)
        )
    return scripts


def split_statements(script: str) -> Iterable[str]:
    """Yield complete SQL statements, skipping comment-only chunks."""
    buffer = ""
    for line in script.splitlines(keepends=True):
        buffer += line
        if sqlite3.complete_statement(buffer):
            statement = buffer.strip()
            buffer = ""
            if _has_sql(statement):
                yield statement
    if _has_sql(buffer):
        yield buffer.strip()


def _has_sql(chunk: str) -> bool:
    for line in chunk.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("--"):
            return True
    return False
