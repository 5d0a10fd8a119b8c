"""Migration ledger: applies and rolls back versioned SQL scripts.

Applied versions are recorded in ``_migrations`` together with the SHA-256
checksum of the ``up`` body they were applied from. ``migrate`` runs the whole
pending batch inside one transaction; ``rollback`` runs one transaction per
step unless ``atomic=True`` is given.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from evorbrain.core.errors import MigrationError
from evorbrain.core.migrations.scripts import MigrationScript, load_scripts, split_statements
from evorbrain.core.utils.dates import utcnow

logger = logging.getLogger(__name__)

LEDGER_TABLE = "_migrations"

_CREATE_LEDGER = f"""
CREATE TABLE IF NOT EXISTS {LEDGER_TABLE} (
    version INTEGER PRIMARY KEY,
    description TEXT NOT NULL,
    applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    checksum TEXT NOT NULL
)
"""


class MigrationRunner:
    """Ledger operations bound to one engine and one list of known scripts."""

    def __init__(self, engine: Engine, scripts: Optional[Sequence[MigrationScript]] = None):
        self.engine = engine
        self.scripts: List[MigrationScript] = list(scripts) if scripts is not None else load_scripts()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except MigrationError:
            raise
        except SQLAlchemyError as exc:
            logger.error("Migration %s failed: %s", action, exc)
            raise MigrationError(f"Migration {action} failed: {exc}") from exc

    def initialize(self) -> None:
        """Create the ledger table if it does not exist."""
        with self._transaction("initialize") as conn:
            conn.exec_driver_sql(_CREATE_LEDGER)

    def is_applied(self, version: int) -> bool:
        self.initialize()
        with self._transaction("lookup") as conn:
            row = conn.execute(
                text(f"SELECT 1 FROM {LEDGER_TABLE} WHERE version = :version"),
                {"version": version},
            ).first()
        return row is not None

    def applied_versions(self) -> List[int]:
        self.initialize()
        with self._transaction("lookup") as conn:
            rows = conn.execute(text(f"SELECT version FROM {LEDGER_TABLE} ORDER BY version")).all()
        return [row[0] for row in rows]

    def latest_version(self) -> Optional[int]:
        self.initialize()
        with self._transaction("lookup") as conn:
            return conn.execute(text(f"SELECT MAX(version) FROM {LEDGER_TABLE}")).scalar()

    def applied_records(self) -> Dict[int, dict]:
        self.initialize()
        with self._transaction("lookup") as conn:
            rows = conn.execute(
                text(f"SELECT version, description, applied_at, checksum FROM {LEDGER_TABLE} ORDER BY version")
            ).mappings().all()
        return {row["version"]: dict(row) for row in rows}

    def verify_checksums(self, scripts: Optional[Sequence[MigrationScript]] = None) -> List[int]:
        """Versions whose recorded checksum no longer matches the script body."""
        scripts = self.scripts if scripts is None else scripts
        records = self.applied_records()
        drifted = []
        for script in scripts:
            record = records.get(script.version)
            if record is not None and record["checksum"] != script.checksum:
                logger.warning(
                    "Checksum mismatch for migration %s (%s): applied script has changed",
                    script.version,
                    script.description,
                )
                drifted.append(script.version)
        return drifted

    @staticmethod
    def _check_order(scripts: Sequence[MigrationScript]) -> None:
        previous = None
        for script in scripts:
            if previous is not None and script.version <= previous:
                raise MigrationError(
                    f"Migrations must be in strictly ascending order: {script.version} follows {previous}"
                )
            previous = script.version

    def migrate(self, scripts: Optional[Sequence[MigrationScript]] = None) -> List[int]:
        """Apply every pending script in one transaction; returns applied versions."""
        scripts = list(self.scripts if scripts is None else scripts)
        self._check_order(scripts)
        self.initialize()
        self.verify_checksums(scripts)

        applied: List[int] = []
        with self._transaction("batch") as conn:
            done = {
                row[0] for row in conn.execute(text(f"SELECT version FROM {LEDGER_TABLE}")).all()
            }
            for script in scripts:
                if script.version in done:
                    continue
                logger.info("Applying migration %s: %s", script.version, script.description)
                for statement in split_statements(script.up):
                    conn.exec_driver_sql(statement)
                conn.execute(
                    text(
                        f"INSERT INTO {LEDGER_TABLE} (version, description, applied_at, checksum) "
                        "VALUES (:version, :description, :applied_at, :checksum)"
                    ),
                    {
                        "version": script.version,
                        "description": script.description,
                        "applied_at": utcnow().isoformat(sep=" "),
                        "checksum": script.checksum,
                    },
                )
                applied.append(script.version)
        if applied:
            logger.info("Applied %d migration(s): %s", len(applied), applied)
        else:
            logger.debug("Database schema is up to date")
        return applied

    def _rollback_step(self, conn: Connection, script: MigrationScript) -> None:
        logger.info("Rolling back migration %s: %s", script.version, script.description)
        for statement in split_statements(script.down):
            conn.exec_driver_sql(statement)
        conn.execute(
            text(f"DELETE FROM {LEDGER_TABLE} WHERE version = :version"),
            {"version": script.version},
        )

    def rollback(self, target_version: Optional[int] = None, *, atomic: bool = False) -> List[int]:
        """Roll back every applied version above ``target_version`` (default 0).

        Versions are undone in descending order. Each step commits on its own
        unless ``atomic`` is set, so a failure part-way leaves earlier steps
        rolled back.
        """
        target = target_version or 0
        known = {script.version: script for script in self.scripts}
        to_undo = [v for v in sorted(self.applied_versions(), reverse=True) if v > target]
        missing = [v for v in to_undo if v not in known]
        if missing:
            raise MigrationError(f"No script found for applied migration(s): {missing}")

        rolled_back: List[int] = []
        if atomic:
            with self._transaction("rollback") as conn:
                for version in to_undo:
                    self._rollback_step(conn, known[version])
                    rolled_back.append(version)
        else:
            for version in to_undo:
                with self._transaction(f"rollback of {version}") as conn:
                    self._rollback_step(conn, known[version])
                rolled_back.append(version)
        if rolled_back:
            logger.info("Rolled back %d migration(s): %s", len(rolled_back), rolled_back)
        return rolled_back

    def drop_ledger(self) -> None:
        with self._transaction("drop ledger") as conn:
            conn.exec_driver_sql(f"DROP TABLE IF EXISTS {LEDGER_TABLE}")

    def status(self) -> dict:
        records = self.applied_records()
        drifted = set(self.verify_checksums())
        migrations = []
        for script in self.scripts:
            record = records.get(script.version)
            migrations.append(
                {
                    "version": script.version,
                    "description": script.description,
                    "applied": record is not None,
                    "applied_at": str(record["applied_at"]) if record else None,
                    "checksum_mismatch": script.version in drifted,
                }
            )
        return {
            "current_version": max(records) if records else None,
            "latest_available": self.scripts[-1].version if self.scripts else None,
            "pending": [m["version"] for m in migrations if not m["applied"]],
            "drifted": sorted(drifted),
            "migrations": migrations,
        }
