from evorbrain.core.migrations.runner import LEDGER_TABLE, MigrationRunner
from evorbrain.core.migrations.scripts import MigrationScript, load_scripts

__all__ = ["LEDGER_TABLE", "MigrationRunner", "MigrationScript", "load_scripts"]
