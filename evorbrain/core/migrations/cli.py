"""CLI commands for the migration ledger.

Usage:
    flask db-status
    flask db-migrate
    flask db-rollback --target 1
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from evorbrain.core.errors import EvorBrainError


@click.command("db-status")
@with_appcontext
def db_status_command():
    """Show applied and pending migrations."""
    from evorbrain.core.migrations.commands import get_migration_status

    status = get_migration_status()
    click.echo(f"Current version: {status['current_version']}")
    for item in status["migrations"]:
        mark = "applied" if item["applied"] else "pending"
        drift = "  (checksum mismatch)" if item["checksum_mismatch"] else ""
        click.echo(f"  {item['version']:03d} {item['description']}: {mark}{drift}")


@click.command("db-migrate")
@with_appcontext
def db_migrate_command():
    """Apply pending migrations."""
    from evorbrain.core.migrations.commands import run_migrations

    try:
        result = run_migrations()
    except EvorBrainError as exc:
        raise click.ClickException(exc.message)
    click.echo(f"Applied {result['count']} migration(s); now at version {result['current_version']}")


@click.command("db-rollback")
@click.option("--target", "-t", type=int, default=0, show_default=True, help="Version to roll back to")
@click.option("--atomic", is_flag=True, help="Undo all steps in a single transaction")
@with_appcontext
def db_rollback_command(target: int, atomic: bool):
    """Roll back applied migrations above a target version."""
    from evorbrain.core.migrations.commands import rollback_migrations

    try:
        result = rollback_migrations(target, atomic=atomic)
    except EvorBrainError as exc:
        raise click.ClickException(exc.message)
    click.echo(f"Rolled back {result['rolled_back']}; now at version {result['to_version']}")


def register_commands(app) -> None:
    app.cli.add_command(db_status_command)
    app.cli.add_command(db_migrate_command)
    app.cli.add_command(db_rollback_command)
