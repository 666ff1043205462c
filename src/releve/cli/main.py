"""Main CLI entry point."""

import logging
import os

import click
from releve.database.factories import create_sqlite_database

# Import and register all commands at module level
from releve.cli.commands import (
    import_cmd,
    category,
    rule,
    transaction,
)

DEFAULT_USER = "default"


def _setup_logging() -> None:
    """Configure logging based on RELEVE_LOG_LEVEL env var."""
    level = os.environ.get("RELEVE_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides RELEVE_DB_PATH environment variable)",
    envvar="RELEVE_DB_PATH",
)
@click.option(
    "--user",
    default=DEFAULT_USER,
    show_default=True,
    help="Owner of the imported data",
    envvar="RELEVE_USER",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str):
    """Releve - Bank statement import and categorization.

    Import CSV exports from any bank, deduplicate repeated imports and sort
    every transaction into a spending or income category.
    """
    ctx.ensure_object(dict)
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
category.register_commands(cli)
rule.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    _setup_logging()
    cli()


if __name__ == "__main__":
    main()
