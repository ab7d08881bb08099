"""Database migration CLI commands using Alembic programmatically."""

import typer
from alembic import command
from alembic.config import Config
from loguru import logger

db_app = typer.Typer()

ALEMBIC_INI = "alembic.ini"


def _alembic_config(ini_path: str) -> Config:
    return Config(ini_path)


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Create or migrate the ballot tables up to the target revision."""
    logger.info(f"Upgrading database to {revision}")
    command.upgrade(_alembic_config(config), revision)
    logger.info("Database upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Roll the schema back to the target revision."""
    logger.info(f"Downgrading database to {revision}")
    command.downgrade(_alembic_config(config), revision)
    logger.info("Database downgrade complete")


@db_app.command()
def current(
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Show the current database migration revision."""
    command.current(_alembic_config(config), verbose=True)
