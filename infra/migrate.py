from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

# infra/migrate.py -> infra -> project root
MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migration"


def _alembic_config(db_url: str, script_location: Path) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run_migrations(db_url: str, script_location: Path | None = None) -> None:
    """Upgrade the schedule database at ``db_url`` to the latest revision."""
    location = script_location or MIGRATIONS_DIR
    if not (location / "env.py").exists():
        raise RuntimeError(f"Alembic script_location missing: {location}")

    logger.info("Running schema migrations on %s", db_url)
    command.upgrade(_alembic_config(db_url, location), "head")


__all__ = ["run_migrations", "MIGRATIONS_DIR"]
