# tests/test_migrations.py
# PURPOSE: Alembic revisions build the same tables the ORM expects.

import os

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _alembic_config(db_url: str) -> Config:
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    cfg.attributes["configure_logger"] = False
    return cfg


def test_upgrade_and_downgrade(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = _alembic_config(db_url)

    command.upgrade(cfg, "head")

    engine = create_engine(db_url)
    try:
        insp = inspect(engine)
        assert {"users", "tasks", "task_dependencies"} <= set(insp.get_table_names())
        task_cols = {c["name"] for c in insp.get_columns("tasks")}
        assert {"due_date", "next_recurrence", "active", "user_id", "recurrence"} <= task_cols
        uniques = insp.get_unique_constraints("task_dependencies")
        assert any(u["column_names"] == ["dependent_id"] for u in uniques)
    finally:
        engine.dispose()

    command.downgrade(cfg, "base")

    engine = create_engine(db_url)
    try:
        assert "tasks" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
