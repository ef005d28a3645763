"""
Tests for the Alembic migrations against the ORM models
"""
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.db.base import Base

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def db_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_DATABASE_URL", url)
    return url


@pytest.fixture
def alembic_config() -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    # keep pytest's logging setup intact
    config.attributes["configure_logging"] = False
    return config


def _inspect(url: str):
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = {
            name: {col["name"]: col for col in inspector.get_columns(name)}
            for name in inspector.get_table_names()
        }
        indexes = {name: inspector.get_indexes(name) for name in tables}
    finally:
        engine.dispose()
    return tables, indexes


class TestMigrations:

    def test_upgrade_head_matches_models(self, db_url, alembic_config):
        command.upgrade(alembic_config, "head")

        tables, _ = _inspect(db_url)

        assert set(tables) - {"alembic_version"} == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            migrated = tables[name]
            assert set(migrated) == {col.name for col in table.columns}, name
            for col in table.columns:
                assert migrated[col.name]["nullable"] == col.nullable, f"{name}.{col.name}"

    def test_storage_column_names_for_weekend_stories(self, db_url, alembic_config):
        command.upgrade(alembic_config, "head")

        tables, _ = _inspect(db_url)

        assert {"story", "image_urls"} <= set(tables["weekend_stories"])
        assert not tables["weekend_stories"]["image_urls"]["nullable"]

    def test_username_is_unique(self, db_url, alembic_config):
        command.upgrade(alembic_config, "head")

        _, indexes = _inspect(db_url)

        username_indexes = [ix for ix in indexes["users"] if ix["column_names"] == ["username"]]
        assert username_indexes and username_indexes[0]["unique"]

    def test_downgrade_removes_tables(self, db_url, alembic_config):
        command.upgrade(alembic_config, "head")
        command.downgrade(alembic_config, "base")

        tables, _ = _inspect(db_url)

        assert set(tables) - {"alembic_version"} == set()
