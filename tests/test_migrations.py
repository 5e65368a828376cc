"""
Runs the Alembic migrations against a throwaway SQLite database
"""
import os
import shlex
import sys
from alembic import command
from alembic.config import Config
from sqlalchemy import inspect
from db.engine import create_db_engine, create_session_factory
from db.repositories.user_repository import UserRepository
from provisioning.schema_sync import ALEMBIC_INI
from provisioning.service import ProvisioningService


def alembic_config():
    return Config(ALEMBIC_INI)


def test_upgrade_head_creates_schema(database_url, config, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", database_url)
    command.upgrade(alembic_config(), "head")

    engine = create_db_engine(database_url)
    try:
        inspector = inspect(engine)
        assert {"users", "api_keys"} <= set(inspector.get_table_names())
        fks = inspector.get_foreign_keys("api_keys")
        assert fks[0]["referred_table"] == "users"
        assert fks[0]["options"].get("ondelete") == "CASCADE"

        db = create_session_factory(engine)()
        try:
            result = ProvisioningService(UserRepository(db), config).provision()
            assert result.user_created is True
        finally:
            db.close()
    finally:
        engine.dispose()


def test_downgrade_base_drops_schema(database_url, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", database_url)
    command.upgrade(alembic_config(), "head")
    command.downgrade(alembic_config(), "base")

    engine = create_db_engine(database_url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert "users" not in tables
        assert "api_keys" not in tables
    finally:
        engine.dispose()


def test_packaged_config_locates_revisions():
    from alembic.script import ScriptDirectory

    assert os.path.isfile(ALEMBIC_INI)
    script = ScriptDirectory.from_config(alembic_config())
    assert script.get_current_head() == "0001"


def test_subprocess_sync_migrates_from_any_directory(database_url, tmp_path, monkeypatch):
    from provisioning.config import ProvisioningConfig
    from provisioning.schema_sync import SubprocessSchemaSync

    monkeypatch.delenv("ALEMBIC_CONFIG", raising=False)
    workdir = tmp_path / "elsewhere"
    workdir.mkdir()
    config = ProvisioningConfig(
        database_url=database_url,
        migrate_command=f"{shlex.quote(sys.executable)} -m alembic upgrade head",
    )
    sync = SubprocessSchemaSync.from_config(config, cwd=str(workdir))

    sync.apply()

    engine = create_db_engine(database_url)
    try:
        assert {"users", "api_keys"} <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
