"""
Tests for setup_database.py (migrations, then the ORM variant)
"""
import pytest
from unittest.mock import Mock, patch
from provisioning.exceptions import SchemaSyncError
from provisioning.schema_sync import MetadataSchemaSync, SchemaSync
import setup_database


def test_run_applies_schema_then_creates_key(engine, config, capsys):
    result = setup_database.run(config, schema_sync=MetadataSchemaSync(engine))

    out = capsys.readouterr().out
    assert result is not None
    assert result.user_created is True
    assert "✅ Migrations completed" in out
    assert result.prefixed_key in out


def test_run_stops_when_schema_sync_fails(config, capsys):
    sync = Mock(spec=SchemaSync)
    sync.apply.side_effect = SchemaSyncError("Command 'alembic upgrade head' failed with exit code 1")

    with patch("setup_database.create_api_key.run") as mock_create:
        assert setup_database.run(config, schema_sync=sync) is None

    mock_create.assert_not_called()
    out = capsys.readouterr().out
    assert "❌ Error setting up database" in out
    assert "Make sure your DATABASE_URL is correct" in out


def test_run_defaults_to_subprocess_sync(config):
    with patch("setup_database.SubprocessSchemaSync.from_config") as mock_from_config, \
         patch("setup_database.create_api_key.run") as mock_create:
        setup_database.run(config)
    mock_from_config.assert_called_once_with(config)
    mock_from_config.return_value.apply.assert_called_once()
    mock_create.assert_called_once_with(config)


def test_main_without_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with patch("setup_database.run") as mock_run:
        with pytest.raises(SystemExit) as exc_info:
            setup_database.main()
    assert exc_info.value.code == 1
    mock_run.assert_not_called()
