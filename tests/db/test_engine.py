from sqlalchemy import inspect, text
from db.engine import create_db_engine, create_tables


def test_create_db_engine_creates_sqlite_directory(tmp_path):
    db_file = tmp_path / "nested" / "dir" / "app.db"
    engine = create_db_engine(f"sqlite:///{db_file}")
    assert (tmp_path / "nested" / "dir").is_dir()
    engine.dispose()


def test_sqlite_foreign_keys_enabled(engine):
    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_create_tables(engine):
    create_tables(engine)
    tables = inspect(engine).get_table_names()
    assert "users" in tables
    assert "api_keys" in tables


def test_database_cascade_without_orm(migrated_engine):
    with migrated_engine.begin() as conn:
        conn.execute(text("INSERT INTO users (id, email, role) VALUES (1, 'x@example.com', 'ADMIN')"))
        conn.execute(text("INSERT INTO api_keys (id, user_id, hashed_key) VALUES ('k1', 1, 'h1')"))
        conn.execute(text("DELETE FROM users WHERE id = 1"))
    with migrated_engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM api_keys")).scalar_one() == 0
