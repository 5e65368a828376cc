"""
Shared test configuration and fixtures
"""
import pytest
from db.engine import create_db_engine, create_session_factory, create_tables
from db.repositories.user_repository import UserRepository
from provisioning.config import ProvisioningConfig


@pytest.fixture
def database_url(tmp_path):
    # File database so every connection sees the same data
    return f"sqlite:///{tmp_path / 'provision.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_db_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def migrated_engine(engine):
    create_tables(engine)
    return engine


@pytest.fixture
def session(migrated_engine):
    sess = create_session_factory(migrated_engine)()
    yield sess
    sess.close()


@pytest.fixture
def user_repo(session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def config(database_url) -> ProvisioningConfig:
    return ProvisioningConfig(database_url=database_url)


@pytest.fixture
def fixed_key_generator():
    """Key generator that always returns the same pair, to force hash collisions"""
    from provisioning.credentials import generate_unique_api_key

    pair = generate_unique_api_key("0123456789abcdef0123456789abcdef")
    return lambda: pair
