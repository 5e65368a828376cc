#!/usr/bin/env python3
"""
Create an API key for the first user in the database, creating an admin user
if the users table is empty. The schema must already be migrated.

Usage: DATABASE_URL=postgresql://... python create_api_key.py
"""
from sqlalchemy.exc import SQLAlchemyError
from db.engine import create_session_factory
from db.repositories.user_repository import UserRepository
from provisioning.config import ProvisioningConfig
from provisioning.credentials import generate_unique_api_key
from provisioning.database import build_engine, open_connection
from provisioning.exceptions import (
    ConfigurationError,
    DuplicateApiKeyError,
    ProvisioningException,
)
from provisioning.logging_config import configure_logging
from provisioning.models import ProvisionResult
from provisioning.report import print_api_key, print_config_error, print_user, print_user_count
from provisioning.service import ProvisioningService
import logging
import sys

logger = logging.getLogger(__name__)


def run(config: ProvisioningConfig, key_generator=None) -> ProvisionResult | None:
    """Provision a key through the ORM. Errors are reported, not raised."""
    engine = None
    db = None
    try:
        print("🔗 Connecting to database...")
        engine = build_engine(config.database_url)
        open_connection(engine).close()
        print("✅ Connected to database")
        db = create_session_factory(engine)()
        service = ProvisioningService(
            UserRepository(db),
            config,
            key_generator=key_generator or generate_unique_api_key,
        )

        user_count = service.count_users()
        print_user_count(user_count)
        user, created = service.ensure_default_user()
        print_user(user.email, user.id, created)

        print("🔑 Generating API key...")
        api_key, raw_key = service.create_api_key(user.id)
        result = service.build_result(user_count, user, created, api_key, raw_key)
        print_api_key(result, config, "API Key created successfully!")
        return result
    except DuplicateApiKeyError as e:
        logger.error(f"Error creating API key: {e}")
        print(f"❌ Error creating API key: {e}")
        print("💡 This might be due to a unique constraint violation.")
        print("   Try running the script again to generate a different key.")
    except (ProvisioningException, SQLAlchemyError) as e:
        logger.error(f"Error creating API key: {e}")
        print(f"❌ Error creating API key: {e}")
    finally:
        if db is not None:
            db.close()
        if engine is not None:
            engine.dispose()
    return None


def main():
    try:
        config = ProvisioningConfig.from_env()
    except ConfigurationError as e:
        print_config_error(e)
        sys.exit(1)
    configure_logging()
    run(config)


if __name__ == "__main__":
    main()
