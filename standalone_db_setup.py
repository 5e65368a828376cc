#!/usr/bin/env python3
"""
Create the users and api_keys tables with plain SQL, then mint an API key.
Needs no migration tooling. Exits with status 1 on any failure.

Usage: DATABASE_URL=postgresql://... python standalone_db_setup.py
"""
from sqlalchemy.exc import SQLAlchemyError
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
from provisioning.raw_sql import RawSqlProvisioner
from provisioning.report import print_api_key, print_config_error, print_user, print_user_count
import logging
import sys

logger = logging.getLogger(__name__)


def run(config: ProvisioningConfig, key_generator=None) -> ProvisionResult:
    engine = None
    connection = None
    try:
        print("🔗 Connecting to database...")
        engine = build_engine(config.database_url)
        connection = open_connection(engine)
        print("✅ Connected to database")

        provisioner = RawSqlProvisioner(
            connection,
            config,
            key_generator=key_generator or generate_unique_api_key,
        )
        print("📊 Creating users and api_keys tables...")
        provisioner.ensure_schema()

        print("👤 Checking for existing users...")
        user_count = provisioner.count_users()
        print_user_count(user_count)
        user_id, email, created = provisioner.ensure_default_user()
        print_user(email, user_id, created)

        print("🔑 Generating API key...")
        key_id, raw_key = provisioner.create_api_key(user_id)
        result = provisioner.build_result(user_count, user_id, email, created, key_id, raw_key)
        print_api_key(result, config, "Database setup completed successfully!")
        return result
    except (ProvisioningException, SQLAlchemyError) as e:
        logger.error(f"Error setting up database: {e}")
        print(f"❌ Error setting up database: {e}", file=sys.stderr)
        if isinstance(e, DuplicateApiKeyError):
            print("💡 Try running the script again to generate a different key.", file=sys.stderr)
        sys.exit(1)
    finally:
        if connection is not None:
            connection.close()
        if engine is not None:
            engine.dispose()


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
