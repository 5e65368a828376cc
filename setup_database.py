#!/usr/bin/env python3
"""
Apply pending migrations, then create an API key (see create_api_key.py).

Usage: DATABASE_URL=postgresql://... python setup_database.py
Set MIGRATE_COMMAND / ORM_CODEGEN_COMMAND to override the tooling invoked.
"""
from provisioning.config import ProvisioningConfig
from provisioning.exceptions import ConfigurationError, SchemaSyncError
from provisioning.logging_config import configure_logging
from provisioning.models import ProvisionResult
from provisioning.report import print_config_error
from provisioning.schema_sync import SchemaSync, SubprocessSchemaSync
import create_api_key
import logging
import sys

logger = logging.getLogger(__name__)


def run(config: ProvisioningConfig, schema_sync: SchemaSync | None = None) -> ProvisionResult | None:
    if schema_sync is None:
        schema_sync = SubprocessSchemaSync.from_config(config)
    try:
        print("🗄️  Setting up database...")
        print("📊 Applying database migrations...")
        schema_sync.apply()
        print("✅ Migrations completed")
    except SchemaSyncError as e:
        logger.error(f"Error setting up database: {e}")
        print(f"❌ Error setting up database: {e}")
        print("💡 Make sure your DATABASE_URL is correct and the database is accessible")
        return None

    print("🔑 Creating API key...")
    return create_api_key.run(config)


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
