from pydantic import BaseModel, ValidationError, field_validator
from typing import Mapping, Optional
import os
from db.models.user import ROLE_ADMIN
from provisioning.exceptions import ConfigurationError

DEFAULT_API_KEY_PREFIX = "cal_"
DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_NAME = "API Admin"
DEFAULT_ADMIN_ROLE = ROLE_ADMIN
DEFAULT_KEY_NOTE = "Generated via script for API access"
DEFAULT_USAGE_URL = "https://your-render-api-url.onrender.com/api/v2/me"
DEFAULT_MIGRATE_COMMAND = "alembic upgrade head"

# Environment variable -> config field
ENV_FIELDS = {
    "DATABASE_URL": "database_url",
    "API_KEY_PREFIX": "api_key_prefix",
    "ADMIN_EMAIL": "admin_email",
    "ADMIN_USERNAME": "admin_username",
    "ADMIN_NAME": "admin_name",
    "ADMIN_ROLE": "admin_role",
    "API_KEY_NOTE": "key_note",
    "API_USAGE_URL": "usage_url",
    "MIGRATE_COMMAND": "migrate_command",
    "ORM_CODEGEN_COMMAND": "codegen_command",
}


class ProvisioningConfig(BaseModel):
    """
    Settings shared by the provisioning scripts.

    database_url: SQLAlchemy URL of the target database (required).
    api_key_prefix: prepended to the raw key when it is displayed.
    admin_email, admin_username, admin_name, admin_role: identity of the
        admin user created when the users table is empty.
    key_note: note stored on every generated key.
    usage_url: endpoint shown in the curl usage example.
    migrate_command: command run by setup_database.py to apply migrations.
    codegen_command: optional command run after migrations.
    """

    database_url: str
    api_key_prefix: str = DEFAULT_API_KEY_PREFIX
    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_username: Optional[str] = DEFAULT_ADMIN_USERNAME
    admin_name: Optional[str] = DEFAULT_ADMIN_NAME
    admin_role: str = DEFAULT_ADMIN_ROLE
    key_note: Optional[str] = DEFAULT_KEY_NOTE
    usage_url: str = DEFAULT_USAGE_URL
    migrate_command: str = DEFAULT_MIGRATE_COMMAND
    codegen_command: Optional[str] = None

    @field_validator("database_url")
    @classmethod
    def check_database_url(cls, database_url):
        database_url = database_url.strip()
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")
        return database_url

    @field_validator("admin_email")
    @classmethod
    def check_admin_email(cls, admin_email):
        if not admin_email or "@" not in admin_email:
            raise ValueError("Invalid admin email address")
        return admin_email.strip()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProvisioningConfig":
        """Build the config from environment variables, unset ones keep their defaults"""
        environ = os.environ if environ is None else environ
        if not (environ.get("DATABASE_URL") or "").strip():
            raise ConfigurationError("DATABASE_URL environment variable is required")

        values = {}
        for env_key, field in ENV_FIELDS.items():
            value = environ.get(env_key)
            if value is not None and value != "":
                values[field] = value
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
