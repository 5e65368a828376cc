"""
Provisioning with hand-written SQL.

Unlike the ORM service this variant owns its schema: it creates the users and
api_keys tables itself instead of relying on migrations having run.
"""
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError
from db.models.api_key import new_api_key_id
from db.models.user import utcnow
from provisioning.config import ProvisioningConfig
from provisioning.credentials import generate_unique_api_key, prefix_api_key
from provisioning.database import is_duplicate_key_hash
from provisioning.exceptions import DuplicateApiKeyError, ProvisioningException
from provisioning.models import ProvisionResult
import logging

logger = logging.getLogger(__name__)

# Autoincrementing primary key per dialect
USER_ID_COLUMN = {
    "postgresql": "id SERIAL PRIMARY KEY",
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
}

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    {id_column},
    email VARCHAR(255) UNIQUE NOT NULL,
    username VARCHAR(255),
    name VARCHAR(255),
    role VARCHAR(32) NOT NULL DEFAULT 'USER',
    email_verified TIMESTAMP,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

CREATE_API_KEYS_TABLE = """
CREATE TABLE IF NOT EXISTS api_keys (
    id VARCHAR(255) PRIMARY KEY,
    user_id INTEGER NOT NULL,
    note VARCHAR(255),
    hashed_key VARCHAR(255) UNIQUE NOT NULL,
    expires_at TIMESTAMP,
    last_used_at TIMESTAMP,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
)
"""

COUNT_USERS = "SELECT COUNT(*) FROM users"
SELECT_FIRST_USER = "SELECT id, email FROM users ORDER BY id LIMIT 1"
SELECT_USER_BY_EMAIL = "SELECT id, email FROM users WHERE email = :email"
INSERT_USER = """
INSERT INTO users (email, username, name, role, email_verified)
VALUES (:email, :username, :name, :role, :email_verified)
ON CONFLICT (email) DO NOTHING
RETURNING id
"""
INSERT_API_KEY = """
INSERT INTO api_keys (id, user_id, note, hashed_key, expires_at)
VALUES (:id, :user_id, :note, :hashed_key, :expires_at)
"""


class RawSqlProvisioner:
    def __init__(
        self,
        connection: Connection,
        config: ProvisioningConfig,
        key_generator=generate_unique_api_key,
    ):
        self.connection = connection
        self.config = config
        self.key_generator = key_generator

    def ensure_schema(self):
        """Create both tables if missing. Safe to run repeatedly."""
        dialect = self.connection.dialect.name
        if dialect not in USER_ID_COLUMN:
            raise ProvisioningException(f"Unsupported database dialect: {dialect}")
        logger.info("Ensuring users table exists")
        self.connection.execute(
            text(CREATE_USERS_TABLE.format(id_column=USER_ID_COLUMN[dialect]))
        )
        logger.info("Ensuring api_keys table exists")
        self.connection.execute(text(CREATE_API_KEYS_TABLE))
        self.connection.commit()

    def count_users(self) -> int:
        user_count = self.connection.execute(text(COUNT_USERS)).scalar_one()
        logger.info(f"Found {user_count} users in database")
        return user_count

    def ensure_default_user(self) -> tuple[int, str, bool]:
        """Return (user_id, email, created)."""
        row = self.connection.execute(text(SELECT_FIRST_USER)).first()
        if row is not None:
            logger.info(f"Using existing user {row.email} (ID: {row.id})")
            return row.id, row.email, False

        logger.info(f"No users found, creating admin user {self.config.admin_email}")
        inserted = self.connection.execute(
            text(INSERT_USER),
            {
                "email": self.config.admin_email,
                "username": self.config.admin_username,
                "name": self.config.admin_name,
                "role": self.config.admin_role,
                "email_verified": utcnow(),
            },
        ).first()
        self.connection.commit()
        if inserted is not None:
            logger.info(f"Created admin user {self.config.admin_email} (ID: {inserted.id})")
            return inserted.id, self.config.admin_email, True

        # Insert skipped by ON CONFLICT: a concurrent run created the admin
        logger.warning(f"Admin user {self.config.admin_email} was created concurrently")
        row = self.connection.execute(
            text(SELECT_USER_BY_EMAIL), {"email": self.config.admin_email}
        ).one()
        return row.id, row.email, False

    def create_api_key(self, user_id: int) -> tuple[str, str]:
        """Insert a hashed key for the user. Returns (key_id, raw_key)."""
        hashed_key, raw_key = self.key_generator()
        key_id = new_api_key_id()
        try:
            self.connection.execute(
                text(INSERT_API_KEY),
                {
                    "id": key_id,
                    "user_id": user_id,
                    "note": self.config.key_note,
                    "hashed_key": hashed_key,
                    "expires_at": None,
                },
            )
            self.connection.commit()
        except IntegrityError as e:
            self.connection.rollback()
            logger.error(f"Failed to store API key for user {user_id}: {e.orig}")
            if is_duplicate_key_hash(e):
                raise DuplicateApiKeyError("API key hash already exists")
            raise ProvisioningException(f"Failed to store API key: {e.orig}")
        logger.info(f"Created API key {key_id} for user {user_id}")
        return key_id, raw_key

    def provision(self) -> ProvisionResult:
        self.ensure_schema()
        user_count = self.count_users()
        user_id, email, created = self.ensure_default_user()
        key_id, raw_key = self.create_api_key(user_id)
        return self.build_result(user_count, user_id, email, created, key_id, raw_key)

    def build_result(
        self, user_count: int, user_id: int, email: str, created: bool, key_id: str, raw_key: str
    ) -> ProvisionResult:
        return ProvisionResult(
            existing_user_count=user_count,
            user_id=user_id,
            user_email=email,
            user_created=created,
            api_key_id=key_id,
            note=self.config.key_note,
            expires_at=None,
            raw_key=raw_key,
            prefixed_key=prefix_api_key(self.config.api_key_prefix, raw_key),
        )
