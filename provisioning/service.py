from sqlalchemy.exc import IntegrityError
from db.models.user import User, utcnow
from db.models.api_key import ApiKey, new_api_key_id
from db.repositories.user_repository import UserRepository
from provisioning.config import ProvisioningConfig
from provisioning.credentials import generate_unique_api_key, prefix_api_key
from provisioning.database import is_duplicate_key_hash
from provisioning.exceptions import DuplicateApiKeyError, ProvisioningException
from provisioning.models import ProvisionResult
import logging

logger = logging.getLogger(__name__)


class ProvisioningService:
    """Ensures an admin user exists and mints one API key for it through the ORM."""

    def __init__(
        self,
        user_repo: UserRepository,
        config: ProvisioningConfig,
        key_generator=generate_unique_api_key,
    ):
        self.user_repo = user_repo
        self.config = config
        self.key_generator = key_generator

    def ensure_default_user(self) -> tuple[User, bool]:
        """Return (user, created). Reuses the first existing user if there is one."""
        existing = self.user_repo.get_first_user()
        if existing:
            logger.info(f"Using existing user {existing.email} (ID: {existing.id})")
            return existing, False

        logger.info(f"No users found, creating admin user {self.config.admin_email}")
        user = User(
            email=self.config.admin_email,
            username=self.config.admin_username,
            name=self.config.admin_name,
            role=self.config.admin_role,
            email_verified=utcnow(),
        )
        try:
            self.user_repo.create_user(user)
        except IntegrityError:
            # Another run inserted the admin between our read and write
            logger.warning(f"Admin user {self.config.admin_email} was created concurrently")
            user = self.user_repo.get_user_by_email(self.config.admin_email)
            if user is None:
                raise
            return user, False
        logger.info(f"Created admin user {user.email} (ID: {user.id})")
        return user, True

    def create_api_key(self, user_id: int) -> tuple[ApiKey, str]:
        """Store a new hashed key for the user. Returns (row, raw_key)."""
        hashed_key, raw_key = self.key_generator()
        api_key = ApiKey(
            id=new_api_key_id(),
            user_id=user_id,
            hashed_key=hashed_key,
            note=self.config.key_note,
            expires_at=None,
        )
        try:
            self.user_repo.create_api_key(api_key)
        except IntegrityError as e:
            logger.error(f"Failed to store API key for user {user_id}: {e.orig}")
            if is_duplicate_key_hash(e):
                raise DuplicateApiKeyError("API key hash already exists")
            raise ProvisioningException(f"Failed to store API key: {e.orig}")
        logger.info(f"Created API key {api_key.id} for user {user_id}")
        return api_key, raw_key

    def count_users(self) -> int:
        user_count = self.user_repo.count_users()
        logger.info(f"Found {user_count} users in database")
        return user_count

    def provision(self) -> ProvisionResult:
        user_count = self.count_users()
        user, created = self.ensure_default_user()
        api_key, raw_key = self.create_api_key(user.id)
        return self.build_result(user_count, user, created, api_key, raw_key)

    def build_result(
        self, user_count: int, user: User, created: bool, api_key: ApiKey, raw_key: str
    ) -> ProvisionResult:
        return ProvisionResult(
            existing_user_count=user_count,
            user_id=user.id,
            user_email=user.email,
            user_created=created,
            api_key_id=api_key.id,
            note=api_key.note,
            expires_at=api_key.expires_at,
            raw_key=raw_key,
            prefixed_key=prefix_api_key(self.config.api_key_prefix, raw_key),
        )
