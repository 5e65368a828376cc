from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from db.models.user import User
from db.models.api_key import ApiKey


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise

    def create_user(self, user: User):
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def count_users(self) -> int:
        return self.db.query(User).count()

    def get_first_user(self) -> User | None:
        """Oldest user by id, or None on an empty table"""
        return self.db.query(User).order_by(User.id).first()

    def get_user_by_email(self, email: str):
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_id(self, user_id: int):
        return self.db.query(User).filter(User.id == user_id).first()

    def delete_user(self, user_id: int):
        """Delete a user and, through the cascade, its API keys"""
        user = self.get_user_by_id(user_id)
        if user:
            self.db.delete(user)
            self.db.commit()
            return True
        return False

    def create_api_key(self, api_key: ApiKey):
        self.db.add(api_key)
        self._commit()
        self.db.refresh(api_key)
        return api_key

    def list_api_keys(self, user_id: int):
        return self.db.query(ApiKey).filter(ApiKey.user_id == user_id).all()

    def count_api_keys(self, user_id: int = None):
        query = self.db.query(ApiKey)
        if user_id is not None:
            query = query.filter(ApiKey.user_id == user_id)
        return query.count()

    def get_api_key(self, api_key_id: str):
        return self.db.query(ApiKey).filter(ApiKey.id == api_key_id).first()

    def get_api_key_by_hash(self, hashed_key: str):
        return self.db.query(ApiKey).filter(ApiKey.hashed_key == hashed_key).first()
