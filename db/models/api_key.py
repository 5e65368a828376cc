from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from db.base import Base
from db.models.user import utcnow
import uuid


def new_api_key_id():
    return str(uuid.uuid4())


class ApiKey(Base):
    __tablename__ = "api_keys"
    id = Column(String(255), primary_key=True, default=new_api_key_id)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note = Column(String(255), nullable=True)
    hashed_key = Column(String(255), unique=True, nullable=False)  # SHA-256 hex, never the raw key
    expires_at = Column(DateTime, nullable=True)  # None means it never expires
    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="api_keys")
