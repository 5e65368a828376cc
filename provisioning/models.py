from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ProvisionResult(BaseModel):
    existing_user_count: int
    user_id: int
    user_email: str
    user_created: bool
    api_key_id: str
    note: Optional[str] = None
    expires_at: Optional[datetime] = None
    # Shown once to the operator, never stored
    raw_key: str
    prefixed_key: str
