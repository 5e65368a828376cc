from .api_key import ApiKey
from .user import User

__all__ = ["ApiKey", "User"]
