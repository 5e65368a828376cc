from .config import ProvisioningConfig
from .credentials import generate_unique_api_key, hash_api_key, prefix_api_key
from .exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    DuplicateApiKeyError,
    ProvisioningException,
    SchemaSyncError,
)

__all__ = [
    "ProvisioningConfig",
    "generate_unique_api_key",
    "hash_api_key",
    "prefix_api_key",
    "ConfigurationError",
    "DatabaseConnectionError",
    "DuplicateApiKeyError",
    "ProvisioningException",
    "SchemaSyncError",
]
