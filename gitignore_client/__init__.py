"""
Cached, deduplicated fetching of gitignore templates.
"""

from gitignore_client.services import (
    ApiError,
    ErrorKind,
    JsonFileStore,
    MemoryStore,
    NetworkError,
    PersistentStore,
    ServiceError,
    StorageError,
    TemplateService,
    ValidationError,
)
from gitignore_client.types import TemplateConfig

__all__ = [
    "ApiError",
    "ErrorKind",
    "JsonFileStore",
    "MemoryStore",
    "NetworkError",
    "PersistentStore",
    "ServiceError",
    "StorageError",
    "TemplateConfig",
    "TemplateService",
    "ValidationError",
]
