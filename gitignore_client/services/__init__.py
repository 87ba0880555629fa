"""
Service layer - cached, deduplicated and retried access to the template API.

Provides:
- ServiceClient: HTTP GET with timeout, cancellation and exponential backoff
- CacheManager: TTL validation and size-bounded eviction over a PersistentStore
- RequestDeduplicator: Prevents duplicate concurrent requests
- TemplateService: Read-through cache for template names and gitignore bodies
"""

from gitignore_client.services.errors import (
    ErrorKind,
    NetworkErrorReason,
    ServiceError,
    NetworkError,
    ApiError,
    ValidationError,
    StorageError,
    get_error_message,
)
from gitignore_client.services.cache import (
    CacheManager,
    CacheEntry,
    CacheObject,
    evict,
    is_cache_valid,
    make_cache_key,
)
from gitignore_client.services.store import PersistentStore, MemoryStore, JsonFileStore
from gitignore_client.services.client import (
    ServiceClient,
    calculate_backoff_delay,
    is_non_retryable_client_error,
)
from gitignore_client.services.deduplicator import RequestDeduplicator
from gitignore_client.services.api import parse_templates
from gitignore_client.services.templates import TemplateService

__all__ = [
    # Errors
    "ErrorKind",
    "NetworkErrorReason",
    "ServiceError",
    "NetworkError",
    "ApiError",
    "ValidationError",
    "StorageError",
    "get_error_message",
    # Cache
    "CacheManager",
    "CacheEntry",
    "CacheObject",
    "evict",
    "is_cache_valid",
    "make_cache_key",
    # Stores
    "PersistentStore",
    "MemoryStore",
    "JsonFileStore",
    # Transport
    "ServiceClient",
    "calculate_backoff_delay",
    "is_non_retryable_client_error",
    "parse_templates",
    # Deduplicator
    "RequestDeduplicator",
    # Orchestrator
    "TemplateService",
]
