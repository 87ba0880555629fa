"""
Endpoints, storage keys and default configuration values.
"""

import re

# Default base endpoint of the gitignore template API
DEFAULT_API_BASE = "https://www.toptal.com/developers/gitignore/api"

# Name of the template listing resource under the base endpoint
LIST_PATH = "list"

# Persistent store keys
STORAGE_KEY_TEMPLATE_LIST = "gitignore.templateList"
STORAGE_KEY_TEMPLATE_LIST_TIMESTAMP = "gitignore.templateListTimestamp"
STORAGE_KEY_CONTENT_CACHE = "gitignore.contentCache"

ALL_STORAGE_KEYS = (
    STORAGE_KEY_TEMPLATE_LIST,
    STORAGE_KEY_TEMPLATE_LIST_TIMESTAMP,
    STORAGE_KEY_CONTENT_CACHE,
)

# Splits the template list response body
TEMPLATE_SPLIT_REGEX = re.compile(r",|\n")

# Defaults (milliseconds where a duration)
DEFAULT_TEMPLATE_LIST_TTL = 24 * 60 * 60 * 1000  # 24 hours
DEFAULT_GITIGNORE_CACHE_TTL = 60 * 60 * 1000  # 1 hour
DEFAULT_MAX_CACHE_SIZE = 100
DEFAULT_GITIGNORE_PATH = ".gitignore"
DEFAULT_CACHE_FILE = ".gitignore_cache.json"

# Transport defaults
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1_000

# Upper bounds a validated configuration stays within
MAX_CACHE_SIZE_LIMIT = 10_000
MAX_TTL_LIMIT = 365 * 24 * 60 * 60 * 1000  # ~1 year
