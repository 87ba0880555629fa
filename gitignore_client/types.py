"""
Configuration record consumed by the template services.
"""

from pydantic import BaseModel, ConfigDict, Field

from gitignore_client.constants import (
    DEFAULT_GITIGNORE_CACHE_TTL,
    DEFAULT_GITIGNORE_PATH,
    DEFAULT_MAX_CACHE_SIZE,
    DEFAULT_TEMPLATE_LIST_TTL,
)


class TemplateConfig(BaseModel):
    """Immutable snapshot of the template cache settings (durations in ms)."""

    model_config = ConfigDict(frozen=True)

    template_list_ttl: int = DEFAULT_TEMPLATE_LIST_TTL
    gitignore_cache_ttl: int = DEFAULT_GITIGNORE_CACHE_TTL
    max_cache_size: int = DEFAULT_MAX_CACHE_SIZE
    default_templates: tuple[str, ...] = Field(default_factory=tuple)
    custom_api_endpoint: str | None = None
    custom_gitignore_path: str = DEFAULT_GITIGNORE_PATH
