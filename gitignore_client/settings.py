import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from gitignore_client.constants import (
    DEFAULT_CACHE_FILE,
    DEFAULT_GITIGNORE_CACHE_TTL,
    DEFAULT_GITIGNORE_PATH,
    DEFAULT_MAX_CACHE_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TEMPLATE_LIST_TTL,
    DEFAULT_TIMEOUT_MS,
)
from gitignore_client.types import TemplateConfig


class Settings(BaseModel):
    # Cache Configuration (milliseconds)
    template_list_ttl: int = Field(
        default=DEFAULT_TEMPLATE_LIST_TTL, alias="TEMPLATE_LIST_TTL"
    )
    gitignore_cache_ttl: int = Field(
        default=DEFAULT_GITIGNORE_CACHE_TTL, alias="GITIGNORE_CACHE_TTL"
    )
    max_cache_size: int = Field(default=DEFAULT_MAX_CACHE_SIZE, alias="MAX_CACHE_SIZE")
    cache_file: str = Field(default=DEFAULT_CACHE_FILE, alias="GITIGNORE_CACHE_FILE")

    # Template Configuration
    default_templates: str = Field(default="", alias="DEFAULT_TEMPLATES")
    custom_api_endpoint: str | None = Field(default=None, alias="CUSTOM_API_ENDPOINT")
    custom_gitignore_path: str = Field(
        default=DEFAULT_GITIGNORE_PATH, alias="CUSTOM_GITIGNORE_PATH"
    )

    # HTTP Configuration
    request_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, alias="REQUEST_TIMEOUT_MS")
    request_max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES, alias="REQUEST_MAX_RETRIES"
    )
    debug: bool = Field(default=False, alias="CLIENT_DEBUG")

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls.model_validate(dict(os.environ))

    def to_config(self) -> TemplateConfig:
        templates = tuple(
            name.strip() for name in self.default_templates.split(",") if name.strip()
        )
        return TemplateConfig(
            template_list_ttl=self.template_list_ttl,
            gitignore_cache_ttl=self.gitignore_cache_ttl,
            max_cache_size=self.max_cache_size,
            default_templates=templates,
            custom_api_endpoint=self.custom_api_endpoint or None,
            custom_gitignore_path=self.custom_gitignore_path,
        )


# Built on first use so importing the package never reads the environment.
global_settings: Settings | None = None


def get_settings() -> Settings:
    """Return ``global_settings``, loading it from the environment once."""
    if global_settings is None:
        return reload_settings()
    return global_settings


def reload_settings() -> Settings:
    """Re-read the environment and replace ``global_settings`` wholesale."""
    global global_settings
    global_settings = Settings.from_env()
    return global_settings
