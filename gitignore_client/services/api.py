"""
Gitignore template API: endpoint resolution and response parsing.
"""

from loguru import logger

from gitignore_client.constants import (
    DEFAULT_API_BASE,
    LIST_PATH,
    TEMPLATE_SPLIT_REGEX,
)
from gitignore_client.services.client import ServiceClient
from gitignore_client.services.errors import ApiError, NetworkError


def resolve_base_endpoint(custom_api_endpoint: str | None) -> str:
    """Base URL of the template API, honouring a custom override."""
    if custom_api_endpoint:
        return custom_api_endpoint.rstrip("/")
    return DEFAULT_API_BASE


def list_endpoint(custom_api_endpoint: str | None) -> str:
    return f"{resolve_base_endpoint(custom_api_endpoint)}/{LIST_PATH}"


def content_endpoint(templates: list[str], custom_api_endpoint: str | None) -> str:
    return f"{resolve_base_endpoint(custom_api_endpoint)}/{','.join(templates)}"


def parse_templates(text: str, endpoint: str) -> list[str]:
    """
    Split a template list body on commas and newlines.

    Raises:
        ApiError: If no template names remain after trimming
    """
    templates = [
        name.strip() for name in TEMPLATE_SPLIT_REGEX.split(text) if name.strip()
    ]
    if not templates:
        raise ApiError(f"No templates found in response from {endpoint}")
    return templates


async def fetch_templates(
    client: ServiceClient, custom_api_endpoint: str | None
) -> list[str]:
    """Fetch the available template names."""
    endpoint = list_endpoint(custom_api_endpoint)
    logger.debug(f"Fetching templates from: {endpoint}")

    try:
        response = await client.fetch_with_retry(endpoint)
        templates = parse_templates(response.text, endpoint)
    except (ApiError, NetworkError) as e:
        logger.error(f"Failed to fetch templates from {endpoint}: {e}")
        raise
    except Exception as e:
        logger.error(f"Failed to fetch templates from {endpoint}: {e}")
        raise ApiError(f"Failed to fetch templates from {endpoint}", cause=e) from e

    logger.debug(f"Fetched {len(templates)} templates")
    return templates


async def fetch_gitignore_content(
    client: ServiceClient,
    templates: list[str],
    custom_api_endpoint: str | None,
) -> str:
    """
    Fetch the combined gitignore body for ``templates`` in the given order.

    Raises:
        ApiError: If ``templates`` is empty (no request is sent) or on HTTP errors
        NetworkError: For timeouts and connection failures
    """
    if not templates:
        raise ApiError("No templates provided")

    endpoint = content_endpoint(templates, custom_api_endpoint)
    logger.debug(f"Fetching gitignore content for templates: {', '.join(templates)}")

    try:
        response = await client.fetch_with_retry(endpoint)
        content = response.text
    except (ApiError, NetworkError) as e:
        logger.error(f"Failed to generate .gitignore from {endpoint}: {e}")
        raise
    except Exception as e:
        logger.error(f"Failed to generate .gitignore from {endpoint}: {e}")
        raise ApiError(f"Failed to generate .gitignore from {endpoint}", cause=e) from e

    logger.debug(f"Fetched gitignore content ({len(content)} characters)")
    return content
