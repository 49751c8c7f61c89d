"""
Resolution of command-line options into a provider configuration.

The resolver decides which provider, model, key and endpoint a run will
use. It only reads flags and settings; any failure here happens before a
network connection is attempted.
"""

import logging
from typing import Optional

from country_info.config.settings import (
    ANTHROPIC_API_KEY_ENV,
    OPENAI_API_KEY_ENV,
    CountryInfoSettings,
)
from country_info.core.client.anthropic_client import (
    DEFAULT_ANTHROPIC_BASE_URL,
    DEFAULT_CLAUDE_MODEL,
)
from country_info.core.client.errors import ConfigurationError, MissingCredentialError
from country_info.core.client.openai_client import (
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_OPENAI_MODEL,
)
from country_info.core.client.providers import ModelProvider, ProviderConfig

logger = logging.getLogger(__name__)

# Key sent to OpenAI-compatible endpoints given with --base-url (e.g. Ollama)
PLACEHOLDER_API_KEY = "ollama"


def parse_service_type(service_type: str) -> ModelProvider:
    """Map a --service-type value to a provider."""
    try:
        return ModelProvider(service_type.strip().lower())
    except ValueError:
        supported = ", ".join(p.value for p in ModelProvider)
        raise ConfigurationError(
            f"Unknown service type '{service_type}'. Use one of: {supported}",
            config_field="service_type",
        ) from None


def resolve_provider_config(
    settings: CountryInfoSettings,
    service_type: str = ModelProvider.OPENAI.value,
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
) -> ProviderConfig:
    """
    Resolve flags and settings into the configuration for one request.

    Args:
        settings: Loaded settings (provider keys, limits)
        service_type: Provider selector, "openai" or "claude"
        base_url: Alternate endpoint; empty means the provider default
        model: Model identifier; empty means the provider default
        max_tokens: Reply length bound overriding the settings value

    Returns:
        The resolved provider configuration

    Raises:
        MissingCredentialError: If the provider's key variable is not set
        ConfigurationError: If the flag combination is invalid
    """
    provider = parse_service_type(service_type)
    base_url = (base_url or "").strip()
    model = (model or "").strip()

    if provider == ModelProvider.CLAUDE:
        if settings.anthropic_api_key is None:
            raise MissingCredentialError(ANTHROPIC_API_KEY_ENV)
        if base_url:
            logger.warning(f"Ignoring base URL {base_url} for the claude service type")
        api_key = settings.anthropic_api_key
        model = model or DEFAULT_CLAUDE_MODEL
        base_url = DEFAULT_ANTHROPIC_BASE_URL
    elif base_url:
        if not model:
            raise ConfigurationError(
                "Model must be provided when base-url is specified",
                config_field="model",
            )
        api_key = PLACEHOLDER_API_KEY
    else:
        if settings.openai_api_key is None:
            raise MissingCredentialError(OPENAI_API_KEY_ENV)
        api_key = settings.openai_api_key
        model = model or DEFAULT_OPENAI_MODEL
        base_url = DEFAULT_OPENAI_BASE_URL

    config = ProviderConfig(
        provider=provider,
        model=model,
        api_key=api_key,
        base_url=base_url,
        max_tokens=max_tokens if max_tokens is not None else settings.max_tokens,
        timeout_seconds=settings.timeout,
    )
    logger.debug(f"Resolved {provider.value} provider with model {model} at {base_url}")
    return config
