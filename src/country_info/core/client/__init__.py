"""
Chat API clients for Country Info.

Exports the error hierarchy, the provider interfaces and the factory used
by the CLI to send its single request.
"""

from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    CountryInfoError,
    MissingCredentialError,
    ModelUnavailableError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ResponseDecodeError,
    ServerError,
    classify_error,
)
from .providers import BaseChatClient, ChatResult, ModelProvider, ProviderConfig, UsageMetadata
from .openai_client import DEFAULT_OPENAI_BASE_URL, DEFAULT_OPENAI_MODEL, OpenAIChatClient
from .anthropic_client import DEFAULT_ANTHROPIC_BASE_URL, DEFAULT_CLAUDE_MODEL, AnthropicChatClient
from .provider_factory import ChatClientFactory, create_chat_client, get_supported_providers

__all__ = [
    # Errors
    "ApiError",
    "AuthenticationError",
    "ConfigurationError",
    "CountryInfoError",
    "MissingCredentialError",
    "ModelUnavailableError",
    "NetworkError",
    "RateLimitError",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "ServerError",
    "classify_error",
    # Providers
    "BaseChatClient",
    "ChatResult",
    "ModelProvider",
    "ProviderConfig",
    "UsageMetadata",
    "OpenAIChatClient",
    "AnthropicChatClient",
    "DEFAULT_OPENAI_BASE_URL",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_BASE_URL",
    "DEFAULT_CLAUDE_MODEL",
    # Factory
    "ChatClientFactory",
    "create_chat_client",
    "get_supported_providers",
]
