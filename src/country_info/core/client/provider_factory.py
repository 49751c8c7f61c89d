"""
Provider factory for creating chat clients from a resolved configuration.
"""

import logging
from typing import Dict, List, Optional, Type

import httpx

from .anthropic_client import AnthropicChatClient
from .errors import ConfigurationError
from .openai_client import OpenAIChatClient
from .providers import BaseChatClient, ModelProvider, ProviderConfig

logger = logging.getLogger(__name__)


class ChatClientFactory:
    """Factory for creating chat clients by provider."""

    def __init__(self):
        self._clients: Dict[ModelProvider, Type[BaseChatClient]] = {
            ModelProvider.OPENAI: OpenAIChatClient,
            ModelProvider.CLAUDE: AnthropicChatClient,
        }

    def register_provider(
        self,
        provider: ModelProvider,
        client_class: Type[BaseChatClient]
    ) -> None:
        """Register a client class for a provider."""
        self._clients[provider] = client_class
        logger.info(f"Registered provider {provider.value} with client {client_class.__name__}")

    def create_client(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> BaseChatClient:
        """Create a chat client for the configured provider."""
        if config.provider not in self._clients:
            raise ConfigurationError(
                f"No client registered for provider {config.provider.value}",
                config_field="service_type",
            )

        client_class = self._clients[config.provider]
        logger.debug(f"Creating {config.provider.value} client for model {config.model}")
        return client_class(config, transport=transport)

    def get_supported_providers(self) -> List[ModelProvider]:
        """Get list of supported providers."""
        return list(self._clients.keys())


# Global factory instance
_factory = ChatClientFactory()


def create_chat_client(
    config: ProviderConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> BaseChatClient:
    """Create a chat client for the given configuration."""
    return _factory.create_client(config, transport=transport)


def get_supported_providers() -> List[ModelProvider]:
    """Get list of supported providers."""
    return _factory.get_supported_providers()
