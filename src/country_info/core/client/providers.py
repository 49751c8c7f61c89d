"""
Provider-agnostic interfaces for chat completion clients.

Each provider client sends exactly one request (a system instruction plus
one user message) and returns the reply text. Providers differ only in
endpoint, headers and payload shape.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from country_info import USER_AGENT
from .errors import ApiError, CountryInfoError, classify_error, error_from_status

logger = logging.getLogger(__name__)


class ModelProvider(str, Enum):
    """Supported chat API providers, keyed by their --service-type value."""
    OPENAI = "openai"
    CLAUDE = "claude"


@dataclass(frozen=True)
class ProviderConfig:
    """Everything a client needs to send one request."""
    provider: ModelProvider
    model: str
    api_key: str
    base_url: str
    max_tokens: int = 1000
    timeout_seconds: float = 60.0


class UsageMetadata(BaseModel):
    """Token usage reported by the provider."""
    prompt_token_count: int = Field(default=0, description="Tokens in the prompt")
    completion_token_count: int = Field(default=0, description="Tokens in the reply")

    @property
    def total_token_count(self) -> int:
        return self.prompt_token_count + self.completion_token_count


class ChatResult(BaseModel):
    """Provider-agnostic result of one chat exchange."""
    text: str
    model: Optional[str] = None
    provider: ModelProvider
    finish_reason: Optional[str] = None
    usage_metadata: Optional[UsageMetadata] = None


class BaseChatClient(ABC):
    """Abstract base class for provider chat clients."""

    endpoint: str = ""

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self._transport = transport

    @property
    def provider(self) -> ModelProvider:
        """Get the provider type."""
        return self.config.provider

    @property
    def model(self) -> str:
        """Get the model name."""
        return self.config.model

    @abstractmethod
    def _build_headers(self) -> Dict[str, str]:
        """Provider-specific authentication headers."""

    @abstractmethod
    def _build_payload(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        """Provider-specific request body."""

    @abstractmethod
    def _parse_response(self, data: Any) -> ChatResult:
        """Convert the provider's response body into a ChatResult."""

    def _create_client(self) -> httpx.AsyncClient:
        """Create the HTTP client for a single exchange."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        headers.update(self._build_headers())

        return httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            transport=self._transport,
        )

    async def complete(self, system_prompt: str, user_message: str) -> ChatResult:
        """
        Send one chat request and return the reply.

        Args:
            system_prompt: The system instruction
            user_message: The single user-turn message

        Returns:
            The reply text and metadata

        Raises:
            CountryInfoError: On any transport or API failure
        """
        payload = self._build_payload(system_prompt, user_message)
        logger.info(
            f"Sending chat request to {self.provider.value} "
            f"({self.config.base_url}) with model {self.model}"
        )

        try:
            async with self._create_client() as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise self._map_http_error(e) from e
        except CountryInfoError:
            raise
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON in {self.provider.value} response: {e}",
                provider=self.provider.value,
                original_error=e,
            ) from e
        except Exception as e:
            error = classify_error(e)
            logger.error(f"Chat request to {self.provider.value} failed: {error}")
            raise error from e

        try:
            result = self._parse_response(data)
        except ValidationError as e:
            raise ApiError(
                f"Unexpected {self.provider.value} response format: {e.error_count()} problem(s)",
                provider=self.provider.value,
                original_error=e,
            ) from e

        if result.usage_metadata:
            logger.debug(f"Token usage: {result.usage_metadata.total_token_count}")
        return result

    def _map_http_error(self, error: httpx.HTTPStatusError) -> CountryInfoError:
        """Map HTTP errors to appropriate exception types."""
        status_code = error.response.status_code
        message = (
            f"HTTP {status_code} error from {self.provider.value}: "
            f"{error.response.text}"
        )
        mapped = error_from_status(
            status_code,
            message,
            provider=self.provider.value,
            model=self.model,
        )
        mapped.original_error = error
        return mapped
