"""
OpenAI chat-completions client.

Also used for any OpenAI-compatible endpoint (e.g. a local Ollama server)
by pointing ``base_url`` at it.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .errors import ApiError
from .providers import BaseChatClient, ChatResult, ModelProvider, UsageMetadata

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


class OpenAIMessage(BaseModel):
    """OpenAI-compatible message format."""
    role: str
    content: Optional[str] = None


class OpenAIRequest(BaseModel):
    """OpenAI-compatible request format."""
    model: str
    messages: List[OpenAIMessage]
    max_tokens: Optional[int] = None


class OpenAIChoice(BaseModel):
    """OpenAI-compatible choice format."""
    index: int = 0
    message: Optional[OpenAIMessage] = None
    finish_reason: Optional[str] = None


class OpenAIUsage(BaseModel):
    """OpenAI-compatible usage format."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class OpenAIResponse(BaseModel):
    """OpenAI-compatible response format."""
    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None
    choices: List[OpenAIChoice]
    usage: Optional[OpenAIUsage] = None


class OpenAIChatClient(BaseChatClient):
    """Chat client for the OpenAI chat-completions API."""

    endpoint = "/chat/completions"

    def _build_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    def _build_payload(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        request = OpenAIRequest(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            messages=[
                OpenAIMessage(role="system", content=system_prompt),
                OpenAIMessage(role="user", content=user_message),
            ],
        )
        return request.model_dump(exclude_none=True)

    def _parse_response(self, data: Any) -> ChatResult:
        openai_response = OpenAIResponse.model_validate(data)

        if not openai_response.choices or openai_response.choices[0].message is None:
            raise ApiError(
                "OpenAI response contained no choices",
                provider=self.provider.value,
            )

        choice = openai_response.choices[0]
        if choice.message.content is None:
            raise ApiError(
                "OpenAI response contained no text content",
                provider=self.provider.value,
            )

        usage_metadata = None
        if openai_response.usage:
            usage_metadata = UsageMetadata(
                prompt_token_count=openai_response.usage.prompt_tokens,
                completion_token_count=openai_response.usage.completion_tokens,
            )

        return ChatResult(
            text=choice.message.content,
            model=openai_response.model,
            provider=ModelProvider.OPENAI,
            finish_reason=choice.finish_reason,
            usage_metadata=usage_metadata,
        )
