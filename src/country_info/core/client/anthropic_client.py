"""
Anthropic messages API client.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .errors import ApiError
from .providers import BaseChatClient, ChatResult, ModelProvider, UsageMetadata

logger = logging.getLogger(__name__)

DEFAULT_CLAUDE_MODEL = "claude-3-haiku-20240307"
DEFAULT_ANTHROPIC_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicMessage(BaseModel):
    """A user or assistant turn."""
    role: str
    content: str


class AnthropicRequest(BaseModel):
    """Messages API request body."""
    model: str
    max_tokens: int
    system: Optional[str] = None
    messages: List[AnthropicMessage]


class AnthropicContentBlock(BaseModel):
    """One block of reply content; only text blocks carry ``text``."""
    type: str
    text: Optional[str] = None


class AnthropicUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class AnthropicResponse(BaseModel):
    """Messages API response body."""
    id: Optional[str] = None
    model: Optional[str] = None
    content: List[AnthropicContentBlock]
    stop_reason: Optional[str] = None
    usage: Optional[AnthropicUsage] = None


class AnthropicChatClient(BaseChatClient):
    """Chat client for the Anthropic messages API."""

    endpoint = "/v1/messages"

    def _build_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _build_payload(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        request = AnthropicRequest(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            system=system_prompt,
            messages=[AnthropicMessage(role="user", content=user_message)],
        )
        return request.model_dump(exclude_none=True)

    def _parse_response(self, data: Any) -> ChatResult:
        anthropic_response = AnthropicResponse.model_validate(data)

        text_blocks = [
            block.text for block in anthropic_response.content
            if block.type == "text" and block.text is not None
        ]
        if not text_blocks:
            raise ApiError(
                "Anthropic response contained no text content",
                provider=self.provider.value,
            )

        usage_metadata = None
        if anthropic_response.usage:
            usage_metadata = UsageMetadata(
                prompt_token_count=anthropic_response.usage.input_tokens,
                completion_token_count=anthropic_response.usage.output_tokens,
            )

        return ChatResult(
            text=text_blocks[0],
            model=anthropic_response.model,
            provider=ModelProvider.CLAUDE,
            finish_reason=anthropic_response.stop_reason,
            usage_metadata=usage_metadata,
        )
