"""Tests for the provider chat clients."""

import httpx
import pytest

from conftest import FRANCE_REPLY, anthropic_message, openai_completion
from country_info import USER_AGENT
from country_info.core.client import (
    AnthropicChatClient,
    ApiError,
    AuthenticationError,
    ModelProvider,
    ModelUnavailableError,
    NetworkError,
    OpenAIChatClient,
    ProviderConfig,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    create_chat_client,
    get_supported_providers,
)


def _openai_config(**overrides) -> ProviderConfig:
    values = dict(
        provider=ModelProvider.OPENAI,
        model="gpt-3.5-turbo",
        api_key="sk-test",
        base_url="https://api.openai.com/v1",
    )
    values.update(overrides)
    return ProviderConfig(**values)


def _claude_config(**overrides) -> ProviderConfig:
    values = dict(
        provider=ModelProvider.CLAUDE,
        model="claude-3-haiku-20240307",
        api_key="sk-ant",
        base_url="https://api.anthropic.com",
    )
    values.update(overrides)
    return ProviderConfig(**values)


class TestProviderFactory:
    """Test client creation."""

    def test_supported_providers(self) -> None:
        providers = get_supported_providers()
        assert ModelProvider.OPENAI in providers
        assert ModelProvider.CLAUDE in providers

    def test_creates_provider_clients(self) -> None:
        openai_client = create_chat_client(_openai_config())
        claude_client = create_chat_client(_claude_config())

        assert isinstance(openai_client, OpenAIChatClient)
        assert openai_client.provider == ModelProvider.OPENAI
        assert openai_client.model == "gpt-3.5-turbo"
        assert isinstance(claude_client, AnthropicChatClient)
        assert claude_client.provider == ModelProvider.CLAUDE


class TestOpenAIChatClient:
    """Test the OpenAI chat-completions client."""

    @pytest.mark.asyncio
    async def test_sends_system_and_user_messages(self, recording_transport) -> None:
        recorder = recording_transport(
            lambda request: httpx.Response(200, json=openai_completion(FRANCE_REPLY))
        )
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        result = await client.complete("SYSTEM", '{"country":"France"}')

        assert result.text == FRANCE_REPLY
        assert result.provider == ModelProvider.OPENAI
        assert result.finish_reason == "stop"
        assert result.usage_metadata.total_token_count == 160

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["User-Agent"] == USER_AGENT
        assert recorder.last_json() == {
            "model": "gpt-3.5-turbo",
            "max_tokens": 1000,
            "messages": [
                {"role": "system", "content": "SYSTEM"},
                {"role": "user", "content": '{"country":"France"}'},
            ],
        }

    @pytest.mark.asyncio
    async def test_custom_base_url(self, recording_transport) -> None:
        recorder = recording_transport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "{}"}}]})
        )
        config = _openai_config(base_url="http://localhost:11434/v1", api_key="ollama", model="llama3")
        client = create_chat_client(config, transport=recorder.transport)

        result = await client.complete("SYSTEM", "{}")

        assert result.text == "{}"
        assert result.usage_metadata is None
        assert str(recorder.requests[0].url) == "http://localhost:11434/v1/chat/completions"
        assert recorder.requests[0].headers["Authorization"] == "Bearer ollama"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[], "hello", 42])
    async def test_non_object_body(self, recording_transport, body) -> None:
        """Test that a JSON body that is not an object is an API error."""
        recorder = recording_transport(lambda request: httpx.Response(200, json=body))
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="Unexpected openai response format"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_null_content(self, recording_transport) -> None:
        recorder = recording_transport(
            lambda request: httpx.Response(
                200, json={"choices": [{"message": {"role": "assistant", "content": None}}]}
            )
        )
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="no text content"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_empty_choices(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(200, json={"choices": []}))
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="no choices"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_unexpected_body(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(200, json={"object": "list"}))
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="Unexpected openai response format"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(200, text="<html>"))
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="Invalid JSON"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, expected",
        [
            (401, AuthenticationError),
            (404, ModelUnavailableError),
            (429, RateLimitError),
            (502, ServerError),
            (400, ApiError),
        ],
    )
    async def test_http_errors(self, recording_transport, status: int, expected: type) -> None:
        recorder = recording_transport(
            lambda request: httpx.Response(status, json={"error": {"message": "nope"}})
        )
        client = create_chat_client(_openai_config(), transport=recorder.transport)

        with pytest.raises(expected) as exc_info:
            await client.complete("SYSTEM", "{}")

        assert exc_info.value.status == status
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_connection_error(self, recording_transport) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = create_chat_client(_openai_config(), transport=recording_transport(refuse).transport)

        with pytest.raises(NetworkError):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_timeout(self, recording_transport) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = create_chat_client(_openai_config(), transport=recording_transport(slow).transport)

        with pytest.raises(RequestTimeoutError):
            await client.complete("SYSTEM", "{}")


class TestAnthropicChatClient:
    """Test the Anthropic messages client."""

    @pytest.mark.asyncio
    async def test_sends_system_separately(self, recording_transport) -> None:
        recorder = recording_transport(
            lambda request: httpx.Response(200, json=anthropic_message(FRANCE_REPLY))
        )
        client = create_chat_client(_claude_config(max_tokens=300), transport=recorder.transport)

        result = await client.complete("SYSTEM", '{"country":"France"}')

        assert result.text == FRANCE_REPLY
        assert result.provider == ModelProvider.CLAUDE
        assert result.finish_reason == "end_turn"
        assert result.usage_metadata.total_token_count == 175

        request = recorder.requests[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-ant"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in request.headers
        assert recorder.last_json() == {
            "model": "claude-3-haiku-20240307",
            "max_tokens": 300,
            "system": "SYSTEM",
            "messages": [{"role": "user", "content": '{"country":"France"}'}],
        }

    @pytest.mark.asyncio
    async def test_skips_non_text_blocks(self, recording_transport) -> None:
        body = anthropic_message(FRANCE_REPLY)
        body["content"].insert(0, {"type": "thinking", "thinking": "..."})
        recorder = recording_transport(lambda request: httpx.Response(200, json=body))
        client = create_chat_client(_claude_config(), transport=recorder.transport)

        result = await client.complete("SYSTEM", "{}")

        assert result.text == FRANCE_REPLY

    @pytest.mark.asyncio
    async def test_non_object_body(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(200, json=["text"]))
        client = create_chat_client(_claude_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="Unexpected claude response format"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_no_text_content(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(200, json={"content": []}))
        client = create_chat_client(_claude_config(), transport=recorder.transport)

        with pytest.raises(ApiError, match="no text content"):
            await client.complete("SYSTEM", "{}")

    @pytest.mark.asyncio
    async def test_authentication_error(self, recording_transport) -> None:
        recorder = recording_transport(lambda request: httpx.Response(401, json={"type": "error"}))
        client = create_chat_client(_claude_config(), transport=recorder.transport)

        with pytest.raises(AuthenticationError) as exc_info:
            await client.complete("SYSTEM", "{}")

        assert exc_info.value.details["provider"] == "claude"
