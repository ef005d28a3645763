"""
Tests for provider selection and the SDK adapters (fake SDK clients, no network)
"""
import json
import threading
from types import SimpleNamespace

import httpx
import pytest
from botocore.exceptions import ClientError

import anthropic
import openai

from app.core.config import Settings
from app.services.providers import (
    AnthropicProvider,
    BedrockProvider,
    OpenAIProvider,
    ProviderErrorKind,
    UnconfiguredProvider,
    build_text_provider,
)
from tests.conftest import FakeAnthropicMessages, FakeBedrockClient, FakeOpenAICompletions


def make_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        anthropic_api_key=None,
        openai_api_key=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
    )
    values.update(overrides)
    return Settings(**values)


class TestBuildTextProvider:

    @pytest.mark.parametrize("backend", ["anthropic", "openai", "bedrock"])
    def test_missing_credentials_yield_unconfigured(self, backend):
        provider = build_text_provider(make_settings(ai_provider=backend))
        assert isinstance(provider, UnconfiguredProvider)
        assert provider.name == backend

    def test_anthropic_selected(self):
        provider = build_text_provider(make_settings(ai_provider="anthropic", anthropic_api_key="sk-test"))
        assert isinstance(provider, AnthropicProvider)

    def test_openai_selected(self):
        provider = build_text_provider(make_settings(ai_provider="openai", openai_api_key="sk-test"))
        assert isinstance(provider, OpenAIProvider)

    def test_bedrock_selected(self):
        provider = build_text_provider(
            make_settings(ai_provider="bedrock", aws_access_key_id="AKIA", aws_secret_access_key="secret")
        )
        assert isinstance(provider, BedrockProvider)

    @pytest.mark.asyncio
    async def test_unconfigured_reports_configuration_error(self):
        result = await UnconfiguredProvider("openai", "OpenAI API key is not configured").generate_text("s", "u")
        assert not result.ok
        assert result.error is ProviderErrorKind.CONFIGURATION
        assert result.message == "OpenAI API key is not configured"


class TestAnthropicProvider:

    @pytest.mark.asyncio
    async def test_success(self):
        messages = FakeAnthropicMessages(
            response=SimpleNamespace(content=[SimpleNamespace(type="text", text="Insightful.")])
        )
        provider = AnthropicProvider(make_settings(), client=SimpleNamespace(messages=messages))

        result = await provider.generate_text("system", "user")

        assert result.ok and result.text == "Insightful."
        assert messages.kwargs["system"] == "system"
        assert messages.kwargs["messages"] == [{"role": "user", "content": "user"}]

    @pytest.mark.asyncio
    async def test_api_error_is_failure(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        messages = FakeAnthropicMessages(error=anthropic.APIConnectionError(request=request))
        provider = AnthropicProvider(make_settings(), client=SimpleNamespace(messages=messages))

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.FAILURE

    @pytest.mark.asyncio
    async def test_empty_content_is_unparsable(self):
        messages = FakeAnthropicMessages(response=SimpleNamespace(content=[]))
        provider = AnthropicProvider(make_settings(), client=SimpleNamespace(messages=messages))

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.UNPARSABLE


class TestOpenAIProvider:

    @pytest.mark.asyncio
    async def test_success_sends_system_message(self):
        completions = FakeOpenAICompletions(
            response=SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Hi"))])
        )
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        provider = OpenAIProvider(make_settings(), client=client)

        result = await provider.generate_text("system", "user")

        assert result.ok and result.text == "Hi"
        assert completions.kwargs["messages"][0] == {"role": "system", "content": "system"}

    @pytest.mark.asyncio
    async def test_sdk_error_is_failure(self):
        completions = FakeOpenAICompletions(error=openai.OpenAIError("quota exceeded"))
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        provider = OpenAIProvider(make_settings(), client=client)

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.FAILURE
        assert "quota exceeded" in result.message

    @pytest.mark.asyncio
    async def test_no_choices_is_unparsable(self):
        completions = FakeOpenAICompletions(response=SimpleNamespace(choices=[]))
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        provider = OpenAIProvider(make_settings(), client=client)

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.UNPARSABLE


class TestBedrockProvider:

    @pytest.mark.asyncio
    async def test_success_and_request_body(self):
        client = FakeBedrockClient(payload={"content": [{"type": "text", "text": "From Claude"}]})
        provider = BedrockProvider(make_settings(), client=client)

        result = await provider.generate_text("system", "user")

        assert result.ok and result.text == "From Claude"
        body = json.loads(client.kwargs["body"])
        assert body["anthropic_version"] == "bedrock-2023-05-31"
        assert body["system"] == "system"
        assert body["messages"][0]["content"][0]["text"] == "user"

    @pytest.mark.asyncio
    async def test_access_denied_is_failure(self):
        error = ClientError({"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "InvokeModel")
        provider = BedrockProvider(make_settings(), client=FakeBedrockClient(error=error))

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.FAILURE
        assert "credentials are invalid" in result.message

    @pytest.mark.asyncio
    async def test_bad_json_is_unparsable(self):
        provider = BedrockProvider(make_settings(), client=FakeBedrockClient(payload=b"<html>"))

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.UNPARSABLE

    @pytest.mark.asyncio
    async def test_missing_content_is_unparsable(self):
        provider = BedrockProvider(make_settings(), client=FakeBedrockClient(payload={"content": []}))

        result = await provider.generate_text("system", "user")

        assert result.error is ProviderErrorKind.UNPARSABLE

    @pytest.mark.asyncio
    async def test_body_is_read_off_the_event_loop(self):
        client = FakeBedrockClient(payload={"content": [{"type": "text", "text": "ok"}]})
        provider = BedrockProvider(make_settings(), client=client)

        result = await provider.generate_text("system", "user")

        assert result.ok
        assert client.body.read_thread is not None
        assert client.body.read_thread != threading.get_ident()
