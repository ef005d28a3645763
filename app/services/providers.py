"""Text-generation providers behind one interface.

Each adapter turns a (system prompt, user prompt) pair into a single-turn
completion and reports the outcome as a ProviderResult instead of raising, so
callers decide whether a failure is surfaced or replaced with a default.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import anthropic
import boto3
import openai
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from app.core.config import Settings

logger = logging.getLogger(__name__)

BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"


class ProviderErrorKind(str, Enum):
    CONFIGURATION = "configuration"  # credentials missing
    FAILURE = "failure"  # call raised (network, auth, quota, ...)
    UNPARSABLE = "unparsable"  # call succeeded but no text could be extracted


@dataclass(frozen=True)
class ProviderResult:
    text: str | None = None
    error: ProviderErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "ProviderResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: ProviderErrorKind, message: str) -> "ProviderResult":
        return cls(error=kind, message=message)


class TextProvider(Protocol):
    name: str

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        ...


class UnconfiguredProvider:
    """Stands in for a backend whose credentials are missing."""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        return ProviderResult.failure(ProviderErrorKind.CONFIGURATION, self.message)


class AnthropicProvider:
    name = "anthropic"

    def __init__(self, settings: Settings, client: Any = None):
        self.client = client or anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.model = settings.anthropic_model
        self.max_tokens = settings.ai_max_tokens
        self.temperature = settings.ai_temperature

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        logger.info("Anthropic request: model=%s prompt_len=%d", self.model, len(user_prompt))
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.AuthenticationError as exc:
            logger.warning("Anthropic rejected credentials: %s", exc)
            return ProviderResult.failure(
                ProviderErrorKind.FAILURE, "Anthropic API key is invalid or not configured properly."
            )
        except anthropic.APIError as exc:
            logger.warning("Anthropic call failed: %s", exc)
            return ProviderResult.failure(ProviderErrorKind.FAILURE, f"Anthropic request failed: {exc}")

        text = "".join(
            block.text for block in (message.content or []) if getattr(block, "type", None) == "text"
        )
        if not text:
            return ProviderResult.failure(ProviderErrorKind.UNPARSABLE, "Anthropic returned no text content")
        return ProviderResult.success(text)


class OpenAIProvider:
    name = "openai"

    def __init__(self, settings: Settings, client: Any = None):
        self.client = client or openai.AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = settings.openai_model
        self.max_tokens = settings.ai_max_tokens
        self.temperature = settings.ai_temperature

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        logger.info("OpenAI request: model=%s prompt_len=%d", self.model, len(user_prompt))
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as exc:
            logger.warning("OpenAI call failed: %s", exc)
            return ProviderResult.failure(ProviderErrorKind.FAILURE, f"OpenAI request failed: {exc}")

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError):
            text = None
        if not text:
            return ProviderResult.failure(ProviderErrorKind.UNPARSABLE, "OpenAI returned no message content")
        return ProviderResult.success(text)


class BedrockProvider:
    """Claude on AWS Bedrock via the bedrock-runtime invoke_model API."""

    name = "bedrock"

    def __init__(self, settings: Settings, client: Any = None):
        self.client = client or boto3.client(
            "bedrock-runtime",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        self.model_id = settings.bedrock_model_id
        self.max_tokens = settings.ai_max_tokens
        self.temperature = settings.ai_temperature

    def _body(self, system_prompt: str, user_prompt: str) -> str:
        return json.dumps(
            {
                "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
                "max_tokens": self.max_tokens,
                "temperature": self.temperature,
                "system": system_prompt,
                "messages": [{"role": "user", "content": [{"type": "text", "text": user_prompt}]}],
            }
        )

    def _invoke(self, body: str) -> dict:
        response = self.client.invoke_model(
            modelId=self.model_id,
            contentType="application/json",
            accept="application/json",
            body=body,
        )
        # StreamingBody.read() is socket I/O too
        return json.loads(response["body"].read())

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        logger.info("Bedrock request: model=%s prompt_len=%d", self.model_id, len(user_prompt))
        try:
            # boto3 is blocking; keep it off the event loop
            payload = await asyncio.to_thread(self._invoke, self._body(system_prompt, user_prompt))
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            logger.warning("Bedrock call failed (%s): %s", code, exc)
            if code in ("UnrecognizedClientException", "AccessDeniedException"):
                return ProviderResult.failure(
                    ProviderErrorKind.FAILURE,
                    "AWS Bedrock API credentials are invalid. Please check your AWS configuration.",
                )
            return ProviderResult.failure(ProviderErrorKind.FAILURE, f"Bedrock request failed: {exc}")
        except BotoCoreError as exc:
            logger.warning("Bedrock call failed: %s", exc)
            return ProviderResult.failure(ProviderErrorKind.FAILURE, f"Bedrock request failed: {exc}")
        except (ValueError, KeyError) as exc:
            return ProviderResult.failure(ProviderErrorKind.UNPARSABLE, f"Bedrock response was not valid JSON: {exc}")

        try:
            text = payload["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            return ProviderResult.failure(ProviderErrorKind.UNPARSABLE, "Bedrock returned no text content")
        return ProviderResult.success(text)


def build_text_provider(settings: Settings) -> TextProvider:
    """Pick the configured backend; missing credentials yield an UnconfiguredProvider."""
    if settings.ai_provider == "openai":
        if not settings.openai_api_key:
            return UnconfiguredProvider("openai", "OpenAI API key is not configured")
        return OpenAIProvider(settings)
    if settings.ai_provider == "bedrock":
        if not (settings.aws_access_key_id and settings.aws_secret_access_key and settings.aws_region):
            return UnconfiguredProvider("bedrock", "AWS Bedrock credentials are not configured")
        return BedrockProvider(settings)
    if not settings.anthropic_api_key:
        return UnconfiguredProvider("anthropic", "Anthropic API key is not configured")
    return AnthropicProvider(settings)


def get_text_provider(request: Request) -> TextProvider:
    return request.app.state.text_provider
