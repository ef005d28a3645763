"""
Standup Tracker - test configuration and fixtures.

Each test gets its own app bound to a throwaway SQLite file; authenticated
clients carry a signed auth cookie minted for a fixture user.
"""
import io
import json
import threading
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport

from app.core.config import Settings
from app.core.security import create_session_token, hash_password
from app.db.base import Base
from app.main import create_app
from app.models.user import User
from app.services.providers import ProviderResult

TEST_PASSWORD = "testpassword123"


class FakeProvider:
    """Records prompts and replays a canned ProviderResult."""

    name = "fake"

    def __init__(self, result: ProviderResult):
        self.result = result
        self.calls: list[tuple[str, str]] = []

    async def generate_text(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        self.calls.append((system_prompt, user_prompt))
        return self.result


class FakeAnthropicMessages:
    """Stands in for ``AsyncAnthropic().messages``."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


class FakeOpenAICompletions(FakeAnthropicMessages):
    """Stands in for ``AsyncOpenAI().chat.completions``."""


class RecordingBody(io.BytesIO):
    """Response body that remembers which thread read it."""

    read_thread: int | None = None

    def read(self, *args):
        self.read_thread = threading.get_ident()
        return super().read(*args)


class FakeBedrockClient:
    """Stands in for a boto3 ``bedrock-runtime`` client."""

    def __init__(self, payload=None, error=None):
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        self.body = RecordingBody(raw)
        self.error = error
        self.kwargs = None

    def invoke_model(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return {"body": self.body}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret-key-for-testing-only",
        ai_provider="anthropic",
        anthropic_api_key=None,
        openai_api_key=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    application.dependency_overrides.clear()
    await application.state.engine.dispose()


async def create_user(app, username: str, user_id: int | None = None) -> User:
    async with app.state.sessionmaker() as session:
        user = User(id=user_id, username=username, hashed_password=hash_password(TEST_PASSWORD))
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


def make_client(app, user: User | None = None, raise_app_exceptions: bool = True) -> AsyncClient:
    headers = {}
    if user is not None:
        settings = app.state.settings
        headers["Cookie"] = f"{settings.auth_cookie_name}={create_session_token(user.id, settings)}"
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return AsyncClient(transport=transport, base_url="http://test", headers=headers)


@pytest.fixture
async def alice(app) -> User:
    return await create_user(app, "alice", user_id=7)


@pytest.fixture
async def bob(app) -> User:
    return await create_user(app, "bob")


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client."""
    async with make_client(app) as ac:
        yield ac


@pytest.fixture
async def alice_client(app, alice) -> AsyncGenerator[AsyncClient, None]:
    async with make_client(app, alice) as ac:
        yield ac


@pytest.fixture
async def bob_client(app, bob) -> AsyncGenerator[AsyncClient, None]:
    async with make_client(app, bob) as ac:
        yield ac
