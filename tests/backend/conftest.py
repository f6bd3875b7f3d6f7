import os

# Required settings must exist before vgen.config is imported
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ["STORAGE_BACKEND"] = "memory"

import json
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vgen.core.security import create_access_token, hash_password
from vgen.main import create_app
from vgen.models import User
from vgen.services.ai_client import GeminiClient
from vgen.storage.memory import MemoryStore


class FakeAI(GeminiClient):
    """
    GeminiClient whose replies are queued by the test.

    generate_json() is inherited, so queued JSON still goes through the real
    parsing and schema validation.
    """

    def __init__(self):
        super().__init__()
        self.replies: list = []
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    def queue(self, *replies) -> "FakeAI":
        for reply in replies:
            if isinstance(reply, (dict, list)):
                reply = json.dumps(reply)
            self.replies.append(reply)
        return self

    async def generate_completion(self, prompt, max_tokens=None, temperature=None):
        self.prompts.append(prompt)
        self.calls.append({"max_tokens": max_tokens, "temperature": temperature})
        if not self.replies:
            raise AssertionError(f"Unexpected model call: {prompt[:80]!r}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def ai():
    return FakeAI()


@pytest.fixture
def app(store, ai):
    return create_app(store=store, ai=ai)


@pytest_asyncio.fixture
async def client(app):
    """
    Provide an HTTPX AsyncClient bound to a fresh app (memory store, fake AI).
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(store):
    """
    Factory fixture to create users directly in the store.
    """

    async def _create_user(
        password: str = "UserPass!23",
        role: str = "user",
        email: str | None = None,
        **fields,
    ) -> tuple[User, str]:
        user = await store.users.create(User(
            email=email or f"user_{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            first_name="Test",
            last_name="User",
            role=role,
            **fields,
        ))
        return user, password

    return _create_user


def _auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def auth_header_factory():
    """
    Helper fixture to build Authorization headers for a stored user.
    """
    return _auth_headers


@pytest_asyncio.fixture
async def user(create_user):
    created, _ = await create_user()
    return created


@pytest_asyncio.fixture
async def headers(user):
    return _auth_headers(user)


@pytest_asyncio.fixture
async def admin_headers(create_user):
    admin, _ = await create_user(role="admin")
    return _auth_headers(admin)
