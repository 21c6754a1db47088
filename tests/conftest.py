"""Pytest configuration and fixtures."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

from tests.fakes import FakeSummarizer, FakeSupabase, FakeTranscoder, FakeTranscriber
from vdfy.api.app import create_app
from vdfy.core.config import Settings
from vdfy.services.container import ServiceContainer

JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"
JWT_AUDIENCE = "authenticated"
STORAGE_BASE = "https://project.supabase.test/storage/v1/object/public/recordings"
USERINFO_URL = "https://idp.test/userinfo"


class FakeWeb:
    """Routes for `httpx.MockTransport`, keyed by full URL."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add_text(self, url: str, text: str, status_code: int = 200) -> None:
        self.routes[url] = lambda _request: httpx.Response(status_code, text=text)

    def add_json(self, url: str, payload: object, status_code: int = 200) -> None:
        self.routes[url] = lambda _request: httpx.Response(status_code, json=payload)

    def add_redirect(self, url: str, location: str, status_code: int = 302) -> None:
        self.routes[url] = lambda _request: httpx.Response(status_code, headers={"Location": location})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)


def make_token(sub: str = "user-1", email: str | None = "user@example.com", secret: str = JWT_SECRET) -> str:
    claims: dict[str, object] = {"sub": sub, "aud": JWT_AUDIENCE, "exp": int(time.time()) + 3600}
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Local-JWT settings pointing every path at the test's temp dir."""
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.test",
        supabase_secret_key="service-role",
        supabase_jwt_secret=JWT_SECRET,
        supabase_jwt_audience=JWT_AUDIENCE,
        supabase_auth_mode="local",
        supabase_bucket="recordings",
        storage_public_base_url=STORAGE_BASE,
        oauth_userinfo_url=USERINFO_URL,
        groq_api_key="groq-test",
        openrouter_api_key="openrouter-test",
        public_app_url="https://vdfy.test",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def services(settings, supabase, web, transcoder, transcriber, summarizer) -> ServiceContainer:
    return ServiceContainer(
        settings=settings,
        supabase=supabase,  # type: ignore[arg-type]
        http=httpx.AsyncClient(transport=httpx.MockTransport(web.handle), follow_redirects=True),
        transcode=transcoder,
        transcribe=transcriber,
        summarize=summarizer,
    )


@pytest.fixture
def client(settings, services) -> Iterator[TestClient]:
    """TestClient over the full app, with the lifespan using the injected fakes."""
    app = create_app(settings=settings, services=services)
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def token() -> str:
    return make_token()
