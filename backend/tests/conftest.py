"""
Blog API - Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the whole suite.
How:   No network and no PostgreSQL: posts live in MemoryPostRepository (or a
       temporary SQLite file), and the identity provider's JWKS endpoint is an
       httpx.MockTransport serving a freshly generated RSA key.

Fixture Hierarchy:
    Session-scoped:
    ├── rsa_private_key: 2048-bit signing key for test tokens
    └── jwks_document: the matching public key as a JWKS

    Function-scoped:
    ├── make_token: mints RS256 tokens (issuer, kid, expiry overridable)
    ├── jwks_endpoint: callable MockTransport handler that counts fetches
    ├── token_verifier: real TokenVerifier over the mocked endpoint
    ├── memory_repository / post_service
    ├── app_factory: create_app() bound to test settings and verifier
    └── test_client: HTTPX AsyncClient on an app backed by memory_repository
"""

import json
import os
import tempfile
import time

# Must run before any blog_api import: Settings() reads the environment once
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="blog_api_test_"), "test.db"
)
os.environ["AUTH_DOMAIN"] = "test-tenant.example.com"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import jwt
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from jwt.algorithms import RSAAlgorithm

from blog_api.config import Settings
from blog_api.main import create_app
from blog_api.repositories.memory import MemoryPostRepository
from blog_api.services.auth_service import TokenVerifier
from blog_api.services.jwks_client import JwksClient
from blog_api.services.post_service import PostService

AUTH_DOMAIN = "test-tenant.example.com"
ISSUER = f"https://{AUTH_DOMAIN}/"
JWKS_URL = f"https://{AUTH_DOMAIN}/.well-known/jwks.json"
KID = "test-key-1"


# ══════════════════════════════════════════════════════════════════════════
# Session-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwks_document(rsa_private_key):
    """Public half of rsa_private_key, published under KID."""
    jwk = json.loads(RSAAlgorithm.to_jwk(rsa_private_key.public_key()))
    jwk.update({"kid": KID, "use": "sig", "alg": "RS256"})
    return {"keys": [jwk]}


# ══════════════════════════════════════════════════════════════════════════
# Identity Provider Fixtures
# ══════════════════════════════════════════════════════════════════════════

class JwksEndpoint:
    """MockTransport handler standing in for https://<domain>/.well-known/jwks.json."""

    def __init__(self, document):
        self.document = document
        self.status_code = 200
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return httpx.Response(self.status_code, json=self.document)


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def jwks_endpoint(jwks_document):
    return JwksEndpoint(json.loads(json.dumps(jwks_document)))


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest_asyncio.fixture
async def jwks_http_client(jwks_endpoint):
    async with httpx.AsyncClient(transport=httpx.MockTransport(jwks_endpoint)) as client:
        yield client


@pytest.fixture
def jwks_client(jwks_http_client):
    return JwksClient(JWKS_URL, http_client=jwks_http_client)


@pytest.fixture
def token_verifier(jwks_client):
    return TokenVerifier(jwks_client=jwks_client, issuer=ISSUER)


@pytest.fixture
def make_token(rsa_private_key):
    """
    Returns a function minting signed tokens.

    Usage:
        token = make_token()                           # valid
        token = make_token(issuer="https://evil/")     # wrong issuer
        token = make_token(expires_in=-60)             # expired
    """
    def _make(issuer=ISSUER, kid=KID, expires_in=3600, algorithm="RS256", key=None, **claims):
        now = int(time.time())
        payload = {
            "iss": issuer,
            "sub": "auth0|test-user",
            "iat": now,
            "exp": now + expires_in,
            **claims,
        }
        headers = {"kid": kid} if kid else None
        return jwt.encode(payload, key or rsa_private_key, algorithm=algorithm, headers=headers)

    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


# ══════════════════════════════════════════════════════════════════════════
# Post Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_post_fields():
    return {
        "title": "A",
        "description": "d",
        "body": "b",
        "author": "me",
        "date_posted": "2024-01-01",
    }


@pytest.fixture
def memory_repository():
    return MemoryPostRepository()


@pytest.fixture
def post_service(memory_repository):
    return PostService(memory_repository)


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings():
    return Settings(auth_domain=AUTH_DOMAIN, post_store="memory", log_level="WARNING")


@pytest.fixture
def app_factory(test_settings, token_verifier):
    """Returns create_app() bound to the test settings and verifier."""
    def _create(repository):
        return create_app(test_settings, repository=repository, verifier=token_verifier)

    return _create


@pytest_asyncio.fixture
async def test_client(app_factory, memory_repository):
    """
    HTTPX AsyncClient talking to an app backed by memory_repository.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/blog/posts")
            assert response.status_code == 200
    """
    app = app_factory(memory_repository)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
