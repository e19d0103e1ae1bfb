"""
Shared pytest fixtures for authchain tests.

This module provides common fixtures including:
- Request builders producing Starlette requests without a server
- JWT minting helpers with a shared test secret
- Ready-made JWT and local strategies mirroring typical integrations
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Tuple
from urllib.parse import urlencode

import jwt
import pytest
from fastapi import Request

from authchain.modules.strategy import (
    AuthenticationError,
    Credentials,
    JWTStrategy,
    LocalStrategy,
    create_secret_key_func,
)

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# =============================================================================
# Request Builders
# =============================================================================

def make_request(
    method: str = "GET",
    path: str = "/login",
    headers: Optional[Iterable[Tuple[str, str]]] = None,
    body: bytes = b"",
) -> Request:
    """
    Build a Request over an in-memory receive channel.

    The body is delivered once; later receives report a disconnect, like a
    real server would.
    """
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "server": ("testserver", 80),
        "client": ("testclient", 50000),
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or [])
        ],
    }
    delivered = False

    async def receive():
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    return Request(scope, receive)


def make_bearer_request(token: str) -> Request:
    """Build a GET request carrying a bearer token."""
    return make_request(headers=[("Authorization", f"Bearer {token}")])


def make_form_request(fields: Dict[str, str]) -> Request:
    """Build a POST request with a urlencoded form body."""
    return make_request(
        method="POST",
        headers=[("Content-Type", FORM_CONTENT_TYPE)],
        body=urlencode(fields).encode(),
    )


def make_json_request(data: Any) -> Request:
    """Build a POST request with a JSON body."""
    return make_request(
        method="POST",
        headers=[("Content-Type", "application/json")],
        body=json.dumps(data).encode(),
    )


def create_test_jwt(claims: dict, secret: str = TEST_SECRET, headers: Optional[dict] = None) -> str:
    """Create a test JWT token."""
    return jwt.encode(claims, secret, algorithm="HS256", headers=headers)


# =============================================================================
# Claims Fixtures
# =============================================================================

@pytest.fixture
def valid_claims():
    """Claims of a token that is accepted by verify_test_user."""
    now = datetime.now(timezone.utc)
    return {
        "user": "test",
        "sub": "user-123",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }


@pytest.fixture
def expired_claims():
    """Claims of a token that expired an hour ago."""
    now = datetime.now(timezone.utc)
    return {
        "user": "test",
        "iat": int((now - timedelta(hours=2)).timestamp()),
        "exp": int((now - timedelta(hours=1)).timestamp()),
    }


@pytest.fixture
def invalid_user_claims(valid_claims):
    """Claims with a user the verifier does not accept."""
    return {**valid_claims, "user": "fail"}


# =============================================================================
# Strategy Fixtures
# =============================================================================

def verify_test_user(claims: dict) -> None:
    """Claims verifier accepting only the "test" user."""
    if claims.get("user") != "test":
        raise ValueError("not valid user")


def verify_test_credentials(credentials: Credentials) -> None:
    """Credential verifier accepting test/test."""
    if credentials.username != "test" or credentials.password != "test":
        raise ValueError("wrong username or password")


@pytest.fixture
def jwt_strategy():
    """JWT strategy keyed by the shared test secret."""
    return JWTStrategy(
        verify=verify_test_user,
        key_func=create_secret_key_func(TEST_SECRET),
    )


@pytest.fixture
def local_strategy():
    """Local strategy with default form lookup."""
    return LocalStrategy(verify=verify_test_credentials)


class FakeStrategy:
    """Strategy whose outcome is controlled by the test."""

    def __init__(self, success: bool = False, message: str = "Authenticate failed"):
        self.success = success
        self.message = message
        self.calls = 0

    async def authenticate(self, request: Request) -> None:
        self.calls += 1
        if not self.success:
            raise AuthenticationError(self.message)

    def make_success(self, flag: bool) -> None:
        self.success = flag


@pytest.fixture
def fake_strategy():
    """A failing FakeStrategy; flip with make_success(True)."""
    return FakeStrategy()
