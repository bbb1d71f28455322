"""Shared pytest fixtures for the auth service tests."""

import os

# app.main builds an app at import time and needs a signing key
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import PasswordHasher, TokenService
from app.main import create_app
from app.models.auth import RegisterRequest
from app.services.auth_service import AuthService
from app.services.user_store import UserStore

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings():
    # Lowest bcrypt cost keeps the suite fast
    return Settings(SECRET_KEY=TEST_SECRET, BCRYPT_ROUNDS=4, ACCESS_TOKEN_EXPIRE_MINUTES=5)


@pytest.fixture
def store():
    return UserStore()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(secret_key=TEST_SECRET, expire_minutes=5)


@pytest.fixture
def auth_service(store, hasher, tokens):
    return AuthService(store, hasher, tokens)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ana_payload():
    return {
        "firstName": "Ana",
        "lastName": "Diaz",
        "username": "anad",
        "email": "Ana@Test.com",
        "password": "secret1",
    }


@pytest.fixture
def ana_request(ana_payload):
    return RegisterRequest(**ana_payload)