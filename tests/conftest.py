"""
Shared pytest fixtures for the Eco-Rent backend tests.
"""
import os
import time
from unittest.mock import AsyncMock, MagicMock, patch

import jwt
import pytest


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_ecorent",
        "JWT_SECRET_KEY": "test_secret_key_for_testing_only",
        "S3_BUCKET_NAME": "test-images",
        "AWS_REGION": "eu-central-1",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def mock_settings():
    """Fixture to mock get_settings for tests. Patches all modules that use it."""
    mock = MagicMock()
    mock.mongo_uri = "mongodb://localhost:27017"
    mock.mongo_database_name = "test_db"
    mock.jwt_secret_key = "test_jwt_secret"
    mock.jwt_algorithm = "HS256"
    mock.s3_bucket_name = "test-images"
    mock.aws_region = "eu-central-1"
    mock.device_max_images = 10
    mock.require_policy_agreement = True
    mock.cors_origins = ["*"]

    # Patch at source and at use sites (modules import get_settings at load time)
    with patch("ecorent.core.config.get_settings", return_value=mock), patch(
        "ecorent.core.security.get_settings", return_value=mock
    ):
        yield mock


@pytest.fixture
def device_repo():
    """Mock DeviceRepository with async methods."""
    return AsyncMock()


@pytest.fixture
def object_storage():
    """Mock ObjectStorageGateway with async methods."""
    return AsyncMock()


@pytest.fixture
def issue_token(mock_settings):
    """Build bearer tokens shaped like the account service's (id, name, surname, two-day lifetime)."""
    def _issue(payload, expires_in_seconds=2 * 24 * 60 * 60):
        issued_at = int(time.time())
        claims = {**payload, "iat": issued_at, "exp": issued_at + expires_in_seconds}
        return jwt.encode(claims, mock_settings.jwt_secret_key, algorithm=mock_settings.jwt_algorithm)

    return _issue
