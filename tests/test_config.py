"""
Tests for settings and the Parameter Store secret lookup.
"""
import pytest
from moto import mock_aws
import boto3
from src.core import config
from src.core.parameter_store import clear_parameter_cache, get_parameter


class TestSettings:
    """Test suite for Settings."""

    @pytest.fixture(autouse=True)
    def clear_cache(self, aws_credentials):
        clear_parameter_cache()
        yield
        clear_parameter_cache()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CDN_STORAGE_ROOT", "assets")
        monkeypatch.setenv("MAX_CHUNK_SIZE_MB", "5")

        settings = config.Settings()

        assert settings.cdn_storage_root == "assets"
        assert settings.max_chunk_size_mb == 5

    def test_jwt_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("USE_PARAMETER_STORE", "false")
        monkeypatch.setenv("JWT_SECRET", "local-secret")

        assert config.Settings().jwt_secret == "local-secret"

    def test_jwt_secret_parameter_name(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "prod")

        assert config.Settings().jwt_secret_parameter == "/media-upload-api/prod/jwt-secret"

    @mock_aws
    def test_jwt_secret_from_parameter_store(self, monkeypatch):
        monkeypatch.setenv("USE_PARAMETER_STORE", "true")
        monkeypatch.setenv("ENVIRONMENT", "test")
        ssm = boto3.client("ssm", region_name="us-east-1")
        ssm.put_parameter(
            Name="/media-upload-api/test/jwt-secret",
            Value="from-ssm",
            Type="SecureString"
        )

        assert config.Settings().jwt_secret == "from-ssm"

    @mock_aws
    def test_jwt_secret_falls_back_when_parameter_missing(self, monkeypatch):
        monkeypatch.setenv("USE_PARAMETER_STORE", "true")
        monkeypatch.setenv("JWT_SECRET", "fallback-secret")

        assert config.Settings().jwt_secret == "fallback-secret"

    @mock_aws
    def test_get_parameter_is_cached(self):
        ssm = boto3.client("ssm", region_name="us-east-1")
        ssm.put_parameter(Name="/media-upload-api/dev/jwt-secret", Value="v1", Type="SecureString")
        assert get_parameter("/media-upload-api/dev/jwt-secret") == "v1"

        ssm.put_parameter(Name="/media-upload-api/dev/jwt-secret", Value="v2", Type="SecureString", Overwrite=True)
        assert get_parameter("/media-upload-api/dev/jwt-secret") == "v1"

        clear_parameter_cache()
        assert get_parameter("/media-upload-api/dev/jwt-secret") == "v2"
