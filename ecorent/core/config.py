# Standard library imports
import os
from typing import Final, List, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "ecorent")

        # JWT Configuration (tokens are issued by the account service)
        self.jwt_secret_key: Final[str] = os.getenv(
            "JWT_SECRET_KEY",
            os.getenv("JWT_SECRET", "change_this_secret_in_production"),
        )
        self.jwt_algorithm: Final[str] = os.getenv("JWT_ALGORITHM", "HS256")

        # Object storage (S3-compatible)
        self.aws_access_key_id: Final[Optional[str]] = os.getenv("AWS_ACCESS_KEY_ID")
        self.aws_secret_access_key: Final[Optional[str]] = os.getenv("AWS_SECRET_ACCESS_KEY")
        self.aws_region: Final[str] = os.getenv("AWS_REGION", "eu-central-1")
        self.s3_bucket_name: Final[str] = os.getenv("S3_BUCKET_NAME", "eco-rent-images")
        self.s3_endpoint_url: Final[Optional[str]] = os.getenv("S3_ENDPOINT_URL") or None
        self.s3_public_base_url: Final[Optional[str]] = os.getenv("S3_PUBLIC_BASE_URL") or None
        self.s3_connect_timeout_seconds: Final[float] = float(
            os.getenv("S3_CONNECT_TIMEOUT_SECONDS", "5")
        )
        self.s3_read_timeout_seconds: Final[float] = float(
            os.getenv("S3_READ_TIMEOUT_SECONDS", "30")
        )

        # Device rules
        self.device_max_images: Final[int] = int(os.getenv("DEVICE_MAX_IMAGES", "10"))
        self.require_policy_agreement: Final[bool] = _env_bool("REQUIRE_POLICY_AGREEMENT", "true")

        # HTTP
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
