"""Application configuration."""
from collections import Counter
from functools import lru_cache
import math

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Chirpy"
    debug: bool = False
    log_level: str = "INFO"
    platform: str = ""  # "dev" unlocks the admin reset endpoint
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str = "sqlite:///./data/chirpy.db"

    # Auth
    secret_key: str
    access_token_expire_seconds: int = 3600
    refresh_token_expire_days: int = 60

    # Webhooks
    polka_key: str

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str) -> str:
        """Fail closed if SECRET_KEY is weak or placeholder quality."""
        if not value:
            raise ValueError("SECRET_KEY must be set.")

        if len(value) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")

        weak_values = {"changeme", "changeme-in-production", "secret", "password", "test"}
        lowered = value.lower()
        if lowered in weak_values or "changeme" in lowered:
            raise ValueError("SECRET_KEY must not be a placeholder value.")

        counts = Counter(value)
        entropy_per_char = -sum((count / len(value)) * math.log2(count / len(value)) for count in counts.values())
        estimated_entropy_bits = entropy_per_char * len(value)
        if estimated_entropy_bits < 100:
            raise ValueError("SECRET_KEY entropy is too low; use a cryptographically random value.")

        return value

    @field_validator("access_token_expire_seconds")
    @classmethod
    def validate_access_token_ttl(cls, value: int) -> int:
        """Session tokens live for at most one hour."""
        if value <= 0 or value > 3600:
            raise ValueError("ACCESS_TOKEN_EXPIRE_SECONDS must be between 1 and 3600.")
        return value

    @field_validator("polka_key")
    @classmethod
    def validate_polka_key(cls, value: str) -> str:
        if not value:
            raise ValueError("POLKA_KEY must be set.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
