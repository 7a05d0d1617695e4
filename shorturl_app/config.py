from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shorturl_app.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Auth (no default - the service refuses to start without it)
    token: str = Field(..., min_length=1)

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Identifier generation
    id_length: int = Field(3, ge=1)

    # Storage settings
    storage: str = "memory"  # "redis", anything else means in-memory
    redis_url: str = "redis://localhost:6379/0"
    memory_max_keys: int = 0  # 0 = unlimited

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("id_length", mode="before")
    @classmethod
    def empty_id_length_means_default(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return 3
        return value

    @field_validator("storage", mode="before")
    @classmethod
    def normalize_storage(cls, value):
        return "redis" if value == "redis" else "memory"


def load_settings(**overrides) -> Settings:
    """
    Build Settings, turning validation problems into ConfigurationError.

    The messages mirror the environment variable names so operators know
    what to fix.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "settings"
        name = field.upper()
        if item["type"] in ("missing", "string_too_short"):
            problems.append(f"environment variable {name} is missing")
        elif item["type"] in ("int_parsing", "int_from_float", "int_type"):
            problems.append(f"environment variable {name} is not a number")
        else:
            problems.append(f"environment variable {name} is invalid: {item['msg']}")
    return "; ".join(problems)

