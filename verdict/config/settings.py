from typing import Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "verdict"
    db_schema: Optional[str] = Field(default=None, validation_alias="DB_SCHEMA")
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class OpenAIConfig(BaseSettings):
    """Credentials and defaults for the speech-to-text and chat endpoints."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias="OPENAI_BASE_URL",
    )
    chat_model: str = Field(default="gpt-4", validation_alias="OPENAI_CHAT_MODEL")
    transcription_model: str = Field(
        default="whisper-1",
        validation_alias="OPENAI_TRANSCRIPTION_MODEL",
    )
    max_tokens: int = Field(
        default=300,
        validation_alias="OPENAI_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    request_timeout: float = Field(
        default=60.0,
        validation_alias="OPENAI_REQUEST_TIMEOUT",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranscriptionConfig(BaseSettings):
    """Audio preparation and retry settings for transcription."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=1.0, ge=0.0)
    min_duration_seconds: float = Field(default=0.1, ge=0.0)
    sample_rate_hz: int = 16000
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    temp_dir: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class StripeConfig(BaseSettings):
    """Stripe checkout configuration."""

    secret_key: SecretStr | None = Field(
        default=None,
        validation_alias="STRIPE_SECRET_KEY",
    )
    price_id: str = Field(
        default="price_H5ggYwtDq4fbrJ",
        validation_alias="STRIPE_PRICE_ID",
    )
    public_url: str = Field(
        default="http://localhost:5000",
        validation_alias="PUBLIC_URL",
    )
    success_path: str = Field(default="/success", validation_alias="STRIPE_SUCCESS_PATH")
    cancel_path: str = Field(default="/canceled", validation_alias="STRIPE_CANCEL_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Verdict API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "production"
    host: str = "0.0.0.0"
    port: int = 3000
    api_prefix: str = "/api"
    store_backend: Literal["memory", "database"] = "memory"
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # OpenAI (speech-to-text + chat)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Transcription pipeline
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)

    # Stripe
    stripe: StripeConfig = Field(default_factory=StripeConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def subscription_bypass(self) -> bool:
        """Development mode skips the paywall check on session submission."""

        return self.environment.strip().lower() == "development"


# Global settings instance
settings = Settings()
