import logging
import warnings

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    environment: str = "development"  # development | test | production

    # Server
    speechdesk_host: str = "0.0.0.0"
    speechdesk_port: int = 8000

    # ElevenLabs vendor API (credential never leaves the server)
    elevenlabs_api_key: str = ""
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    vendor_timeout_seconds: float = 60.0

    # Synthesis defaults
    default_model_id: str = "eleven_turbo_v2"
    default_stability: float = 0.5
    default_similarity_boost: float = 0.5
    max_text_length: int = 1000

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Rate Limiting
    rate_limit_per_minute: int = 30  # req/min per client IP on /api/*

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

_logger = logging.getLogger("speechdesk.config")


def validate_security_posture(cfg: Settings) -> None:
    is_prod = cfg.environment.lower() in {"production", "prod"}

    if not cfg.elevenlabs_api_key:
        if is_prod:
            raise RuntimeError(
                "FATAL: ELEVENLABS_API_KEY is not set. "
                "Provide the vendor credential via the ELEVENLABS_API_KEY environment variable "
                "before deploying to production."
            )
        warnings.warn(
            "ELEVENLABS_API_KEY is not set. Vendor calls will be rejected until a key is configured.",
            stacklevel=1,
        )

    if cfg.cors_origins == "*":
        if is_prod:
            raise RuntimeError(
                "FATAL: CORS_ORIGINS cannot be '*' in production. "
                "Set explicit trusted origins via the CORS_ORIGINS environment variable."
            )
        _logger.warning(
            "CORS_ORIGINS is set to '*' (allow all). "
            "Configure specific origins for production via the CORS_ORIGINS environment variable."
        )


validate_security_posture(settings)
