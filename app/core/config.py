import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class AISettings(BaseModel):
    api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    provider: str = Field(default_factory=lambda: os.getenv("AI_PROVIDER", "openai"))
    base_url: str = Field(default_factory=lambda: os.getenv("AI_BASE_URL", "https://api.openai.com/v1/chat/completions"))
    model_name: str = Field(default_factory=lambda: os.getenv("AI_MODEL_NAME", "gpt-4o-mini"))
    fallback_model: Optional[str] = Field(default_factory=lambda: os.getenv("AI_FALLBACK_MODEL") or None)
    kill_switch: bool = Field(default_factory=lambda: os.getenv("AI_KILL_SWITCH", "false").lower() == "true")
    temperature: float = Field(default_factory=lambda: float(os.getenv("AI_TEMPERATURE", "0.3")))
    max_tokens: int = Field(default_factory=lambda: int(os.getenv("AI_MAX_TOKENS", "600")))
    timeout_seconds: float = Field(default_factory=lambda: float(os.getenv("AI_TIMEOUT_SECONDS", "30")))
    max_retries: int = Field(default_factory=lambda: int(os.getenv("AI_MAX_RETRIES", "2")))
    # Upper bound on the response text scanned for a JSON payload
    max_response_chars: int = Field(default_factory=lambda: int(os.getenv("AI_MAX_RESPONSE_CHARS", "20000")))

    @property
    def enabled(self) -> bool:
        """The AI path runs only with a credential and no active kill switch."""
        return bool(self.api_key) and not self.kill_switch

class Config(BaseModel):
    app_name: str = "Compensation Decision Engine"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./compensation.db")

    # AI Components
    ai: AISettings = Field(default_factory=AISettings)

    # Display
    currency_label: str = os.getenv("CURRENCY_LABEL", "Rs")

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:3001,"
                "http://127.0.0.1:3000,http://127.0.0.1:3001",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting (analysis fans out to the external reasoning service)
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
    analyze_rate_limit: str = os.getenv("ANALYZE_RATE_LIMIT", "10/minute")

settings = Config()

_logger = logging.getLogger(__name__)
if settings.ai.api_key and settings.ai.kill_switch:
    _logger.warning("AI kill switch is active; all suggestions will use the heuristic path.")
elif not settings.ai.api_key:
    _logger.info("OPENAI_API_KEY not set; suggestions will use the heuristic path.")
