from functools import lru_cache
import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INVOICE_MODES = ("live", "demo", "auto")

# Literals shipped in .env templates; never a usable key.
PLACEHOLDER_API_KEYS = frozenset(
    {
        "your_gemini_api_key_here",
        "your_google_gemini_api_key",
        "your-api-key",
        "changeme",
        "placeholder",
    }
)


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        validate_by_name=True,
        populate_by_name=True,
    )
    environment: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT"))

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    ai_gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    ai_invoice_mode: str = Field(default="live", validation_alias=AliasChoices("AI_INVOICE_MODE"))
    ai_invoice_model: str = "gemini-1.5-flash"
    ai_invoice_timeout_seconds: float = 30.0
    ai_debug_store_raw: bool = False

    rate_limit_api_enabled: bool = False
    rate_limit_api_per_min: int = 60

    security_headers_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("SECURITY_HEADERS_ENABLED", "SECURE_HEADERS_ENABLED"),
    )

    trusted_proxy_cidrs_raw: str = Field(
        default="",
        validation_alias=AliasChoices("TRUSTED_PROXY_CIDRS"),
    )

    cors_allow_origins: list[str] = Field(default_factory=list)
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["Content-Type", "Accept"])

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("ai_invoice_mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value):
        mode = str(value or "live").strip().lower()
        if mode not in INVOICE_MODES:
            raise ValueError(f"AI_INVOICE_MODE must be one of {', '.join(INVOICE_MODES)}, got {value!r}")
        return mode

    @property
    def trusted_proxy_cidrs(self) -> list[str]:
        return _parse_list_value(self.trusted_proxy_cidrs_raw)

    @property
    def has_gemini_credentials(self) -> bool:
        key = self.gemini_api_key.strip()
        return bool(key) and key.lower() not in PLACEHOLDER_API_KEYS

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"production", "prod"}

    def validate_required_config(self) -> list[str]:
        errors: list[str] = []
        if self.ai_invoice_mode == "live" and not self.has_gemini_credentials:
            errors.append("GOOGLE_GEMINI_API_KEY is missing while AI_INVOICE_MODE=live")
        if self.ai_invoice_timeout_seconds <= 0:
            errors.append("AI_INVOICE_TIMEOUT_SECONDS must be positive")
        if self.rate_limit_api_enabled and self.rate_limit_api_per_min <= 0:
            errors.append("RATE_LIMIT_API_PER_MIN must be positive when rate limiting is enabled")
        return errors


@lru_cache
def get_settings() -> Settings:
    return Settings()
