"""
SDP Bridge - Configuration Management
"""
import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Plain stdlib logger: utils.logger depends on this module
logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEYS = (
    "your_api_key",
    "your_key",
    "placeholder",
    "xxx",
    "changeme",
)


class LogSettings(BaseSettings):
    """Logging settings (usable before the SDP settings are known)"""

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


class Settings(LogSettings):
    """Application settings"""

    # ServiceDesk Plus
    sdp_base_url: str
    sdp_api_key: SecretStr
    sdp_timeout_seconds: float = Field(30.0, gt=0)
    # Base of the remote start_index; caller offsets are always 0-based
    sdp_list_start_index: int = Field(1, ge=0, le=1)

    # HTTP surface
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @field_validator("sdp_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Trim, drop the trailing slash and require an http(s) scheme"""
        url = v.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError("SDP_BASE_URL must start with http:// or https://")
        return url

    @field_validator("sdp_api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Reject blank and placeholder keys"""
        key = v.get_secret_value().strip()
        if not key:
            raise ValueError("SDP_API_KEY must not be empty")
        lowered = key.lower()
        for pattern in PLACEHOLDER_API_KEYS:
            if pattern in lowered:
                raise ValueError("SDP_API_KEY appears to be a placeholder value")
        return SecretStr(key)

    @model_validator(mode="after")
    def warn_on_plain_http(self) -> "Settings":
        if not self.sdp_base_url.startswith("https://"):
            logger.warning(
                "SDP_BASE_URL does not use https://; the API key will travel unencrypted"
            )
        return self


@lru_cache()
def get_log_settings() -> LogSettings:
    """Get cached logging settings instance"""
    return LogSettings()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
