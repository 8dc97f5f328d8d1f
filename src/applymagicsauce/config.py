"""
Client Configuration
====================
Settings for the Apply Magic Sauce client, loaded from arguments,
environment variables or a ``.env`` file.
"""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.applymagicsauce.com"


class MagicSauceConfig(BaseSettings):
    """
    Configuration for the Apply Magic Sauce client.

    Attributes:
        api_url: Base URL of the API
        api_key: Default API key, used when ``authenticate`` is called
            without one and for automatic token renewal
        customer_id: Default customer identifier for ``authenticate``
        timeout: Deadline in seconds for a whole request, also the limit
            for each connect, write and read step
        user_agent: Value of the User-Agent header
    """

    model_config = SettingsConfigDict(
        env_prefix="APPLYMAGICSAUCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    customer_id: Optional[int] = None
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "applymagicsauce-python/1.0.0"

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v:
            raise ValueError("api_url is required")
        return v.rstrip("/")

    @field_validator("api_key", mode="before")
    @classmethod
    def empty_key_is_unset(cls, v: Any) -> Optional[str]:
        if v == "":
            return None
        return v

    @property
    def can_renew(self) -> bool:
        """Whether expired tokens can be renewed without the caller."""
        return self.api_key is not None
