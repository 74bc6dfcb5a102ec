"""Client configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from yarl import URL

from .enums import MediaType

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "laakhay-rest"


class RestClientConfig(BaseModel):
    """Settings shared by every send made through one client.

    The model is frozen: a client's base address, headers, and timeout are
    fixed at construction and read concurrently by all in-flight sends.
    """

    base_url: str = Field(..., min_length=1)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    user_agent: str | None = DEFAULT_USER_AGENT
    default_headers: tuple[tuple[str, str], ...] = ()
    default_media_type: MediaType = MediaType.JSON

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        url = URL(v)
        if not url.is_absolute() or url.scheme not in ("http", "https"):
            raise ValueError("base_url must be an absolute http(s) URL")
        return v

    @field_validator("default_headers", mode="before")
    @classmethod
    def validate_default_headers(cls, v: object) -> object:
        """Accept a plain mapping as well as name/value pairs."""
        if isinstance(v, dict):
            return tuple(v.items())
        return v

    @property
    def base(self) -> URL:
        return URL(self.base_url)
