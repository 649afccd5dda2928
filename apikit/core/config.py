"""
Configuration management using Pydantic Settings.

Type-safe, validated toolkit configuration loaded from environment variables
prefixed with ``API_`` (e.g. ``API_PREFIX=/api``, ``API_VERSION=v1``).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from apikit.core.config import get_settings

    settings = get_settings()
    settings.prefix            # "/api"
    settings.accept_default()  # "application/x.api.v1+json"
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from apikit.core.enums import Environment

STANDARDS_TREES = ("vnd", "prs", "x")


class Settings(BaseSettings):
    """
    Toolkit settings (flat structure).

    Configuration precedence:
        1. Explicit keyword arguments (tests, ``install(app, settings=...)``)
        2. Environment variables (``API_`` prefix)
        3. Default values
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    debug: bool = Field(
        default=False,
        description="Include exception details in 500 responses",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # API identity and negotiation
    name: str = Field(
        default="API",
        description="API name shown in OpenAPI tags",
    )
    standards_tree: str = Field(
        default="x",
        description="Accept header standards tree (vnd, prs or x)",
    )
    subtype: str = Field(
        default="api",
        description="Accept header subtype (application/x.{subtype}.v1+json)",
    )
    version: str = Field(
        default="v1",
        description="Default API version when the Accept header carries none",
    )
    default_format: str = Field(
        default="json",
        description="Default response format when the Accept header carries none",
    )
    formats: Annotated[list[str], NoDecode] = Field(
        default=["json"],
        description="Response formats the API can produce (comma-separated)",
    )
    strict: bool = Field(
        default=False,
        description="Reject API requests without a parsable Accept header",
    )

    # API request detection
    prefix: str | None = Field(
        default="/api",
        description="URI prefix that identifies API requests",
    )
    domain: str | None = Field(
        default=None,
        description="Host that identifies API requests (takes precedence over prefix)",
    )

    # Responses
    conditional_request: bool = Field(
        default=True,
        description="Add ETag headers and answer 304 to matching If-None-Match",
    )
    include_key: str = Field(
        default="include",
        description="Query string key carrying requested transformer includes",
    )
    include_separator: str = Field(
        default=",",
        description="Separator between requested includes",
    )
    eager_loading: bool = Field(
        default=True,
        description="Eager load relations named by requested includes",
    )
    errors_base_url: str = Field(
        default="https://errors.apikit.local",
        description="Base URL for RFC 9457 problem type URIs",
    )

    # Authentication
    jwt_secret: str | None = Field(
        default=None,
        description="Secret used by the JWT provider to verify Bearer tokens",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    # Rate limiting (limits per window, windows in minutes; limit 0 disables)
    throttle_authenticated_limit: int = Field(
        default=0,
        description="Requests allowed per window for authenticated clients",
    )
    throttle_authenticated_expires: int = Field(
        default=1,
        description="Window length in minutes for authenticated clients",
    )
    throttle_unauthenticated_limit: int = Field(
        default=0,
        description="Requests allowed per window for unauthenticated clients",
    )
    throttle_unauthenticated_expires: int = Field(
        default=1,
        description="Window length in minutes for unauthenticated clients",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis URL for rate limit counters (in-memory when unset)",
    )

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("standards_tree")
    @classmethod
    def validate_standards_tree(cls, v: str) -> str:
        """
        Validate the Accept header standards tree.

        Args:
            v: Standards tree.

        Returns:
            str: Validated standards tree.

        Raises:
            ValueError: If tree is not one of vnd, prs, x.
        """
        if v not in STANDARDS_TREES:
            raise ValueError(f"standards_tree must be one of {', '.join(STANDARDS_TREES)}")
        return v

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str | None) -> str | None:
        """
        Normalize prefix to a leading slash and no trailing slash.

        Args:
            v: Raw prefix.

        Returns:
            str | None: Normalized prefix, None when empty.
        """
        if v is None or v.strip("/") == "":
            return None
        return "/" + v.strip("/")

    @field_validator("formats", mode="before")
    @classmethod
    def parse_formats(cls, v: str | list[str]) -> list[str]:
        """
        Parse comma-separated formats.

        Args:
            v: Comma-separated string or list.

        Returns:
            list[str]: Lower-cased format names.
        """
        if isinstance(v, str):
            v = v.split(",")
        return [fmt.strip().lower() for fmt in v if fmt.strip()]

    @field_validator("include_separator")
    @classmethod
    def validate_include_separator(cls, v: str) -> str:
        """Reject an empty include separator."""
        if not v:
            raise ValueError("include_separator must not be empty")
        return v

    def accept_default(self) -> str:
        """
        Build the Accept header value implied by the defaults.

        Returns:
            str: e.g. ``application/x.api.v1+json``.
        """
        return (
            f"application/{self.standards_tree}.{self.subtype}."
            f"{self.version}+{self.default_format}"
        )

    @property
    def is_development(self) -> bool:
        """True if environment is DEVELOPMENT."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """True if environment is TESTING."""
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """True if environment is PRODUCTION."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache so settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
