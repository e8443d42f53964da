"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
ResolveStrategy = Literal["scrape", "extractor"]


def _strip_trailing_slash(value: str) -> str:
    return value.rstrip("/")


class TmdbConfig(BaseModel):
    """TMDB metadata API settings."""

    api_key: Optional[str] = Field(
        default=None,
        description="TMDB v3 API key. Catalog, search and load need it.",
    )
    api_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="TMDB API base URL.",
    )
    image_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        description="Base URL for posters, stills and profile images.",
    )
    backdrop_url: str = Field(
        default="https://image.tmdb.org/t/p/original",
        description="Base URL for backdrops.",
    )
    language: str = Field(default="en-US", description="TMDB response locale.")

    @field_validator("api_url", "image_url", "backdrop_url")
    @classmethod
    def _validate_urls(cls, v: str) -> str:
        return _strip_trailing_slash(v)


class VidFastConfig(BaseModel):
    """Embed-site scraping settings.

    ``api_path`` pins the obfuscated API base path (e.g.
    ``/hezushon/cu/<...>/krI/``) instead of reading it from the embed page.
    It is a copy of a value computed by the site's client bundle and goes
    stale whenever the site redeploys; leave it unset unless the page no
    longer exposes the path.
    """

    main_url: str = Field(
        default="https://vidfast.pro",
        description="Embed site origin.",
    )
    strategy: ResolveStrategy = Field(
        default="scrape",
        description=(
            "'scrape' walks the site's internal API; 'extractor' hands the "
            "embed URL to the generic extractor."
        ),
    )
    api_path: Optional[str] = Field(
        default=None,
        description="Pinned API base path. Unset = extract from the page.",
    )
    server_segment: str = Field(
        default="krI",
        description="Path segment of the server-list endpoint.",
    )
    stream_segment: str = Field(
        default="L5aN",
        description="Path segment of the per-server stream endpoint.",
    )
    token_pattern: str = Field(
        default=r'"en":"([^"]+)"',
        description="Regex with one group capturing the page token.",
    )
    api_path_pattern: str = Field(
        default=r'(\\?/hezushon\\?/cu\\?/[^"]+?\\?/krI\\?/)',
        description="Regex with one group capturing the API base path.",
    )

    @field_validator("main_url")
    @classmethod
    def _validate_main_url(cls, v: str) -> str:
        return _strip_trailing_slash(v)

    @field_validator("api_path")
    @classmethod
    def _validate_api_path(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith("/"):
            v = "/" + v
        if not v.endswith("/"):
            v = v + "/"
        return v


class SubtitleConfig(BaseModel):
    enabled: bool = Field(default=True, description="Query the subtitle service.")
    api_url: str = Field(
        default="https://sub.wyzie.ru",
        description="Subtitle search service base URL.",
    )

    @field_validator("api_url")
    @classmethod
    def _validate_api_url(cls, v: str) -> str:
        return _strip_trailing_slash(v)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/tmdb/vidfast/subtitles).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="vidfast", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for every outbound request.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    tmdb: TmdbConfig = Field(default_factory=TmdbConfig)
    vidfast: VidFastConfig = Field(default_factory=VidFastConfig)
    subtitles: SubtitleConfig = Field(default_factory=SubtitleConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "tmdb": self.tmdb.model_dump(),
            "vidfast": self.vidfast.model_dump(),
            "subtitles": self.subtitles.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read VIDFAST_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - VIDFAST_TMDB_API_KEY
    - VIDFAST_API_PATH
    - VIDFAST_STRATEGY
    - VIDFAST_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="VIDFAST_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    tmdb_api_key: Optional[str] = None
    tmdb_language: Optional[str] = None

    main_url: Optional[str] = None
    strategy: Optional[ResolveStrategy] = None
    api_path: Optional[str] = None

    subtitles_enabled: Optional[bool] = None
    subtitles_api_url: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
