"""Configuration models using Pydantic for validation."""

import os
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger(__name__)


class RetryConfig(BaseModel):
    """Configuration for HTTP retry logic with exponential backoff.

    Retries are off by default (a single attempt); outbound calls made while
    serving a request degrade instead of retrying.
    """

    max_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Maximum number of attempts (1 disables retries)",
    )
    backoff_multiplier: float = Field(
        default=1.0,
        ge=0.1,
        le=10.0,
        description="Multiplier for exponential backoff calculation",
    )
    min_wait: float = Field(
        default=1.0,
        ge=0.1,
        le=60.0,
        description="Minimum wait time between retries in seconds",
    )
    max_wait: float = Field(
        default=10.0,
        ge=1.0,
        le=300.0,
        description="Maximum wait time between retries in seconds",
    )
    status_codes: List[int] = Field(
        default_factory=lambda: [408, 429, 500, 502, 503, 504],
        description="HTTP status codes that should trigger a retry",
    )

    @field_validator("status_codes")
    @classmethod
    def validate_status_codes(cls, v: List[int]) -> List[int]:
        """Validate that status codes are in valid range."""
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"Invalid HTTP status code: {code}")
        return v


class HTTPConfig(BaseModel):
    """Configuration for HTTP client."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects to follow",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of connections in the pool",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum number of keep-alive connections",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry configuration",
    )


class FileLoggingConfig(BaseModel):
    """Configuration for file-based logging.

    File logging uses daily rotation with 7-day retention.
    Log files are stored as kidtube.log in config_dir, rotated daily
    with format kidtube.log.YYYY-MM-DD.
    """

    enabled: bool = Field(
        default=False,
        description="Enable file logging (logs to kidtube.log in config_dir)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    format: str = Field(
        default="json",
        description="Log format: json or text",
    )
    file: FileLoggingConfig = Field(
        default_factory=FileLoggingConfig,
        description="File logging configuration",
    )
    third_party: Dict[str, str] = Field(
        default_factory=dict,
        description="Log levels for third-party libraries (advanced)",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid format: {v}. Must be one of {valid_formats}")
        return v_lower


class OEmbedConfig(BaseModel):
    """Configuration for the YouTube oEmbed title lookup."""

    base_url: str = Field(
        default="https://www.youtube.com/oembed",
        description="oEmbed endpoint queried for video titles",
    )
    timeout: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Timeout in seconds for a single title lookup",
    )
    fallback_title: str = Field(
        default="Untitled Video",
        min_length=1,
        description="Title used when the lookup fails for any reason",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry policy for title lookups (single attempt unless raised)",
    )

    def to_http_config(self) -> HTTPConfig:
        """Build the HTTP client settings for title lookups."""
        return HTTPConfig(
            timeout=self.timeout,
            max_connections=10,
            max_keepalive_connections=5,
            retry=self.retry,
        )


class PopularConfig(BaseModel):
    """Configuration for the popular videos ranking."""

    default_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of videos returned when no limit is requested",
    )


def _get_default_config_dir() -> Path:
    """
    Get default config directory based on environment.

    Priority:
    1. KIDTUBE_CONFIG_DIR environment variable
    2. /config if KIDTUBE_DOCKER=1
    3. $HOME/KidTube/config otherwise

    Returns:
        Path to config directory
    """
    env_config_dir = os.environ.get("KIDTUBE_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)

    if os.environ.get("KIDTUBE_DOCKER") == "1":
        return Path("/config")

    return Path.home() / "KidTube" / "config"


class Config(BaseModel):
    """Main configuration class for KidTube.

    Path Resolution:
    - config_dir: Where configuration, the database and log files are stored

    Environment Variables:
    - KIDTUBE_CONFIG_DIR: Override config_dir
    - KIDTUBE_DOCKER=1: Use Docker default (/config)

    A relative database_path is resolved against config_dir at runtime.
    """

    config_dir: Optional[Path] = Field(
        default=None,
        description="Configuration directory (database, logs). Resolved from KIDTUBE_CONFIG_DIR or defaults.",
    )
    database_path: str = Field(
        default="kidtube.db",
        description="SQLite database file, relative to config_dir unless absolute",
    )
    enable_wal: bool = Field(
        default=True,
        description="Enable SQLite write-ahead logging",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    oembed: OEmbedConfig = Field(
        default_factory=OEmbedConfig,
        description="Video title lookup configuration",
    )
    popular: PopularConfig = Field(
        default_factory=PopularConfig,
        description="Popular videos ranking configuration",
    )

    DEFAULT_LOG_FILE: ClassVar[str] = "kidtube.log"

    def resolve_paths(self, create_dirs: bool = True) -> "Config":
        """
        Resolve config_dir from environment or defaults.

        Args:
            create_dirs: If True, create directories if they don't exist

        Returns:
            Self with resolved paths (for chaining)

        Example:
            >>> config = Config.from_yaml(Path("config.yaml")).resolve_paths()
        """
        if self.config_dir is None:
            object.__setattr__(self, "config_dir", _get_default_config_dir())

        if create_dirs:
            self.config_dir.mkdir(parents=True, exist_ok=True)

        logger.debug("paths_resolved", config_dir=str(self.config_dir))

        return self

    def get_database_path(self) -> Path:
        """
        Get absolute database path, resolved against config_dir.

        Returns:
            Absolute path to database file
        """
        db_path = Path(self.database_path)
        if db_path.is_absolute():
            return db_path
        config_dir = self.config_dir or _get_default_config_dir()
        return config_dir / db_path

    def get_log_file_path(self) -> Path:
        """Get absolute path of the rotating log file."""
        config_dir = self.config_dir or _get_default_config_dir()
        return config_dir / self.DEFAULT_LOG_FILE

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config object with validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            pydantic.ValidationError: If configuration is invalid
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "Config":
        """
        Load configuration from YAML string.

        Example:
            >>> config = Config.from_yaml_string("oembed:\\n  timeout: 3")
        """
        data: Any = yaml.safe_load(yaml_string)
        return cls.model_validate(data or {})
