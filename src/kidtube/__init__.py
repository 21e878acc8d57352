"""KidTube package initialization."""

from pathlib import Path
from typing import Optional

import structlog

from .common.config import Config, LoggingConfig, OEmbedConfig, PopularConfig
from .common.logging_config import setup_logging
from .common.video_id import extract_video_id, is_valid_video_id
from .core.db import (
    BookmarkRecord,
    BookmarkRepository,
    ChildProfile,
    DatabaseConnectionError,
    DatabaseError,
    DuplicateRecordError,
    MigrationError,
    QueryError,
)

__version__ = "0.1.0"
__all__ = [
    "Config",
    "LoggingConfig",
    "OEmbedConfig",
    "PopularConfig",
    "setup_logging",
    "extract_video_id",
    "is_valid_video_id",
    "BookmarkRecord",
    "BookmarkRepository",
    "ChildProfile",
    "DatabaseError",
    "DatabaseConnectionError",
    "MigrationError",
    "DuplicateRecordError",
    "QueryError",
    "configure",
    "get_config",
    "get_repository",
    "shutdown",
]

logger = structlog.get_logger(__name__)

_config: Optional[Config] = None
_repository: Optional[BookmarkRepository] = None


def _find_config_file() -> Optional[Path]:
    from kidtube.common.config import _get_default_config_dir

    for candidate in (_get_default_config_dir() / "config.yaml", Path.cwd() / "config.yaml"):
        if candidate.exists():
            return candidate
    return None


async def configure(config_path: Optional[Path] = None, config: Optional[Config] = None) -> None:
    """
    Configure the kidtube package (async).

    Called once at application startup to load configuration, set up
    logging and open (and migrate) the bookmark database.

    Path Resolution:
    - If config is provided, use it as-is
    - If config_path is provided, load from that file
    - Otherwise look for config.yaml in KIDTUBE_CONFIG_DIR (or its default),
      then in the working directory, then fall back to defaults

    Args:
        config_path: Path to YAML configuration file
        config: Pre-loaded Config object (takes precedence over config_path)

    Example:
        >>> import kidtube
        >>> await kidtube.configure(config_path=Path("config.yaml"))
    """
    global _config, _repository

    if config is not None:
        _config = config
    else:
        if config_path is None:
            config_path = _find_config_file()
        if config_path is not None:
            _config = Config.from_yaml(config_path)
        elif _config is None:
            _config = Config()

    _config.resolve_paths(create_dirs=True)

    setup_logging(_config)

    if _repository is None:
        _repository = await BookmarkRepository.from_config(_config)

    logger.info(
        "kidtube_configured",
        version=__version__,
        config_path=str(config_path) if config_path else None,
        config_dir=str(_config.config_dir),
        database_path=str(_config.get_database_path()),
    )


def get_config() -> Config:
    """
    Get current configuration, initializing with defaults if needed.

    Example:
        >>> import kidtube
        >>> kidtube.get_config().oembed.timeout
        5
    """
    global _config
    if _config is None:
        _config = Config()
        setup_logging(_config)
    return _config


async def get_repository() -> BookmarkRepository:
    """
    Get the bookmark repository, opening it with the current config if needed.

    Example:
        >>> import kidtube
        >>> await kidtube.configure()
        >>> repo = await kidtube.get_repository()
        >>> videos = await repo.list_bookmarks("user_2abc")
    """
    global _repository

    if _repository is None:
        config = get_config()
        config.resolve_paths(create_dirs=True)
        _repository = await BookmarkRepository.from_config(config)
        logger.info(
            "repository_auto_initialized",
            database_path=str(config.get_database_path()),
        )

    return _repository


async def shutdown() -> None:
    """Close the repository and forget the loaded configuration."""
    global _config, _repository

    if _repository is not None:
        await _repository.close()
    _repository = None
    _config = None
