from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from resource_import.app.core.errors import ConfigError, MappingParseError
from resource_import.app.core.settings import Settings, get_settings
from resource_import.app.models.config import ResourceConfig, ResourceType
from resource_import.app.models.documents import ResourceMapping
from resource_import.app.services.parsing.config_parser import parse_config
from resource_import.app.services.parsing.mapping_parser import parse_mapping
from resource_import.app.services.registry import validate_config

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read(path: PathLike, settings: Optional[Settings], error_cls: type) -> str:
    settings = settings or get_settings()
    p = Path(path)
    try:
        return p.read_text(encoding=settings.source_encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise error_cls(f"Could not read {p}: {e}") from e


def load_config(
    path: PathLike,
    expected: Optional[ResourceType] = None,
    settings: Optional[Settings] = None,
) -> ResourceConfig:
    """
    Loads and validates a resource config file. Relative file sources are
    resolved against the config file's directory.
    """
    config = validate_config(parse_config(_read(path, settings, ConfigError)), expected)
    if config.resource_type.is_file:
        source = Path(config.source)
        if not source.is_absolute():
            config = config.model_copy(update={"source": str(Path(path).resolve().parent / source)})
    logger.info("Loaded %s config from %s", config.resource_type.value, path)
    return config


def load_config_result(
    path: PathLike,
    expected: Optional[ResourceType] = None,
    settings: Optional[Settings] = None,
) -> Tuple[Optional[ResourceConfig], Optional[ConfigError]]:
    try:
        return load_config(path, expected, settings), None
    except ConfigError as e:
        logger.warning("Invalid resource config %s: %s", path, e)
        return None, e


def load_mapping(path: PathLike, settings: Optional[Settings] = None) -> ResourceMapping:
    mapping = parse_mapping(_read(path, settings, MappingParseError))
    logger.info("Loaded %d mapping templates from %s", len(mapping), path)
    return mapping


def load_mapping_result(
    path: PathLike, settings: Optional[Settings] = None
) -> Tuple[Optional[ResourceMapping], Optional[MappingParseError]]:
    try:
        return load_mapping(path, settings), None
    except MappingParseError as e:
        logger.warning("Invalid mapping %s: %s", path, e)
        return None, e
