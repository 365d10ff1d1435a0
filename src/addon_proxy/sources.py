"""
Configuration Source Loader

Reads one configuration per file from the configs directory. The file stem is
the configuration name. JSON and YAML files are accepted.

Example ``configs/demo.json``::

    {
        "TARGET_ADDON_BASES": [
            "https://v3-cinemeta.strem.io/manifest.json",
            "https://opensubtitles-v3.strem.io"
        ]
    }
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .events import ProxyEvents
from .exceptions import ConfigSourceError
from .log_config import get_context_logger
from .models import ConfigSource

logger = get_context_logger("config_sources")

SOURCE_SUFFIXES = (".json", ".yaml", ".yml")


class ConfigFile(BaseModel):
    """Schema of a configuration source file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    addon_urls: list[Any] | None = Field(
        default_factory=list,
        validation_alias=AliasChoices("TARGET_ADDON_BASES", "addons", "addon_urls"),
    )
    name: str | None = None
    description: str | None = None


def parse_config_source(path: Path) -> ConfigSource:
    """
    Read and validate one configuration source file.

    Raises:
        ConfigSourceError: If the file cannot be read, parsed or validated
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigSourceError(f"Cannot read config source: {e}", source=str(path)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigSourceError(f"Cannot parse config source: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigSourceError("Config source must be an object", source=str(path))

    try:
        config_file = ConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigSourceError(f"Invalid config source: {e}", source=str(path)) from e

    return ConfigSource(
        name=path.stem,
        addon_urls=tuple(config_file.addon_urls or ()),
        display_name=config_file.name,
        description=config_file.description,
        origin=str(path),
    )


def load_config_sources(configs_dir: Path) -> list[ConfigSource]:
    """
    Load every configuration source in ``configs_dir``.

    Unreadable or invalid files are logged and skipped; a missing directory
    yields no sources. When two files share a stem the first one in sorted
    order wins.

    Args:
        configs_dir: Directory holding configuration files

    Returns:
        Parsed sources sorted by file name
    """
    if not configs_dir.is_dir():
        logger.warning(ProxyEvents.CONFIG_SOURCE_FAILED, source=str(configs_dir), error="not a directory")
        return []

    sources: dict[str, ConfigSource] = {}
    for path in sorted(configs_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in SOURCE_SUFFIXES:
            continue
        try:
            source = parse_config_source(path)
        except ConfigSourceError as e:
            logger.error(ProxyEvents.CONFIG_SOURCE_FAILED, source=str(path), error=str(e))
            continue
        if source.name in sources:
            logger.warning(
                ProxyEvents.CONFIG_SOURCE_FAILED,
                source=str(path),
                error=f"duplicate configuration name {source.name!r}",
            )
            continue
        sources[source.name] = source
        logger.debug(
            ProxyEvents.CONFIG_SOURCE_LOADED,
            config=source.name,
            upstreams=len(source.addon_urls),
        )

    return list(sources.values())


__all__ = ["ConfigFile", "parse_config_source", "load_config_sources"]
