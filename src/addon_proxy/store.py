"""
Configuration Store

Process-wide, read-only view of every built configuration. A store is never
mutated after construction; reloads build a complete replacement and swap it
in through ``StoreHolder``.
"""

import asyncio
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .events import ProxyEvents
from .exceptions import ConfigNotFoundError
from .log_config import get_context_logger
from .manifest import ManifestFetcher, merge_manifests
from .models import ConfigSource, Configuration, SynthesizedManifest, UpstreamBinding
from .registry import normalize_bases

logger = get_context_logger("configuration_store")


class ConfigurationStore(Mapping[str, Configuration]):
    """
    Immutable mapping of configuration name to ``Configuration``.

    Examples:
        >>> store = ConfigurationStore([Configuration(name="demo")])
        >>> store.bindings("demo")
        ()
        >>> store.bindings("missing")
        ()
    """

    def __init__(self, configurations: Iterable[Configuration] = ()):
        self._configurations = MappingProxyType(
            {config.name: config for config in configurations}
        )

    def __getitem__(self, name: str) -> Configuration:
        return self._configurations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._configurations)

    def __len__(self) -> int:
        return len(self._configurations)

    def bindings(self, name: str) -> tuple[UpstreamBinding, ...]:
        """Bindings of ``name``; empty for unknown configurations."""
        config = self._configurations.get(name)
        return config.bindings if config is not None else ()

    def manifest(self, name: str) -> SynthesizedManifest:
        """
        Synthesized manifest of ``name``.

        Raises:
            ConfigNotFoundError: If the configuration is unknown or has no
                bound upstreams
        """
        config = self._configurations.get(name)
        if config is None or config.manifest is None:
            raise ConfigNotFoundError(name)
        return config.manifest

    def with_configuration(self, config: Configuration) -> "ConfigurationStore":
        """Return a new store where ``config`` replaces any same-named entry."""
        configurations = dict(self._configurations)
        configurations[config.name] = config
        return ConfigurationStore(configurations.values())


async def build_configuration(
    source: ConfigSource, fetcher: ManifestFetcher
) -> Configuration:
    """
    Initialize one configuration: normalize, fetch manifests, merge.

    A configuration whose upstreams all failed is still returned, with no
    bindings and no manifest.
    """
    bases = normalize_bases(source.addon_urls)
    logger.info(ProxyEvents.CONFIG_INIT_STARTED, config=source.name, upstreams=len(bases))

    bindings = await fetcher.fetch_bindings(source.name, bases)
    manifest = merge_manifests(
        source.name,
        bindings,
        display_name=source.display_name,
        description=source.description,
    )

    if manifest is None:
        logger.error(ProxyEvents.CONFIG_INIT_EMPTY, config=source.name, upstreams=len(bases))
    else:
        logger.info(
            ProxyEvents.CONFIG_INIT_SUCCESS,
            config=source.name,
            bound=len(bindings),
            catalogs=len(manifest.catalogs),
        )

    return Configuration(
        name=source.name,
        bases=tuple(bases),
        bindings=tuple(bindings),
        manifest=manifest,
    )


async def build_store(
    sources: Iterable[ConfigSource], fetcher: ManifestFetcher
) -> ConfigurationStore:
    """Initialize all configurations concurrently and collect them in a store."""
    sources = list(sources)
    configurations = await asyncio.gather(
        *(build_configuration(source, fetcher) for source in sources)
    )
    store = ConfigurationStore(configurations)
    logger.info(ProxyEvents.ALL_CONFIGS_READY, configs=list(store))
    return store


class StoreHolder:
    """
    Holds the current ``ConfigurationStore``.

    Readers take ``holder.store`` once per request and keep using that value,
    so a concurrent reload never exposes a half-built configuration.
    """

    def __init__(self, store: ConfigurationStore | None = None):
        self._store = store if store is not None else ConfigurationStore()
        self._reload_lock = asyncio.Lock()

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    def swap(self, store: ConfigurationStore) -> ConfigurationStore:
        """Replace the current store and return the previous one."""
        previous, self._store = self._store, store
        logger.info(ProxyEvents.STORE_SWAPPED, configs=list(store))
        return previous

    async def reload(
        self, sources: Iterable[ConfigSource], fetcher: ManifestFetcher
    ) -> ConfigurationStore:
        """Rebuild every configuration from ``sources`` and swap the result in."""
        async with self._reload_lock:
            store = await build_store(sources, fetcher)
            self.swap(store)
            return store

    async def reload_one(
        self, source: ConfigSource, fetcher: ManifestFetcher
    ) -> Configuration:
        """Rebuild a single configuration and swap in a store containing it."""
        async with self._reload_lock:
            config = await build_configuration(source, fetcher)
            self.swap(self._store.with_configuration(config))
            return config


__all__ = [
    "ConfigurationStore",
    "StoreHolder",
    "build_configuration",
    "build_store",
]
