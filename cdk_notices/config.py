"""Configuration for fetching and caching notices."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .sources.cached import DEFAULT_CACHE_FILE, DEFAULT_TTL_SECONDS, CachedDataSource
from .sources.website import DEFAULT_TIMEOUT_SECONDS, NOTICES_URL, WebsiteNoticeDataSource


ENV_URL = "CDK_NOTICES_URL"
ENV_CACHE_FILE = "CDK_NOTICES_CACHE_FILE"
ENV_CACHE_TTL = "CDK_NOTICES_CACHE_TTL"
ENV_TIMEOUT = "CDK_NOTICES_TIMEOUT"


@dataclass
class NoticesConfig:
    """Where notices come from and how long they are cached."""

    url: str = NOTICES_URL
    cache_file: Path = DEFAULT_CACHE_FILE
    cache_ttl: float = DEFAULT_TTL_SECONDS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    ignore_cache: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.cache_file = Path(self.cache_file).expanduser()
        if self.cache_ttl <= 0:
            raise ValueError(f"Cache TTL must be positive: {self.cache_ttl}")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive: {self.timeout}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "NoticesConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)
            **overrides: Explicit values taking precedence over the environment

        Returns:
            Configuration instance

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        environ = os.environ if environ is None else environ
        values = {}

        if environ.get(ENV_URL):
            values["url"] = environ[ENV_URL]
        if environ.get(ENV_CACHE_FILE):
            values["cache_file"] = Path(environ[ENV_CACHE_FILE])
        if environ.get(ENV_CACHE_TTL):
            values["cache_ttl"] = float(environ[ENV_CACHE_TTL])
        if environ.get(ENV_TIMEOUT):
            values["timeout"] = float(environ[ENV_TIMEOUT])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def build_data_source(config: NoticesConfig) -> CachedDataSource:
    """Wire the website source behind the disk cache."""
    return CachedDataSource(
        file_name=config.cache_file,
        data_source=WebsiteNoticeDataSource(url=config.url, timeout=config.timeout),
        ignore_cache=config.ignore_cache,
        ttl=config.cache_ttl,
    )
