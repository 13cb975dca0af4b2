"""Disk cache in front of another notice data source."""

import contextlib
import json
import math
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.matcher import Notice
from ..utils.logging import get_logger
from .base import NoticeDataSource


DEFAULT_CACHE_FILE = Path.home() / ".cdk" / "cache" / "notices.json"
DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass
class CacheEnvelope:
    """Persisted catalog snapshot with an absolute expiration in epoch millis."""

    notices: List[Notice] = field(default_factory=list)
    expiration: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEnvelope":
        """Decode an envelope.

        Raises:
            ValueError: If the document is not a valid envelope
        """
        if not isinstance(data, dict):
            raise ValueError("Cache envelope must be an object")

        notices = data.get("notices")
        expiration = data.get("expiration")
        if not isinstance(notices, list):
            raise ValueError("Cache envelope has no notice list")
        if isinstance(expiration, bool) or not isinstance(expiration, (int, float)):
            raise ValueError("Cache envelope has no numeric expiration")
        if not math.isfinite(expiration):
            raise ValueError(f"Cache envelope expiration is not finite: {expiration}")

        return cls(notices=[Notice.from_dict(n) for n in notices], expiration=int(expiration))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notices": [n.to_dict() for n in self.notices],
            "expiration": self.expiration,
        }


class CachedDataSource:
    """Serves notices from a cache file until it expires, then asks the delegate."""

    def __init__(
        self,
        file_name: Union[str, Path],
        data_source: NoticeDataSource,
        ignore_cache: bool = False,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ) -> None:
        """Initialize the cached data source.

        Args:
            file_name: Cache file location
            data_source: Delegate consulted on a miss
            ignore_cache: Always consult the delegate
            ttl: Lifetime of a cache entry in seconds
            clock: Returns the current time in epoch seconds
        """
        self.file_name = Path(file_name)
        self.data_source = data_source
        self.ignore_cache = ignore_cache
        self.ttl = ttl
        self.clock = clock
        self.logger = get_logger("CachedDataSource")

    async def fetch(self) -> List[Notice]:
        """Return cached notices while fresh, otherwise refresh from the delegate."""
        envelope = None if self.ignore_cache else self.load()

        if envelope is not None and envelope.expiration > self._now_millis():
            self.logger.debug(f"Using {len(envelope.notices)} cached notices from {self.file_name}")
            return list(envelope.notices)

        notices = await self.data_source.fetch()
        self.save(CacheEnvelope(
            notices=list(notices),
            expiration=self._now_millis() + int(self.ttl * 1000),
        ))
        return notices

    def load(self) -> Optional[CacheEnvelope]:
        """Read the cache file.

        Returns:
            The envelope, or None if the file is absent, empty or invalid
        """
        try:
            with open(self.file_name, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            self.logger.debug(f"No notices cache at {self.file_name}")
            return None
        except (OSError, ValueError) as e:
            self.logger.debug(f"Cannot read notices cache {self.file_name}: {e}")
            return None

        if not content.strip():
            return None

        try:
            return CacheEnvelope.from_dict(json.loads(content))
        except ValueError as e:
            self.logger.debug(f"Ignoring invalid notices cache {self.file_name}: {e}")
            return None

    def save(self, envelope: CacheEnvelope) -> None:
        """Replace the cache file atomically; failures are logged, not raised."""
        tmp_name = None
        try:
            self.file_name.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.file_name.parent,
                prefix=f".{self.file_name.name}.",
                delete=False
            ) as f:
                tmp_name = f.name
                json.dump(envelope.to_dict(), f)
            os.replace(tmp_name, self.file_name)
        except OSError as e:
            self.logger.warning(f"Failed to write notices cache {self.file_name}: {e}")
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

    def _now_millis(self) -> int:
        return int(self.clock() * 1000)
