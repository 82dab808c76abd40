"""
Metadata caches.

Adapters receive a cache collaborator and call

    await cache.get_or_compute(key, compute, encode=..., decode=...)

compute is an async zero-argument callable. encode/decode convert between
the computed value and JSON-serialisable data; they are only used by caches
that persist.

FileMetadataCache layout:
    <cache_dir>/<protocol_id>/<product_id>/<chain_name>.<file_key>.json
Files are written to a .tmp sibling and then replaced, so readers never see
a half-written file.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

Compute = Callable[[], Awaitable[Any]]
Encode = Callable[[Any], Any]
Decode = Callable[[Any], Any]


@dataclass(frozen=True)
class CacheKey:
    protocol_id: str
    product_id: str
    chain_name: str
    file_key: str

    def relative_path(self) -> Path:
        return Path(self.protocol_id) / self.product_id / f"{self.chain_name}.{self.file_key}.json"

    def __str__(self) -> str:
        return f"{self.protocol_id}/{self.product_id}/{self.chain_name}.{self.file_key}"


class MetadataCache(Protocol):
    async def get_or_compute(
        self,
        key: CacheKey,
        compute: Compute,
        encode: Optional[Encode] = None,
        decode: Optional[Decode] = None,
    ) -> Any:
        ...

    def invalidate(self, key: CacheKey) -> None:
        ...


class InMemoryMetadataCache:
    """Process-lifetime memoisation; nothing is persisted."""

    def __init__(self):
        self._values: Dict[CacheKey, Any] = {}

    async def get_or_compute(self, key, compute, encode=None, decode=None):
        if key in self._values:
            logger.debug("cache hit (memory): %s", key)
            return self._values[key]
        logger.debug("cache miss (memory): %s", key)
        value = await compute()
        self._values[key] = value
        return value

    def invalidate(self, key: CacheKey) -> None:
        self._values.pop(key, None)


class FileMetadataCache:
    """JSON-file backed cache with an in-memory layer in front."""

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)
        self._memory: Dict[CacheKey, Any] = {}

    def path_for(self, key: CacheKey) -> Path:
        return self.cache_dir / key.relative_path()

    def _load(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            with open(path) as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("ignoring unreadable cache file %s: %s", path, e)
            return None

    def _save(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        tmp.replace(path)

    async def get_or_compute(self, key, compute, encode=None, decode=None):
        if key in self._memory:
            logger.debug("cache hit (memory): %s", key)
            return self._memory[key]

        path = self.path_for(key)
        raw = self._load(path)
        if raw is not None:
            logger.debug("cache hit (file): %s", path)
            value = decode(raw) if decode else raw
            self._memory[key] = value
            return value

        logger.debug("cache miss: %s", key)
        value = await compute()
        self._save(path, encode(value) if encode else value)
        logger.debug("cache write: %s", path)
        self._memory[key] = value
        return value

    def invalidate(self, key: CacheKey) -> None:
        self._memory.pop(key, None)
        self.path_for(key).unlink(missing_ok=True)
