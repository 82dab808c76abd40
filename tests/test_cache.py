import asyncio
import json

import pytest

from adapters.angle_protocol.transmuter import AngleProtocolTransmuterAdapter
from adapters.core.cache import CacheKey, FileMetadataCache, InMemoryMetadataCache
from adapters.core.types import ProtocolTokenMetadata
from config.chains import Chain

KEY = CacheKey(protocol_id='angle-protocol', product_id='transmuter', chain_name='ethereum', file_key='transmuter')


class _Counter:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


def test_in_memory_computes_once():
    cache = InMemoryMetadataCache()
    compute = _Counter({"a": 1})
    assert asyncio.run(cache.get_or_compute(KEY, compute)) == {"a": 1}
    assert asyncio.run(cache.get_or_compute(KEY, compute)) == {"a": 1}
    assert compute.calls == 1

    cache.invalidate(KEY)
    asyncio.run(cache.get_or_compute(KEY, compute))
    assert compute.calls == 2


def test_file_cache_layout_and_reload(tmp_path):
    compute = _Counter({"b": [1, 2]})
    first = FileMetadataCache(tmp_path)
    asyncio.run(first.get_or_compute(KEY, compute))

    path = tmp_path / 'angle-protocol' / 'transmuter' / 'ethereum.transmuter.json'
    assert path.exists()
    assert json.loads(path.read_text()) == {"b": [1, 2]}
    assert not path.with_suffix('.json.tmp').exists()

    # a fresh instance reads the file instead of recomputing
    second = FileMetadataCache(tmp_path)
    assert asyncio.run(second.get_or_compute(KEY, compute)) == {"b": [1, 2]}
    assert compute.calls == 1


def test_file_cache_invalidate_removes_file(tmp_path):
    cache = FileMetadataCache(tmp_path)
    compute = _Counter({"c": 3})
    asyncio.run(cache.get_or_compute(KEY, compute))
    cache.invalidate(KEY)
    assert not cache.path_for(KEY).exists()
    asyncio.run(cache.get_or_compute(KEY, compute))
    assert compute.calls == 2


def test_corrupt_file_is_recomputed(tmp_path):
    cache = FileMetadataCache(tmp_path)
    path = cache.path_for(KEY)
    path.parent.mkdir(parents=True)
    path.write_text("{not json")

    compute = _Counter({"d": 4})
    assert asyncio.run(cache.get_or_compute(KEY, compute)) == {"d": 4}
    assert json.loads(path.read_text()) == {"d": 4}


def test_compute_errors_are_not_cached(tmp_path):
    cache = FileMetadataCache(tmp_path)

    async def failing():
        raise ConnectionError("rpc down")

    with pytest.raises(ConnectionError):
        asyncio.run(cache.get_or_compute(KEY, failing))
    assert not cache.path_for(KEY).exists()


def test_adapter_metadata_roundtrips_through_file_cache(tmp_path, provider, token_resolver):
    adapter = AngleProtocolTransmuterAdapter(
        provider=provider, chain_id=Chain.POLYGON, cache=FileMetadataCache(tmp_path)
    )
    built = asyncio.run(adapter.build_metadata())
    assert len(token_resolver.calls) == 2

    reloaded_adapter = AngleProtocolTransmuterAdapter(
        provider=provider, chain_id=Chain.POLYGON, cache=FileMetadataCache(tmp_path)
    )
    reloaded = asyncio.run(reloaded_adapter.build_metadata())

    assert reloaded == built
    assert all(isinstance(v, ProtocolTokenMetadata) for v in reloaded.values())
    assert len(token_resolver.calls) == 2
    assert (tmp_path / 'angle-protocol' / 'transmuter' / 'polygon.transmuter.json').exists()
