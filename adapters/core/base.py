# adapters/core/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Union

from web3 import AsyncWeb3, Web3

from adapters.core.cache import CacheKey, MetadataCache
from adapters.core.errors import TokenNotFoundError
from adapters.core.types import (
    Erc20Metadata,
    ProtocolDetails,
    ProtocolTokenMetadata,
    decode_metadata_map,
    encode_metadata_map,
)
from adapters.core.write_actions import WriteActionInput, WriteActionInputSchemas, WriteActions
from config.chains import Chain, chain_from_name

MetadataMap = Dict[str, ProtocolTokenMetadata]
TransactionParams = Dict[str, str]


class WriteOnlyDeFiAdapter(ABC):
    """
    Base interface for write adapters.
    An adapter instance is bound to one (protocol, product, chain). It describes the
    protocol and turns write actions into unsigned transaction params ({to, data}).
    """
    protocol_id: str = ""
    product_id: str = ""
    write_action_inputs: WriteActionInputSchemas = {}

    def __init__(
        self,
        provider: AsyncWeb3,
        chain_id: Union[Chain, int, str],
        cache: Optional[MetadataCache] = None,
    ):
        self.provider = provider
        self.chain_id = chain_from_name(chain_id)
        self.cache = cache

    @abstractmethod
    def get_protocol_details(self) -> ProtocolDetails:
        """Static descriptor for this protocol/product on this chain."""
        ...

    @abstractmethod
    async def get_transaction_params(
        self,
        action: WriteActions,
        inputs: Union[Mapping[str, Any], WriteActionInput],
    ) -> TransactionParams:
        """Return {'to': address, 'data': hex calldata} for a single write action."""
        ...

    async def build_metadata(self) -> MetadataMap:
        """Protocol token -> underlying token metadata. Adapters without tokens return {}."""
        return {}

    def metadata_cache_key(self, file_key: str) -> CacheKey:
        return CacheKey(
            protocol_id=self.protocol_id,
            product_id=self.product_id,
            chain_name=self.chain_id.chain_name,
            file_key=file_key,
        )

    async def cached_metadata(self, file_key: str, compute) -> MetadataMap:
        """
        Route a metadata build through the injected cache, if any.
        Without a cache the build runs on every call.
        """
        if self.cache is None:
            return await compute()
        return await self.cache.get_or_compute(
            self.metadata_cache_key(file_key),
            compute,
            encode=encode_metadata_map,
            decode=decode_metadata_map,
        )

    async def get_protocol_tokens(self) -> List[Erc20Metadata]:
        metadata = await self.build_metadata()
        return [entry.protocol_token for entry in metadata.values()]

    async def get_underlying_tokens(self, protocol_token_address: str) -> List[Erc20Metadata]:
        entry = await self.get_protocol_token_entry(protocol_token_address)
        return list(entry.underlying_tokens)

    async def get_protocol_token_entry(self, protocol_token_address: str) -> ProtocolTokenMetadata:
        """
        Look up a protocol token in the metadata map.
        Address case is normalised; unknown or malformed addresses raise TokenNotFoundError.
        """
        if not Web3.is_address(protocol_token_address):
            raise TokenNotFoundError(protocol_token_address, int(self.chain_id), "Invalid token address")
        address = Web3.to_checksum_address(protocol_token_address)
        metadata = await self.build_metadata()
        entry = metadata.get(address)
        if entry is None:
            raise TokenNotFoundError(address, int(self.chain_id), "Protocol token not found")
        return entry
