"""
Adapter registry: (protocol, product) -> write adapter class.

get_transaction_params() is the entry point used by the execution layer:
it validates inputs against the adapter's published schemas, builds the
adapter for the chain, and delegates.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from web3 import AsyncWeb3

from adapters.angle_protocol import transmuter
from adapters.core.base import TransactionParams, WriteOnlyDeFiAdapter
from adapters.core.cache import MetadataCache
from adapters.core.errors import AdapterNotFoundError
from adapters.core.write_actions import WriteActionInputSchemas, WriteActions, validate_write_action_inputs
from adapters.protocols import Protocol
from config.chains import Chain, chain_from_name
from config.rpc_config import get_provider

ADAPTER_REGISTRY: Dict[Tuple[str, str], Type[WriteOnlyDeFiAdapter]] = {
    (Protocol.ANGLE_PROTOCOL.value, 'transmuter'): transmuter.AngleProtocolTransmuterAdapter,
    # add (Protocol.X.value, 'product'): XAdapter, etc.
}

# Chain support per adapter, taken from each adapter's address table
SUPPORTED_CHAINS: Dict[Tuple[str, str], Tuple[Chain, ...]] = {
    (Protocol.ANGLE_PROTOCOL.value, 'transmuter'): tuple(transmuter.CONTRACT_ADDRESSES),
}


def _key(protocol_id: Union[Protocol, str], product_id: str) -> Tuple[str, str]:
    return (str(protocol_id), product_id)


def get_adapter_class(protocol_id: Union[Protocol, str], product_id: str) -> Type[WriteOnlyDeFiAdapter]:
    key = _key(protocol_id, product_id)
    if key not in ADAPTER_REGISTRY:
        raise AdapterNotFoundError(f"No adapter registered for {key}")
    return ADAPTER_REGISTRY[key]


def get_write_action_schemas(protocol_id: Union[Protocol, str], product_id: str) -> WriteActionInputSchemas:
    return get_adapter_class(protocol_id, product_id).write_action_inputs


def supported_chains(protocol_id: Union[Protocol, str], product_id: str) -> List[Chain]:
    get_adapter_class(protocol_id, product_id)
    return list(SUPPORTED_CHAINS.get(_key(protocol_id, product_id), ()))


def build_adapter(
    protocol_id: Union[Protocol, str],
    product_id: str,
    chain: Union[Chain, int, str],
    provider: Optional[AsyncWeb3] = None,
    cache: Optional[MetadataCache] = None,
) -> WriteOnlyDeFiAdapter:
    """
    Instantiate the adapter for a (protocol, product) on a chain.

    Args:
        provider: AsyncWeb3 to use (built from config/rpc_config if not provided)
        cache: metadata cache shared between adapters (optional)
    """
    adapter_cls = get_adapter_class(protocol_id, product_id)
    chain = chain_from_name(chain)
    if provider is None:
        provider = get_provider(chain)
    return adapter_cls(provider=provider, chain_id=chain, cache=cache)


async def get_transaction_params(
    protocol_id: Union[Protocol, str],
    product_id: str,
    chain: Union[Chain, int, str],
    action: Union[WriteActions, str],
    inputs: Mapping[str, Any],
    provider: Optional[AsyncWeb3] = None,
    cache: Optional[MetadataCache] = None,
) -> TransactionParams:
    schemas = get_write_action_schemas(protocol_id, product_id)
    validated = validate_write_action_inputs(schemas, action, inputs, str(protocol_id), product_id)
    adapter = build_adapter(protocol_id, product_id, chain, provider=provider, cache=cache)
    return await adapter.get_transaction_params(WriteActions(action), validated)
