"""
Chain identifiers.

Chains are keyed by EVM chain id. Lowercase names match the keys used
throughout the RPC configuration ('ethereum', 'arbitrum', ...).
"""

from enum import IntEnum
from typing import Union


class Chain(IntEnum):
    ETHEREUM = 1
    OPTIMISM = 10
    BSC = 56
    POLYGON = 137
    FANTOM = 250
    BASE = 8453
    ARBITRUM = 42161
    AVALANCHE = 43114
    LINEA = 59144

    @property
    def chain_name(self) -> str:
        return CHAIN_NAMES[self]


CHAIN_NAMES = {
    Chain.ETHEREUM: 'ethereum',
    Chain.OPTIMISM: 'optimism',
    Chain.BSC: 'binance',
    Chain.POLYGON: 'polygon',
    Chain.FANTOM: 'fantom',
    Chain.BASE: 'base',
    Chain.ARBITRUM: 'arbitrum',
    Chain.AVALANCHE: 'avalanche',
    Chain.LINEA: 'linea',
}

# Alternative spellings seen in configs and CLIs
CHAIN_ALIASES = {
    'eth': Chain.ETHEREUM,
    'mainnet': Chain.ETHEREUM,
    'bsc': Chain.BSC,
    'bnb': Chain.BSC,
    'matic': Chain.POLYGON,
    'arb': Chain.ARBITRUM,
    'avax': Chain.AVALANCHE,
    'op': Chain.OPTIMISM,
}

_BY_NAME = {name: chain for chain, name in CHAIN_NAMES.items()}


def chain_from_name(value: Union[str, int, Chain]) -> Chain:
    """
    Resolve a chain from its id, lowercase name, or alias.

    Args:
        value: Chain member, chain id (int or numeric string), or name

    Returns:
        Matching Chain

    Raises:
        ValueError: if nothing matches
    """
    if isinstance(value, Chain):
        return value
    if isinstance(value, int):
        return Chain(value)

    key = str(value).strip().lower()
    if key.isdigit():
        return Chain(int(key))
    if key in _BY_NAME:
        return _BY_NAME[key]
    if key in CHAIN_ALIASES:
        return CHAIN_ALIASES[key]
    raise ValueError(f"Unknown chain: {value}")
