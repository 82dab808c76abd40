"""
RPC URL resolution and async web3 provider construction.

Resolution order for a chain:
  1) explicit override (settings.rpc_urls / DEFI_ADAPTERS_RPC_<CHAIN>)
  2) Alchemy URL pattern (when an API key is available)
  3) public RPC
"""

from typing import Optional, Union

from web3 import AsyncHTTPProvider, AsyncWeb3

from config.chains import Chain, chain_from_name
from config.settings import Settings, load_settings

# Alchemy URL patterns
ALCHEMY_PATTERNS = {
    Chain.ETHEREUM: 'https://eth-mainnet.g.alchemy.com/v2/{key}',
    Chain.POLYGON: 'https://polygon-mainnet.g.alchemy.com/v2/{key}',
    Chain.ARBITRUM: 'https://arb-mainnet.g.alchemy.com/v2/{key}',
    Chain.OPTIMISM: 'https://opt-mainnet.g.alchemy.com/v2/{key}',
    Chain.BASE: 'https://base-mainnet.g.alchemy.com/v2/{key}',
    Chain.BSC: 'https://bnb-mainnet.g.alchemy.com/v2/{key}',
    Chain.LINEA: 'https://linea-mainnet.g.alchemy.com/v2/{key}',
    Chain.AVALANCHE: 'https://avax-mainnet.g.alchemy.com/v2/{key}',
}

# Public RPCs, used when no Alchemy key is configured
PUBLIC_RPCS = {
    Chain.ETHEREUM: 'https://eth.llamarpc.com',
    Chain.POLYGON: 'https://polygon-rpc.com',
    Chain.ARBITRUM: 'https://arb1.arbitrum.io/rpc',
    Chain.OPTIMISM: 'https://mainnet.optimism.io',
    Chain.BASE: 'https://mainnet.base.org',
    Chain.BSC: 'https://bsc-dataseed.binance.org',
    Chain.LINEA: 'https://rpc.linea.build',
    Chain.AVALANCHE: 'https://api.avax.network/ext/bc/C/rpc',
    Chain.FANTOM: 'https://rpc.ftm.tools',
}


def get_rpc_url(
    chain: Union[Chain, str, int],
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Get RPC URL for a chain.

    Args:
        chain: Chain member, chain id, or name (e.g., 'ethereum', 'arbitrum')
        api_key: Alchemy API key (falls back to settings / ALCHEMY_API_KEY)
        settings: Preloaded settings (loaded from config if not provided)

    Returns:
        Complete RPC URL
    """
    chain = chain_from_name(chain)
    settings = settings if settings is not None else load_settings()

    override = settings.rpc_urls.get(chain.chain_name)
    if override:
        return override

    key = api_key or settings.alchemy_api_key
    if chain in ALCHEMY_PATTERNS and key:
        return ALCHEMY_PATTERNS[chain].format(key=key)

    # every Chain member has a public RPC
    return PUBLIC_RPCS[chain]


def get_provider(
    chain: Union[Chain, str, int],
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AsyncWeb3:
    """Build an AsyncWeb3 instance for the chain. No connection is made here."""
    return AsyncWeb3(AsyncHTTPProvider(get_rpc_url(chain, api_key=api_key, settings=settings)))
