"""
ERC20 metadata resolver.

Reads name/symbol/decimals straight from the token contract. Legacy tokens
that return bytes32 for name/symbol (e.g. MKR) are retried with a bytes32 ABI.
RPC failures are not caught here; they propagate to the caller.
"""

import logging
from typing import Union

from web3 import AsyncWeb3, Web3
from web3.exceptions import BadFunctionCallOutput

from adapters.core.types import Erc20Metadata
from config.chains import Chain

logger = logging.getLogger(__name__)

# Minimal ERC20 ABI
ERC20_ABI = [
    {
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_BYTES32_ABI = [
    {
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def _bytes32_to_str(value: bytes) -> str:
    return value.rstrip(b"\x00").decode("utf-8", errors="replace")


async def _read_text(provider: AsyncWeb3, address: str, fn_name: str) -> str:
    token = provider.eth.contract(address=address, abi=ERC20_ABI)
    try:
        return await getattr(token.functions, fn_name)().call()
    except BadFunctionCallOutput:
        legacy = provider.eth.contract(address=address, abi=ERC20_BYTES32_ABI)
        raw = await getattr(legacy.functions, fn_name)().call()
        return _bytes32_to_str(raw)


async def get_token_metadata(
    address: str,
    chain_id: Union[Chain, int],
    provider: AsyncWeb3,
) -> Erc20Metadata:
    """
    Fetch ERC20 metadata for a token.

    Args:
        address: Token address (any case)
        chain_id: Chain the token lives on (used for logging only)
        provider: AsyncWeb3 instance connected to that chain

    Returns:
        Erc20Metadata with a checksummed address
    """
    address = Web3.to_checksum_address(address)
    logger.debug("fetching token metadata for %s on chain %s", address, int(chain_id))

    name = await _read_text(provider, address, "name")
    symbol = await _read_text(provider, address, "symbol")
    token = provider.eth.contract(address=address, abi=ERC20_ABI)
    decimals = await token.functions.decimals().call()

    return Erc20Metadata(address=address, name=name, symbol=symbol, decimals=int(decimals))
