import os
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.angle_protocol import transmuter  # noqa: E402
from adapters.core.types import Erc20Metadata  # noqa: E402

# Known symbols for the addresses in the transmuter address table
KNOWN_TOKENS: Dict[str, Tuple[str, str, int]] = {
    '0x1a7e4e63778B4f12a199C062f3eFdD288afCBce8': ('EURA', 'EURA', 18),
    '0x0000206329b97DB379d5E1Bf586BbDB969C63274': ('USDA', 'USDA', 18),
    '0x1aBaEA1f7C830bD89Acc67eC4af516284b1bC33c': ('Euro Coin', 'EURC', 6),
    '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48': ('USD Coin', 'USDC', 6),
    '0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913': ('USD Coin', 'USDC', 6),
    '0xaf88d065e77c8cC2239327C5EDb3A432268e5831': ('USD Coin', 'USDC', 6),
    '0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359': ('USD Coin', 'USDC', 6),
}


class FakeTokenResolver:
    """Stand-in for get_token_metadata that records every fetch."""

    def __init__(self):
        self.calls: List[Tuple[str, int]] = []

    async def __call__(self, address, chain_id, provider):
        address = Web3.to_checksum_address(address)
        self.calls.append((address, int(chain_id)))
        name, symbol, decimals = KNOWN_TOKENS[address]
        return Erc20Metadata(address=address, name=name, symbol=symbol, decimals=decimals)


@pytest.fixture
def provider():
    # Never connected; only used to build contract objects for ABI encoding
    return AsyncWeb3(AsyncHTTPProvider("http://127.0.0.1:8545"))


@pytest.fixture
def token_resolver(monkeypatch):
    resolver = FakeTokenResolver()
    monkeypatch.setattr(transmuter, "get_token_metadata", resolver)
    return resolver


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("ALCHEMY_API_KEY", raising=False)
    monkeypatch.delenv("DEFI_ADAPTERS_CACHE_DIR", raising=False)
    for name in list(os.environ):
        if name.startswith("DEFI_ADAPTERS_RPC_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
