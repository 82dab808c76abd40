"""Shared records describing protocols and tokens."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List


class PositionType(str, Enum):
    SUPPLY = 'supply'
    LEND = 'lend'
    BORROW = 'borrow'
    STAKED = 'stake'
    REWARD = 'reward'


class AssetType(str, Enum):
    STANDARD_ERC20 = 'standard_erc20'
    NON_STANDARD_ERC20 = 'non_standard_erc20'


@dataclass(frozen=True)
class AssetDetails:
    type: AssetType


@dataclass(frozen=True)
class ProtocolDetails:
    protocol_id: str
    name: str
    description: str
    site_url: str
    icon_url: str
    position_type: PositionType
    chain_id: int
    product_id: str
    asset_details: AssetDetails


@dataclass(frozen=True)
class Erc20Metadata:
    address: str
    name: str
    symbol: str
    decimals: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Erc20Metadata":
        return cls(
            address=d["address"],
            name=d["name"],
            symbol=d["symbol"],
            decimals=int(d["decimals"]),
        )


@dataclass(frozen=True)
class ProtocolTokenMetadata:
    """A protocol token and the asset(s) backing it."""

    protocol_token: Erc20Metadata
    underlying_tokens: List[Erc20Metadata] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol_token": self.protocol_token.to_dict(),
            "underlying_tokens": [t.to_dict() for t in self.underlying_tokens],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProtocolTokenMetadata":
        return cls(
            protocol_token=Erc20Metadata.from_dict(d["protocol_token"]),
            underlying_tokens=[Erc20Metadata.from_dict(t) for t in d.get("underlying_tokens", [])],
        )


def encode_metadata_map(metadata: Dict[str, ProtocolTokenMetadata]) -> Dict[str, Any]:
    return {address: entry.to_dict() for address, entry in metadata.items()}


def decode_metadata_map(raw: Dict[str, Any]) -> Dict[str, ProtocolTokenMetadata]:
    return {address: ProtocolTokenMetadata.from_dict(entry) for address, entry in raw.items()}
