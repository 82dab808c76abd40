"""
Angle Protocol Transmuter write adapter

Architecture:
- Protocol tokens (EURA, USDA) are minted and burned by the Transmuter
- Each protocol token is backed by one underlying stablecoin per chain
- Swaps go through swapExactInput / swapExactOutput on the Transmuter

Write actions:
- Deposit:  underlying -> protocol token, exact input amount, min out = 1
- Withdraw: protocol token -> underlying, exact output amount, max in = uint256 max
Both pass deadline = 0.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

from web3 import Web3

from adapters.core.base import MetadataMap, TransactionParams, WriteOnlyDeFiAdapter
from adapters.core.errors import (
    ActionNotImplementedError,
    InvalidWriteActionInputError,
    MissingContractAddressesError,
    TokenNotFoundError,
)
from adapters.core.token_metadata import get_token_metadata
from adapters.core.types import AssetDetails, AssetType, PositionType, ProtocolDetails, ProtocolTokenMetadata
from adapters.core.write_actions import AssetAmountReceiverInput, WriteActionInput, WriteActions
from adapters.protocols import Protocol
from adapters.angle_protocol.abis import TRANSMUTER_ABI
from config.chains import Chain

logger = logging.getLogger(__name__)

MAX_UINT256 = 2**256 - 1
MIN_AMOUNT_OUT = 1
# 0 is passed through unchanged to both swap entry points
NO_DEADLINE = 0

TRANSMUTER_ADDRESS = Web3.to_checksum_address('0x1a7e4e63778B4f12a199C062f3eFdD288afCBce8')

METADATA_FILE_KEY = 'transmuter'

ICON_URL = (
    'https://raw.githubusercontent.com/AngleProtocol/angle-assets/main/'
    '02%20-%20Logos/02%20-%20Logo%20Only/angle-only-fill-blue.png'
)


def _address_table(pairs: Dict[str, str]) -> Mapping[str, str]:
    table = {}
    for protocol_token, underlying in pairs.items():
        key = Web3.to_checksum_address(protocol_token)
        if key in table:
            raise ValueError(f"Duplicate protocol token in address table: {key}")
        table[key] = Web3.to_checksum_address(underlying)
    return MappingProxyType(table)


# protocol token -> underlying token, per chain
CONTRACT_ADDRESSES: Mapping[Chain, Mapping[str, str]] = MappingProxyType({
    Chain.ETHEREUM: _address_table({
        '0x1a7e4e63778B4f12a199C062f3eFdD288afCBce8': '0x1aBaEA1f7C830bD89Acc67eC4af516284b1bC33c',  # EURA -> EURC
        '0x0000206329b97DB379d5E1Bf586BbDB969C63274': '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48',  # USDA -> USDC
    }),
    Chain.BASE: _address_table({
        '0x0000206329b97DB379d5E1Bf586BbDB969C63274': '0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913',
    }),
    Chain.ARBITRUM: _address_table({
        '0x0000206329b97DB379d5E1Bf586BbDB969C63274': '0xaf88d065e77c8cC2239327C5EDb3A432268e5831',
    }),
    Chain.POLYGON: _address_table({
        '0x0000206329b97DB379d5E1Bf586BbDB969C63274': '0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359',
    }),
})

WRITE_ACTION_INPUTS = {
    WriteActions.DEPOSIT: AssetAmountReceiverInput,
    WriteActions.WITHDRAW: AssetAmountReceiverInput,
}


class AngleProtocolTransmuterAdapter(WriteOnlyDeFiAdapter):
    protocol_id = Protocol.ANGLE_PROTOCOL.value
    product_id = 'transmuter'
    write_action_inputs = WRITE_ACTION_INPUTS

    def get_protocol_details(self) -> ProtocolDetails:
        return ProtocolDetails(
            protocol_id=self.protocol_id,
            name='AngleProtocol',
            description='AngleProtocol defi adapter',
            site_url='https://angle.money',
            icon_url=ICON_URL,
            position_type=PositionType.SUPPLY,
            chain_id=int(self.chain_id),
            product_id=self.product_id,
            asset_details=AssetDetails(type=AssetType.NON_STANDARD_ERC20),
        )

    async def build_metadata(self) -> MetadataMap:
        return await self.cached_metadata(METADATA_FILE_KEY, self._fetch_metadata)

    async def _fetch_metadata(self) -> MetadataMap:
        chain_addresses = CONTRACT_ADDRESSES.get(self.chain_id)
        if not chain_addresses:
            raise MissingContractAddressesError(self.protocol_id, self.product_id, int(self.chain_id))

        result: MetadataMap = {}
        for protocol_token_address, underlying_address in chain_addresses.items():
            underlying_token = await get_token_metadata(underlying_address, self.chain_id, self.provider)
            protocol_token = await get_token_metadata(protocol_token_address, self.chain_id, self.provider)

            result[protocol_token.address] = ProtocolTokenMetadata(
                protocol_token=protocol_token,
                underlying_tokens=[underlying_token],
            )
        logger.debug("built %d transmuter entries for %s", len(result), self.chain_id.chain_name)
        return result

    async def get_transaction_params(
        self,
        action: Union[WriteActions, str],
        inputs: Union[Mapping[str, Any], WriteActionInput],
    ) -> TransactionParams:
        if isinstance(inputs, WriteActionInput):
            inputs = inputs.model_dump()

        entry = await self.get_protocol_token_entry(inputs["asset"])
        asset = entry.protocol_token.address
        if not entry.underlying_tokens:
            raise TokenNotFoundError(asset, int(self.chain_id), "Underlying token not found")
        underlying = entry.underlying_tokens[0].address

        transmuter = self.provider.eth.contract(address=TRANSMUTER_ADDRESS, abi=TRANSMUTER_ABI)

        if action == WriteActions.DEPOSIT:
            amount, receiver = self._amount_and_receiver(action, inputs)
            data = transmuter.encode_abi(
                "swapExactInput",
                args=[amount, MIN_AMOUNT_OUT, underlying, asset, receiver, NO_DEADLINE],
            )
        elif action == WriteActions.WITHDRAW:
            amount, receiver = self._amount_and_receiver(action, inputs)
            data = transmuter.encode_abi(
                "swapExactOutput",
                args=[amount, MAX_UINT256, asset, underlying, receiver, NO_DEADLINE],
            )
        else:
            raise ActionNotImplementedError(action, self.protocol_id, self.product_id)

        return {'to': TRANSMUTER_ADDRESS, 'data': data}

    @staticmethod
    def _amount_and_receiver(action, inputs: Mapping[str, Any]):
        raw_amount = inputs["amount"]
        # plain decimal digits only; int() would also take '+5' and '1_000'
        if not isinstance(raw_amount, str) or not (raw_amount.isascii() and raw_amount.isdigit()):
            raise InvalidWriteActionInputError(action, f"amount is not a non-negative integer: {raw_amount!r}")
        amount = int(raw_amount)
        if amount > MAX_UINT256:
            raise InvalidWriteActionInputError(action, f"amount exceeds uint256: {amount}")
        receiver = inputs["receiver"]
        if not Web3.is_address(receiver):
            raise InvalidWriteActionInputError(action, f"receiver is not an address: {receiver!r}")
        return amount, Web3.to_checksum_address(receiver)
