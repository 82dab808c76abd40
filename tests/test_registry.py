import asyncio

import pytest

from adapters.angle_protocol.transmuter import TRANSMUTER_ADDRESS, AngleProtocolTransmuterAdapter
from adapters.core.errors import ActionNotImplementedError, AdapterNotFoundError, InvalidWriteActionInputError
from adapters.core.write_actions import (
    AssetAmountReceiverInput,
    WriteActions,
    validate_write_action_inputs,
)
from adapters.protocols import Protocol
from adapters.registry import (
    build_adapter,
    get_adapter_class,
    get_transaction_params,
    get_write_action_schemas,
    supported_chains,
)
from config.chains import Chain

USDA = '0x0000206329b97DB379d5E1Bf586BbDB969C63274'
RECEIVER = '0x' + 'ab' * 20


def test_lookup_by_protocol_and_product():
    assert get_adapter_class(Protocol.ANGLE_PROTOCOL, 'transmuter') is AngleProtocolTransmuterAdapter
    assert get_adapter_class('angle-protocol', 'transmuter') is AngleProtocolTransmuterAdapter
    with pytest.raises(AdapterNotFoundError):
        get_adapter_class('angle-protocol', 'savings')


def test_supported_chains_follow_address_table():
    chains = supported_chains(Protocol.ANGLE_PROTOCOL, 'transmuter')
    assert set(chains) == {Chain.ETHEREUM, Chain.BASE, Chain.ARBITRUM, Chain.POLYGON}


def test_schemas_cover_deposit_and_withdraw():
    schemas = get_write_action_schemas(Protocol.ANGLE_PROTOCOL, 'transmuter')
    assert set(schemas) == {WriteActions.DEPOSIT, WriteActions.WITHDRAW}
    assert schemas[WriteActions.DEPOSIT] is AssetAmountReceiverInput
    assert set(AssetAmountReceiverInput.model_fields) == {'asset', 'amount', 'receiver'}


def test_validation_rejects_malformed_inputs():
    schemas = get_write_action_schemas(Protocol.ANGLE_PROTOCOL, 'transmuter')
    with pytest.raises(InvalidWriteActionInputError):
        validate_write_action_inputs(schemas, 'deposit', {'asset': USDA, 'amount': '1'})
    with pytest.raises(InvalidWriteActionInputError):
        validate_write_action_inputs(schemas, 'deposit', {'asset': USDA, 'amount': 1, 'receiver': RECEIVER})
    with pytest.raises(InvalidWriteActionInputError):
        validate_write_action_inputs(
            schemas, 'withdraw', {'asset': USDA, 'amount': '1', 'receiver': RECEIVER, 'extra': 'x'}
        )
    with pytest.raises(ActionNotImplementedError):
        validate_write_action_inputs(schemas, WriteActions.BORROW, {})
    with pytest.raises(ActionNotImplementedError):
        validate_write_action_inputs(schemas, 'swap', {})

    validated = validate_write_action_inputs(
        schemas, 'withdraw', {'asset': USDA, 'amount': '1', 'receiver': RECEIVER}
    )
    assert validated == AssetAmountReceiverInput(asset=USDA, amount='1', receiver=RECEIVER)


def test_build_adapter_binds_chain(provider):
    adapter = build_adapter('angle-protocol', 'transmuter', 'arbitrum', provider=provider)
    assert isinstance(adapter, AngleProtocolTransmuterAdapter)
    assert adapter.chain_id == Chain.ARBITRUM
    assert adapter.provider is provider


def test_get_transaction_params_end_to_end(provider, token_resolver):
    tx = asyncio.run(get_transaction_params(
        Protocol.ANGLE_PROTOCOL,
        'transmuter',
        Chain.BASE,
        'deposit',
        {'asset': USDA, 'amount': '42', 'receiver': RECEIVER},
        provider=provider,
    ))
    assert tx['to'] == TRANSMUTER_ADDRESS
    assert tx['data'].startswith('0x')


def test_get_transaction_params_validates_before_fetching(provider, token_resolver):
    with pytest.raises(InvalidWriteActionInputError):
        asyncio.run(get_transaction_params(
            Protocol.ANGLE_PROTOCOL, 'transmuter', Chain.BASE, 'withdraw', {'asset': USDA}, provider=provider,
        ))
    with pytest.raises(ActionNotImplementedError):
        asyncio.run(get_transaction_params(
            Protocol.ANGLE_PROTOCOL, 'transmuter', Chain.BASE, 'repay',
            {'asset': USDA, 'amount': '1', 'receiver': RECEIVER}, provider=provider,
        ))
    assert token_resolver.calls == []
