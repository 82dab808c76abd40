"""
Write actions and their input schemas.

Each adapter publishes a {WriteActions: pydantic model} map. Inputs are
validated against that map before they reach get_transaction_params().
"""

from enum import Enum
from typing import Any, Dict, Mapping, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from adapters.core.errors import ActionNotImplementedError, InvalidWriteActionInputError


class WriteActions(str, Enum):
    DEPOSIT = 'deposit'
    WITHDRAW = 'withdraw'
    BORROW = 'borrow'
    REPAY = 'repay'

    def __str__(self) -> str:
        return self.value


class WriteActionInput(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)


class AssetAmountReceiverInput(WriteActionInput):
    asset: str
    amount: str
    receiver: str


WriteActionInputSchemas = Dict[WriteActions, Type[WriteActionInput]]


def validate_write_action_inputs(
    schemas: WriteActionInputSchemas,
    action: Union[WriteActions, str],
    inputs: Union[Mapping[str, Any], WriteActionInput],
    protocol_id: str = '',
    product_id: str = '',
) -> WriteActionInput:
    """
    Validate raw inputs against the schema registered for an action.

    Raises:
        ActionNotImplementedError: no schema for the action
        InvalidWriteActionInputError: inputs do not match the schema
    """
    try:
        action = WriteActions(action)
    except ValueError:
        raise ActionNotImplementedError(action, protocol_id, product_id) from None
    schema = schemas.get(action)
    if schema is None:
        raise ActionNotImplementedError(action, protocol_id, product_id)

    if isinstance(inputs, BaseModel):
        inputs = inputs.model_dump()
    try:
        return schema.model_validate(inputs)
    except ValidationError as e:
        raise InvalidWriteActionInputError(action, e.errors()) from e
