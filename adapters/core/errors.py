"""Exceptions raised by write adapters and the adapter registry."""


class AdapterError(Exception):
    """Base class for adapter failures."""


class MissingContractAddressesError(AdapterError):
    """The adapter has no contract address table for the requested chain."""

    def __init__(self, protocol_id: str, product_id: str, chain_id: int):
        self.protocol_id = protocol_id
        self.product_id = product_id
        self.chain_id = chain_id
        super().__init__(
            f"No contract addresses found for chain {chain_id} "
            f"({protocol_id}/{product_id})"
        )


class TokenNotFoundError(AdapterError, LookupError):
    """A protocol token, or its underlying token, is missing from metadata."""

    def __init__(self, address: str, chain_id: int, message: str = "Token not found"):
        self.address = address
        self.chain_id = chain_id
        super().__init__(f"{message}: {address} on chain {chain_id}")


class ActionNotImplementedError(AdapterError, NotImplementedError):
    """The adapter does not support the requested write action."""

    def __init__(self, action, protocol_id: str, product_id: str):
        self.action = action
        super().__init__(f"Action {action!s} is not implemented for {protocol_id}/{product_id}")


class AdapterNotFoundError(AdapterError, LookupError):
    """No adapter is registered for a (protocol, product) pair."""


class InvalidWriteActionInputError(AdapterError, ValueError):
    """Write action inputs failed schema validation."""

    def __init__(self, action, errors):
        self.action = action
        self.errors = errors
        super().__init__(f"Invalid inputs for action {action!s}: {errors}")
