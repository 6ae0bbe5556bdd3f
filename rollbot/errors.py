"""Error taxonomy for the node client."""
from __future__ import annotations


class RollbotError(Exception):
    """Base class for all client errors."""


class NodeConnectionError(RollbotError):
    """The node could not be reached when opening the transport."""


class RpcError(RollbotError):
    """A single JSON-RPC call failed (network, protocol or node-side)."""

    def __init__(self, method: str, message: str, code: int | None = None) -> None:
        self.method = method
        self.message = message
        self.code = code
        super().__init__(f"{method}: {message}")


class MalformedResultError(RpcError):
    """The node answered, but the result does not have the expected shape."""

    def __init__(self, method: str, cause: Exception) -> None:
        super().__init__(method, f"malformed result: {cause!r}")
        self.cause = cause


class NodeUnreachableError(RpcError):
    """An RPC failure while building or submitting an operation."""

    def __init__(self, method: str, cause: Exception) -> None:
        super().__init__(method, f"check if your node is running: {cause}")
        self.cause = cause


class MissingPublicKeyError(RollbotError):
    """The wallet holds no key for the sender address."""

    def __init__(self, address: object) -> None:
        self.address = address
        super().__init__(f"Missing public key for address {address}")


class SlotComputationError(RollbotError):
    """Invalid time configuration while deriving a slot."""


class AmountError(RollbotError, ValueError):
    """Amount out of range or not representable."""


class WalletError(RollbotError):
    """Wallet file unreadable or signing produced an inconsistent operation."""
