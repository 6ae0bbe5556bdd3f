"""Node API protocol — the calls the operation pipeline needs."""
from typing import Protocol

from ..chains.massa.responses import AddressInfo, NodeStatus
from ..models import Address, SignedOperation


class NodeApi(Protocol):
    """Abstract interface for the node RPC calls used to buy rolls."""

    async def get_status(self) -> NodeStatus: ...

    async def get_addresses(self, addresses: list[Address]) -> list[AddressInfo]: ...

    async def send_operations(self, operations: list[SignedOperation]) -> list[str]: ...
