"""Typed wrappers over the node's JSON-RPC methods."""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from ...errors import MalformedResultError
from ...models import Address, SignedOperation
from .responses import (
    AddressInfo,
    BlockInfo,
    BlockSummary,
    Clique,
    EndorsementInfo,
    NodeStatus,
    OperationInfo,
    PubkeySig,
    TimeInterval,
)
from .serialization import signed_operation_to_dict
from .transport import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MassaClient:
    """Node API client. Every method is a single round trip, never retried.

    Params are always sent as a JSON array matching the method's parameter
    list, even for methods without arguments.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def _call(
        self, method: str, params: list[Any], parse: Callable[[Any], T]
    ) -> T:
        result = await self._transport.call(method, params)
        try:
            return parse(result)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MalformedResultError(method, e) from e

    @staticmethod
    def _none(result: Any) -> None:
        return None

    # ------------------------------------------------------------------
    # Node control (private api)
    # ------------------------------------------------------------------

    async def stop_node(self) -> None:
        """Gracefully stop the node."""
        await self._call("stop_node", [], self._none)

    async def node_sign_message(self, message: bytes) -> PubkeySig:
        """Sign ``message`` with the node's key."""
        return await self._call(
            "node_sign_message", [list(message)], PubkeySig.from_dict
        )

    async def add_staking_private_keys(self, private_keys: list[str]) -> None:
        """Add private keys the node stakes with. No confirmation to expect."""
        await self._call("add_staking_private_keys", [list(private_keys)], self._none)

    async def remove_staking_addresses(self, addresses: list[Address]) -> None:
        await self._call(
            "remove_staking_addresses", [[str(a) for a in addresses]], self._none
        )

    async def get_staking_addresses(self) -> set[Address]:
        return await self._call(
            "get_staking_addresses",
            [],
            lambda result: {Address.from_str(a) for a in result},
        )

    async def ban(self, ips: list[str]) -> None:
        await self._call("ban", [list(ips)], self._none)

    async def unban(self, ips: list[str]) -> None:
        await self._call("unban", [list(ips)], self._none)

    # ------------------------------------------------------------------
    # Explorer / debug (public api)
    # ------------------------------------------------------------------

    async def get_status(self) -> NodeStatus:
        """Node summary, including its consensus configuration."""
        return await self._call("get_status", [], NodeStatus.from_dict)

    async def get_cliques(self) -> list[Clique]:
        return await self._call(
            "get_cliques", [], lambda result: [Clique.from_dict(c) for c in result]
        )

    async def get_stakers(self) -> dict[Address, int]:
        """Active stakers and their roll counts for the current cycle."""
        return await self._call(
            "get_stakers",
            [],
            lambda result: {Address.from_str(a): int(n) for a, n in result.items()},
        )

    async def get_operations(self, operation_ids: list[str]) -> list[OperationInfo]:
        return await self._call(
            "get_operations",
            [list(operation_ids)],
            lambda result: [OperationInfo.from_dict(o) for o in result],
        )

    async def get_endorsements(
        self, endorsement_ids: list[str]
    ) -> list[EndorsementInfo]:
        return await self._call(
            "get_endorsements",
            [list(endorsement_ids)],
            lambda result: [EndorsementInfo.from_dict(e) for e in result],
        )

    async def get_block(self, block_id: str) -> BlockInfo:
        return await self._call("get_block", [block_id], BlockInfo.from_dict)

    async def get_graph_interval(
        self, time_interval: TimeInterval
    ) -> list[BlockSummary]:
        """Block graph between ``start`` (included) and ``end`` (excluded)."""
        return await self._call(
            "get_graph_interval",
            [time_interval.to_dict()],
            lambda result: [BlockSummary.from_dict(b) for b in result],
        )

    async def get_addresses(self, addresses: list[Address]) -> list[AddressInfo]:
        return await self._call(
            "get_addresses",
            [[str(a) for a in addresses]],
            lambda result: [AddressInfo.from_dict(a) for a in result],
        )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def send_operations(self, operations: list[SignedOperation]) -> list[str]:
        """Add operations to the pool.

        Returns the ids of the operations the node accepted; rejected ones are
        simply absent. Acceptance does not mean inclusion in a block.
        """
        if not operations:
            logger.debug("send_operations called with no operations")
            return []
        return await self._call(
            "send_operations",
            [[signed_operation_to_dict(op) for op in operations]],
            lambda result: [str(op_id) for op_id in result],
        )
