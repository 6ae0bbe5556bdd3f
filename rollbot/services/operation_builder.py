"""Builds, signs and submits operations against live node status."""
from __future__ import annotations

import logging
from typing import Callable

from ..chains.massa.timeslots import (
    get_block_slot_timestamp,
    get_current_latest_block_slot,
)
from ..errors import (
    MalformedResultError,
    MissingPublicKeyError,
    NodeUnreachableError,
    RpcError,
    WalletError,
)
from ..interfaces.node import NodeApi
from ..interfaces.wallet import Wallet
from ..models import (
    Address,
    Amount,
    OperationContent,
    OperationType,
    SignedOperation,
    Slot,
)

logger = logging.getLogger(__name__)


def compute_expire_period(
    slot: Slot, validity_periods: int, address: Address, thread_count: int
) -> int:
    """Last period in which an operation sent at ``slot`` stays valid.

    An operation only lands in blocks of the sender's thread. Once the current
    slot has reached that thread, the next chance is the following period, so
    the window moves forward by one.
    """
    expire_period = slot.period + validity_periods
    if slot.thread >= address.thread(thread_count):
        expire_period += 1
    return expire_period


class OperationBuilder:
    """Stateless pipeline: node status -> expiry -> key lookup -> signature."""

    def __init__(
        self,
        client: NodeApi,
        wallet: Wallet,
        clock_compensation: int = 0,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._client = client
        self._wallet = wallet
        self._clock_compensation = clock_compensation
        # Millisecond clock; None reads the system time.
        self._clock = clock

    async def build(
        self, address: Address, op: OperationType, fee: Amount
    ) -> SignedOperation:
        """Produce a signed operation from ``address`` ready for submission.

        Raises:
            NodeUnreachableError: ``get_status`` failed in transit.
            MalformedResultError: ``get_status`` answered with an unusable result.
            SlotComputationError: the node reported an unusable time config.
            MissingPublicKeyError: the wallet has no key for ``address``.
            WalletError: signing altered the operation content.
        """
        try:
            status = await self._client.get_status()
        except MalformedResultError:
            raise
        except RpcError as e:
            raise NodeUnreachableError("get_status", e) from e
        cfg = status.config

        slot = get_current_latest_block_slot(
            cfg.thread_count,
            cfg.t0,
            cfg.genesis_timestamp,
            self._clock_compensation,
            self._clock() if self._clock else None,
        ) or Slot(0, 0)

        expire_period = compute_expire_period(
            slot, cfg.operation_validity_periods, address, cfg.thread_count
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Current slot %s, operation from %s valid through period %d (until %d ms)",
                slot,
                address,
                expire_period,
                get_block_slot_timestamp(
                    cfg.thread_count,
                    cfg.t0,
                    cfg.genesis_timestamp,
                    Slot(expire_period + 1, 0),
                ),
            )

        sender_public_key = self._wallet.find_associated_public_key(address)
        if sender_public_key is None:
            raise MissingPublicKeyError(address)

        content = OperationContent(
            sender_public_key=sender_public_key,
            fee=fee,
            expire_period=expire_period,
            op=op,
        )
        signed = self._wallet.sign_operation(content, address)
        if signed.content != content:
            raise WalletError(f"Wallet altered operation content for {address}")
        return signed

    async def send(
        self, address: Address, op: OperationType, fee: Amount
    ) -> list[str]:
        """Build then submit one operation. Returns the accepted operation ids."""
        operation = await self.build(address, op, fee)
        try:
            accepted = await self._client.send_operations([operation])
        except MalformedResultError:
            raise
        except RpcError as e:
            raise NodeUnreachableError("send_operations", e) from e

        if operation.id and operation.id not in accepted:
            logger.warning("Node did not accept operation %s", operation.id)
        else:
            logger.info("Sent operation IDs: %s", ", ".join(accepted))
        return accepted
