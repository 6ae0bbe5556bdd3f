"""Roll-buy policy — iterates wallet addresses and buys rolls where due."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..chains.massa.responses import AddressInfo
from ..config import RollPolicyConfig
from ..errors import RollbotError
from ..interfaces.node import NodeApi
from ..interfaces.wallet import Wallet
from ..models import Address, Amount, RollBuy
from .operation_builder import OperationBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollBuyOutcome:
    """Result for one address that qualified for a roll purchase."""

    address: Address
    operation_ids: tuple[str, ...] = ()
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass(frozen=True)
class RollBuyReport:
    address_infos: tuple[AddressInfo, ...] = ()
    outcomes: tuple[RollBuyOutcome, ...] = ()


class RollBuyer:
    """Buys rolls for wallet addresses that stake nothing yet and can afford it."""

    def __init__(
        self,
        client: NodeApi,
        wallet: Wallet,
        policy: RollPolicyConfig,
        builder: OperationBuilder | None = None,
    ) -> None:
        self._client = client
        self._wallet = wallet
        self._policy = policy
        self._min_balance = Amount.from_str(policy.min_balance)
        self._fee = Amount.from_str(policy.fee)
        self._builder = builder or OperationBuilder(client, wallet)

    def should_buy(self, info: AddressInfo) -> bool:
        return (
            info.rolls.candidate_rolls == 0
            and info.ledger_info.final_balance >= self._min_balance
        )

    async def run(self) -> RollBuyReport:
        """Fetch address state, then buy where the policy says so.

        A failure for one address is recorded in its outcome and does not stop
        the others. Failing to fetch the address list propagates.
        """
        addresses = self._wallet.addresses()
        if not addresses:
            logger.warning("Wallet holds no addresses")
            return RollBuyReport()

        infos = await self._client.get_addresses(addresses)
        outcomes: list[RollBuyOutcome] = []

        for info in infos:
            logger.info(
                "Address %s · thread %d · final balance %s · candidate rolls %d",
                info.address,
                info.thread,
                info.ledger_info.final_balance,
                info.rolls.candidate_rolls,
            )
            if not self._policy.enabled or not self.should_buy(info):
                continue

            op = RollBuy(roll_count=self._policy.roll_count)
            try:
                accepted = await self._builder.send(info.address, op, self._fee)
            except RollbotError as e:
                logger.error("Roll purchase for %s failed: %s", info.address, e)
                outcomes.append(RollBuyOutcome(address=info.address, error=str(e)))
                continue

            if not accepted:
                outcomes.append(
                    RollBuyOutcome(
                        address=info.address,
                        error="node did not accept the operation",
                    )
                )
                continue

            outcomes.append(
                RollBuyOutcome(address=info.address, operation_ids=tuple(accepted))
            )

        return RollBuyReport(address_infos=tuple(infos), outcomes=tuple(outcomes))
