"""Integration tests for the roll-buy policy — full flow with mocked node."""
from __future__ import annotations

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from rollbot.chains.massa.responses import AddressInfo, NodeStatus
from rollbot.config import RollPolicyConfig
from rollbot.errors import MissingPublicKeyError, NodeUnreachableError, RpcError
from rollbot.models import Amount, RollBuy
from rollbot.services.operation_builder import OperationBuilder
from rollbot.services.roll_buyer import RollBuyer
from rollbot.wallet import KeyringWallet


def _client(infos: list[dict]) -> AsyncMock:
    client = AsyncMock()
    client.get_addresses = AsyncMock(
        return_value=[AddressInfo.from_dict(i) for i in infos]
    )
    return client


class TestRun:
    @pytest.mark.asyncio
    async def test_buys_for_rich_address_without_rolls(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="100")])
        builder = AsyncMock()
        builder.send = AsyncMock(return_value=["op1"])

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        client.get_addresses.assert_awaited_once_with(wallet.addresses())
        builder.send.assert_awaited_once_with(address, RollBuy(roll_count=1), Amount(0))
        assert len(report.address_infos) == 1
        assert report.outcomes[0].operation_ids == ("op1",)
        assert report.outcomes[0].ok

    @pytest.mark.asyncio
    async def test_skips_address_with_candidate_rolls(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="500", candidate_rolls=1)])
        builder = AsyncMock()

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        builder.send.assert_not_called()
        assert report.outcomes == ()

    @pytest.mark.asyncio
    async def test_skips_address_below_threshold(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="99.999999999")])
        builder = AsyncMock()

        await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        builder.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled_policy_only_reports(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="1000")])
        builder = AsyncMock()
        policy = replace(sample_policy, enabled=False)

        report = await RollBuyer(client, wallet, policy, builder=builder).run()

        builder.send.assert_not_called()
        assert len(report.address_infos) == 1

    @pytest.mark.asyncio
    async def test_policy_roll_count_and_fee(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="1000")])
        builder = AsyncMock()
        builder.send = AsyncMock(return_value=["op1"])
        policy = replace(sample_policy, roll_count=3, fee="0.5")

        await RollBuyer(client, wallet, policy, builder=builder).run()

        builder.send.assert_awaited_once_with(
            address, RollBuy(roll_count=3), Amount.from_str("0.5")
        )

    @pytest.mark.asyncio
    async def test_failure_for_one_address_does_not_stop_others(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        first, second = wallet.addresses()
        client = _client(
            [make_address_info(first, balance="200"), make_address_info(second, balance="200")]
        )
        builder = AsyncMock()
        builder.send = AsyncMock(
            side_effect=[MissingPublicKeyError(first), ["op2"]]
        )

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        assert builder.send.await_count == 2
        assert not report.outcomes[0].ok
        assert "Missing public key" in report.outcomes[0].error
        assert report.outcomes[1].operation_ids == ("op2",)

    @pytest.mark.asyncio
    async def test_submission_error_recorded(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="200")])
        builder = AsyncMock()
        builder.send = AsyncMock(
            side_effect=NodeUnreachableError(
                "send_operations", RpcError("send_operations", "reset")
            )
        )

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        assert "check if your node is running" in report.outcomes[0].error

    @pytest.mark.asyncio
    async def test_operation_not_accepted_is_a_failure(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig, make_address_info
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="200")])
        builder = AsyncMock()
        builder.send = AsyncMock(return_value=[])

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        outcome = report.outcomes[0]
        assert not outcome.ok
        assert outcome.operation_ids == ()
        assert outcome.error == "node did not accept the operation"

    @pytest.mark.asyncio
    async def test_address_fetch_failure_propagates(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig
    ) -> None:
        client = AsyncMock()
        client.get_addresses = AsyncMock(side_effect=RpcError("get_addresses", "down"))

        with pytest.raises(RpcError):
            await RollBuyer(client, wallet, sample_policy, builder=AsyncMock()).run()

    @pytest.mark.asyncio
    async def test_empty_wallet(self, sample_policy: RollPolicyConfig) -> None:
        client = AsyncMock()
        wallet = MagicMock()
        wallet.addresses.return_value = []

        report = await RollBuyer(client, wallet, sample_policy, builder=AsyncMock()).run()

        client.get_addresses.assert_not_called()
        assert report.address_infos == ()


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_real_builder_and_wallet(
        self, wallet: KeyringWallet, sample_policy: RollPolicyConfig,
        make_address_info, node_status_dict,
    ) -> None:
        address = wallet.addresses()[0]
        client = _client([make_address_info(address, balance="150")])
        client.get_status = AsyncMock(return_value=NodeStatus.from_dict(node_status_dict))
        client.send_operations = AsyncMock(side_effect=lambda ops: [op.id for op in ops])
        builder = OperationBuilder(client, wallet)

        report = await RollBuyer(client, wallet, sample_policy, builder=builder).run()

        sent = client.send_operations.call_args[0][0]
        assert sent[0].content.op == RollBuy(roll_count=1)
        assert report.outcomes[0].operation_ids == (sent[0].id,)
