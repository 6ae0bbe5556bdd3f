"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import base58
import pytest

from rollbot.config import (
    AppConfig,
    NodeEndpointConfig,
    RollPolicyConfig,
    WalletFileConfig,
)
from rollbot.models import Address, Amount, OperationContent, RollBuy, Slot
from rollbot.wallet import KeyringWallet

GENESIS = 1_600_000_000_000
T0 = 16_000
THREAD_COUNT = 32


def _address_in_thread(thread: int, thread_count: int = THREAD_COUNT) -> Address:
    """Address whose first byte puts it in ``thread``."""
    shift = 8 - ((thread_count & -thread_count).bit_length() - 1)
    return Address(bytes([thread << shift]) + bytes(31))


def _timestamp_of(slot: Slot) -> int:
    """A moment shortly after ``slot`` starts, with the fixture node config."""
    return GENESIS + slot.period * T0 + slot.thread * (T0 // THREAD_COUNT) + 1


# ---------------------------------------------------------------------------
# Keys and wallets
# ---------------------------------------------------------------------------


@pytest.fixture()
def private_keys() -> list[str]:
    return [
        base58.b58encode_check(bytes([i]) * 32).decode("ascii") for i in (1, 2)
    ]


@pytest.fixture()
def wallet(private_keys: list[str]) -> KeyringWallet:
    return KeyringWallet(private_keys)


@pytest.fixture()
def wallet_path(tmp_path: Path, private_keys: list[str]) -> Path:
    path = tmp_path / "wallet.dat"
    path.write_text('["' + '", "'.join(private_keys) + '"]')
    return path


@pytest.fixture()
def sample_content(wallet: KeyringWallet) -> OperationContent:
    address = wallet.addresses()[0]
    return OperationContent(
        sender_public_key=wallet.find_associated_public_key(address),
        fee=Amount.from_str("0.01"),
        expire_period=110,
        op=RollBuy(roll_count=1),
    )


# ---------------------------------------------------------------------------
# Node responses
# ---------------------------------------------------------------------------


@pytest.fixture()
def node_status_dict() -> dict[str, Any]:
    return {
        "node_id": "2Rxs4fm1XxE5jTVHBn1Q7xgNM7SMyyhw1kHaKRDLw6hX3Nvs3H",
        "node_ip": "51.77.221.132",
        "version": "TEST.4.0",
        "current_time": GENESIS + 100 * T0,
        "current_cycle": 1,
        "connected_nodes": {},
        "last_slot": {"period": 99, "thread": 31},
        "next_slot": {"period": 100, "thread": 0},
        "config": {
            "genesis_timestamp": GENESIS,
            "end_timestamp": None,
            "thread_count": THREAD_COUNT,
            "t0": T0,
            "delta_f0": 64,
            "operation_validity_periods": 10,
            "periods_per_cycle": 128,
            "roll_price": "100",
            "block_reward": "0.3",
        },
    }


def _make_address_info(
    address: Address, balance: str = "150", candidate_rolls: int = 0
) -> dict[str, Any]:
    return {
        "address": str(address),
        "thread": address.thread(THREAD_COUNT),
        "ledger_info": {
            "locked_balance": "0",
            "candidate_ledger_info": {"balance": balance},
            "final_ledger_info": {"balance": balance},
        },
        "rolls": {
            "active_rolls": 0,
            "final_rolls": candidate_rolls,
            "candidate_rolls": candidate_rolls,
        },
        "block_draws": [{"period": 101, "thread": 3}],
        "endorsement_draws": {},
        "blocks_created": [],
        "involved_in_endorsements": [],
        "involved_in_operations": [],
        "is_staking": False,
    }


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_policy() -> RollPolicyConfig:
    return RollPolicyConfig(enabled=True, min_balance="100", roll_count=1, fee="0")


@pytest.fixture()
def sample_app_config(sample_policy: RollPolicyConfig) -> AppConfig:
    return AppConfig(
        node=NodeEndpointConfig(host="127.0.0.1", port=33035, timeout=10),
        wallet=WalletFileConfig(path="wallet.dat"),
        roll_policy=sample_policy,
    )


SAMPLE_YAML = textwrap.dedent("""\
    node:
      host: "10.0.0.5"
      port: 33036
      timeout: 10
      clock_compensation: 0
    wallet:
      path: "/tmp/wallet.dat"
    roll_policy:
      enabled: true
      min_balance: "150.5"
      roll_count: 2
      fee: "0.01"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------


@pytest.fixture()
def address_in_thread():
    return _address_in_thread


@pytest.fixture()
def timestamp_of():
    return _timestamp_of


@pytest.fixture()
def make_address_info():
    return _make_address_info
