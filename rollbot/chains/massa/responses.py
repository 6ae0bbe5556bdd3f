"""Typed results of the node API, parsed from JSON-RPC results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...models import Address, Amount, SignedOperation, Slot
from .serialization import amount_from_json, signed_operation_from_dict, slot_from_dict


def _optional_slot(raw: Any) -> Slot | None:
    return slot_from_dict(raw) if raw is not None else None


def _optional_amount(raw: Any) -> Amount | None:
    return amount_from_json(raw) if raw is not None else None


# ---------------------------------------------------------------------------
# Node status
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeConfig:
    """Consensus parameters reported by ``get_status``. Times in milliseconds."""

    thread_count: int
    t0: int
    genesis_timestamp: int
    operation_validity_periods: int
    end_timestamp: int | None = None
    delta_f0: int | None = None
    periods_per_cycle: int | None = None
    roll_price: Amount | None = None
    block_reward: Amount | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> NodeConfig:
        return cls(
            thread_count=int(raw["thread_count"]),
            t0=int(raw["t0"]),
            genesis_timestamp=int(raw["genesis_timestamp"]),
            operation_validity_periods=int(raw["operation_validity_periods"]),
            end_timestamp=raw.get("end_timestamp"),
            delta_f0=raw.get("delta_f0"),
            periods_per_cycle=raw.get("periods_per_cycle"),
            roll_price=_optional_amount(raw.get("roll_price")),
            block_reward=_optional_amount(raw.get("block_reward")),
        )


@dataclass(frozen=True)
class NodeStatus:
    node_id: str
    config: NodeConfig
    next_slot: Slot | None = None
    last_slot: Slot | None = None
    node_ip: str | None = None
    version: str = ""
    current_time: int = 0
    current_cycle: int = 0
    connected_nodes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> NodeStatus:
        return cls(
            node_id=raw["node_id"],
            config=NodeConfig.from_dict(raw["config"]),
            next_slot=_optional_slot(raw.get("next_slot")),
            last_slot=_optional_slot(raw.get("last_slot")),
            node_ip=raw.get("node_ip"),
            version=str(raw.get("version", "")),
            current_time=int(raw.get("current_time", 0)),
            current_cycle=int(raw.get("current_cycle", 0)),
            connected_nodes=dict(raw.get("connected_nodes") or {}),
        )


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerInfo:
    final_balance: Amount = Amount()
    candidate_balance: Amount = Amount()
    locked_balance: Amount = Amount()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LedgerInfo:
        return cls(
            final_balance=amount_from_json(raw["final_ledger_info"]["balance"]),
            candidate_balance=amount_from_json(
                raw["candidate_ledger_info"]["balance"]
            ),
            locked_balance=amount_from_json(raw.get("locked_balance", "0")),
        )


@dataclass(frozen=True)
class RollsInfo:
    active_rolls: int = 0
    final_rolls: int = 0
    candidate_rolls: int = 0

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> RollsInfo:
        return cls(
            active_rolls=int(raw.get("active_rolls", 0)),
            final_rolls=int(raw.get("final_rolls", 0)),
            candidate_rolls=int(raw.get("candidate_rolls", 0)),
        )


@dataclass(frozen=True)
class AddressInfo:
    """Ledger and staking state of one address."""

    address: Address
    thread: int
    ledger_info: LedgerInfo
    rolls: RollsInfo
    block_draws: tuple[Slot, ...] = ()
    blocks_created: tuple[str, ...] = ()
    involved_in_operations: tuple[str, ...] = ()
    involved_in_endorsements: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AddressInfo:
        return cls(
            address=Address.from_str(raw["address"]),
            thread=int(raw["thread"]),
            ledger_info=LedgerInfo.from_dict(raw["ledger_info"]),
            rolls=RollsInfo.from_dict(raw["rolls"]),
            block_draws=tuple(slot_from_dict(s) for s in raw.get("block_draws", [])),
            blocks_created=tuple(raw.get("blocks_created", [])),
            involved_in_operations=tuple(raw.get("involved_in_operations", [])),
            involved_in_endorsements=tuple(raw.get("involved_in_endorsements", [])),
        )


# ---------------------------------------------------------------------------
# Explorer / debug results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PubkeySig:
    public_key: str
    signature: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PubkeySig:
        return cls(public_key=raw["public_key"], signature=raw["signature"])


@dataclass(frozen=True)
class Clique:
    block_ids: tuple[str, ...]
    fitness: int
    is_blockclique: bool

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Clique:
        return cls(
            block_ids=tuple(raw["block_ids"]),
            fitness=int(raw["fitness"]),
            is_blockclique=bool(raw["is_blockclique"]),
        )


@dataclass(frozen=True)
class OperationInfo:
    id: str
    in_pool: bool
    in_blocks: tuple[str, ...]
    is_final: bool
    operation: SignedOperation

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> OperationInfo:
        return cls(
            id=raw["id"],
            in_pool=bool(raw["in_pool"]),
            in_blocks=tuple(raw.get("in_blocks", [])),
            is_final=bool(raw["is_final"]),
            operation=signed_operation_from_dict(raw["operation"], raw["id"]),
        )


@dataclass(frozen=True)
class EndorsementInfo:
    # The endorsement body is carried as received.
    id: str
    in_pool: bool
    in_blocks: tuple[str, ...]
    is_final: bool
    endorsement: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> EndorsementInfo:
        return cls(
            id=raw["id"],
            in_pool=bool(raw["in_pool"]),
            in_blocks=tuple(raw.get("in_blocks", [])),
            is_final=bool(raw["is_final"]),
            endorsement=dict(raw.get("endorsement") or {}),
        )


@dataclass(frozen=True)
class BlockInfoContent:
    is_final: bool
    is_stale: bool
    is_in_blockclique: bool
    block: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockInfo:
    """Block lookup result; ``content`` is None for an unknown block."""

    id: str
    content: BlockInfoContent | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BlockInfo:
        content_raw = raw.get("content")
        content = None
        if content_raw is not None:
            content = BlockInfoContent(
                is_final=bool(content_raw["is_final"]),
                is_stale=bool(content_raw["is_stale"]),
                is_in_blockclique=bool(content_raw["is_in_blockclique"]),
                block=dict(content_raw.get("block") or {}),
            )
        return cls(id=raw["id"], content=content)


@dataclass(frozen=True)
class BlockSummary:
    id: str
    is_final: bool
    is_stale: bool
    is_in_blockclique: bool
    slot: Slot
    creator: Address
    parents: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BlockSummary:
        return cls(
            id=raw["id"],
            is_final=bool(raw["is_final"]),
            is_stale=bool(raw["is_stale"]),
            is_in_blockclique=bool(raw["is_in_blockclique"]),
            slot=slot_from_dict(raw["slot"]),
            creator=Address.from_str(raw["creator"]),
            parents=tuple(raw.get("parents", [])),
        )


@dataclass(frozen=True)
class TimeInterval:
    """Millisecond range: ``start`` included, ``end`` excluded."""

    start: int | None = None
    end: int | None = None

    def to_dict(self) -> dict[str, int | None]:
        return {"start": self.start, "end": self.end}
