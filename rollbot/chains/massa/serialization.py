"""JSON shapes of operations as the node expects them — no I/O."""
from __future__ import annotations

from typing import Any

from ...models import (
    Address,
    Amount,
    ExecuteSC,
    OperationContent,
    OperationType,
    RollBuy,
    RollSell,
    SignedOperation,
    Slot,
    Transaction,
)

# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def slot_from_dict(raw: dict[str, Any]) -> Slot:
    return Slot(period=int(raw["period"]), thread=int(raw["thread"]))


def amount_from_json(raw: Any) -> Amount:
    # Amounts travel as decimal strings; tolerate bare numbers.
    return Amount.from_str(str(raw))


# ---------------------------------------------------------------------------
# Operation types (externally tagged)
# ---------------------------------------------------------------------------


def operation_type_to_dict(op: OperationType) -> dict[str, Any]:
    if isinstance(op, Transaction):
        return {
            "Transaction": {
                "recipient_address": str(op.recipient_address),
                "amount": str(op.amount),
            }
        }
    if isinstance(op, RollBuy):
        return {"RollBuy": {"roll_count": op.roll_count}}
    if isinstance(op, RollSell):
        return {"RollSell": {"roll_count": op.roll_count}}
    if isinstance(op, ExecuteSC):
        return {
            "ExecuteSC": {
                "data": list(op.data),
                "max_gas": op.max_gas,
                "coins": str(op.coins),
                "gas_price": str(op.gas_price),
            }
        }
    raise TypeError(f"Unknown operation type: {type(op).__name__}")


def operation_type_from_dict(raw: dict[str, Any]) -> OperationType:
    if len(raw) != 1:
        raise ValueError(f"Operation type must have exactly one tag, got {list(raw)}")
    (tag, fields), = raw.items()

    if tag == "Transaction":
        return Transaction(
            recipient_address=Address.from_str(fields["recipient_address"]),
            amount=amount_from_json(fields["amount"]),
        )
    if tag == "RollBuy":
        return RollBuy(roll_count=int(fields["roll_count"]))
    if tag == "RollSell":
        return RollSell(roll_count=int(fields["roll_count"]))
    if tag == "ExecuteSC":
        return ExecuteSC(
            data=bytes(fields["data"]),
            max_gas=int(fields["max_gas"]),
            coins=amount_from_json(fields["coins"]),
            gas_price=amount_from_json(fields["gas_price"]),
        )
    raise ValueError(f"Unknown operation type tag: {tag!r}")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def operation_content_to_dict(content: OperationContent) -> dict[str, Any]:
    return {
        "sender_public_key": content.sender_public_key,
        "fee": str(content.fee),
        "expire_period": content.expire_period,
        "op": operation_type_to_dict(content.op),
    }


def operation_content_from_dict(raw: dict[str, Any]) -> OperationContent:
    return OperationContent(
        sender_public_key=raw["sender_public_key"],
        fee=amount_from_json(raw["fee"]),
        expire_period=int(raw["expire_period"]),
        op=operation_type_from_dict(raw["op"]),
    )


def signed_operation_to_dict(operation: SignedOperation) -> dict[str, Any]:
    return {
        "content": operation_content_to_dict(operation.content),
        "signature": operation.signature,
    }


def signed_operation_from_dict(
    raw: dict[str, Any], operation_id: str = ""
) -> SignedOperation:
    return SignedOperation(
        content=operation_content_from_dict(raw["content"]),
        signature=raw["signature"],
        id=operation_id,
    )
