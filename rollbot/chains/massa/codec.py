"""Compact binary encoding of operations — no I/O.

Layout of the content bytes::

    varint(fee) | varint(expire_period) | sender public key | varint(type id) | fields
"""
from __future__ import annotations

import hashlib

import base58

from ...models import (
    ExecuteSC,
    OperationContent,
    OperationType,
    RollBuy,
    RollSell,
    Transaction,
)

OPERATION_TYPE_IDS: dict[type, int] = {
    Transaction: 0,
    RollBuy: 1,
    RollSell: 2,
    ExecuteSC: 3,
}


def encode_varint(value: int) -> bytes:
    """Unsigned LEB128 encoding."""
    if value < 0:
        raise ValueError(f"Cannot varint-encode negative value {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def b58check_decode(text: str) -> bytes:
    return base58.b58decode_check(text)


def b58check_encode(data: bytes) -> str:
    return base58.b58encode_check(data).decode("ascii")


def encode_operation_type(op: OperationType) -> bytes:
    type_id = OPERATION_TYPE_IDS.get(type(op))
    if type_id is None:
        raise TypeError(f"Unknown operation type: {type(op).__name__}")

    out = bytearray(encode_varint(type_id))
    if isinstance(op, Transaction):
        out += op.recipient_address.raw
        out += encode_varint(op.amount.raw)
    elif isinstance(op, (RollBuy, RollSell)):
        out += encode_varint(op.roll_count)
    elif isinstance(op, ExecuteSC):
        out += encode_varint(len(op.data))
        out += op.data
        out += encode_varint(op.max_gas)
        out += encode_varint(op.coins.raw)
        out += encode_varint(op.gas_price.raw)
    return bytes(out)


def encode_operation_content(content: OperationContent) -> bytes:
    return b"".join(
        (
            encode_varint(content.fee.raw),
            encode_varint(content.expire_period),
            b58check_decode(content.sender_public_key),
            encode_operation_type(content.op),
        )
    )


def content_hash(content: OperationContent) -> bytes:
    """Digest that gets signed."""
    return hashlib.sha256(encode_operation_content(content)).digest()


def compute_operation_id(content: OperationContent, signature: str) -> str:
    """Operation id: hash of signature bytes followed by content bytes."""
    payload = b58check_decode(signature) + encode_operation_content(content)
    return b58check_encode(hashlib.sha256(payload).digest())
