"""Data models — all frozen (immutable)."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Union

import base58

from .errors import AmountError, SlotComputationError

AMOUNT_DECIMALS = 9
AMOUNT_MAX_RAW = 2**64 - 1
ADDRESS_SIZE = 32


@dataclass(frozen=True, order=True)
class Amount:
    """Fixed-point coin amount stored as raw smallest units."""

    raw: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.raw, int) or isinstance(self.raw, bool):
            raise AmountError(f"Amount raw value must be an integer, got {self.raw!r}")
        if not 0 <= self.raw <= AMOUNT_MAX_RAW:
            raise AmountError(f"Amount out of range: {self.raw}")

    @classmethod
    def from_raw(cls, raw: int) -> Amount:
        return cls(raw)

    @classmethod
    def from_str(cls, text: str) -> Amount:
        """Parse decimal text such as ``"100"`` or ``"0.5"``."""
        try:
            value = Decimal(str(text).strip())
        except InvalidOperation as e:
            raise AmountError(f"Invalid amount: {text!r}") from e
        if not value.is_finite():
            raise AmountError(f"Invalid amount: {text!r}")
        scaled = value.scaleb(AMOUNT_DECIMALS)
        if scaled != scaled.to_integral_value():
            raise AmountError(
                f"Amount {text!r} has more than {AMOUNT_DECIMALS} decimals"
            )
        return cls(int(scaled))

    def checked_add(self, other: Amount) -> Amount:
        total = self.raw + other.raw
        if total > AMOUNT_MAX_RAW:
            raise AmountError(f"Amount overflow: {self} + {other}")
        return Amount(total)

    def checked_sub(self, other: Amount) -> Amount:
        if other.raw > self.raw:
            raise AmountError(f"Amount underflow: {self} - {other}")
        return Amount(self.raw - other.raw)

    def __str__(self) -> str:
        value = Decimal(self.raw).scaleb(-AMOUNT_DECIMALS).normalize()
        return f"{value:f}"


@dataclass(frozen=True)
class Address:
    """Account identifier: sha256 of a public key, base58check on the wire."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != ADDRESS_SIZE:
            raise ValueError(
                f"Address must be {ADDRESS_SIZE} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_str(cls, text: str) -> Address:
        try:
            raw = base58.b58decode_check(text)
        except ValueError as e:
            raise ValueError(f"Invalid address {text!r}: {e}") from e
        return cls(raw)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Address:
        return cls(hashlib.sha256(public_key).digest())

    def thread(self, thread_count: int) -> int:
        """Thread this address is assigned to, in ``[0, thread_count)``.

        Uses the top ``log2`` bits of the first byte, where the bit count is
        the number of trailing zeros of ``thread_count``.
        """
        if not 0 < thread_count < 256:
            raise SlotComputationError(
                f"thread_count must be in 1..255, got {thread_count}"
            )
        trailing_zeros = (thread_count & -thread_count).bit_length() - 1
        shift = 8 - trailing_zeros
        if shift >= 8:
            return 0
        return self.raw[0] >> shift

    def __str__(self) -> str:
        return base58.b58encode_check(self.raw).decode("ascii")


@dataclass(frozen=True, order=True)
class Slot:
    """Consensus slot, ordered by ``(period, thread)``."""

    period: int
    thread: int


# ---------------------------------------------------------------------------
# Operation types (closed tagged union)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transaction:
    recipient_address: Address
    amount: Amount


@dataclass(frozen=True)
class RollBuy:
    roll_count: int


@dataclass(frozen=True)
class RollSell:
    roll_count: int


@dataclass(frozen=True)
class ExecuteSC:
    data: bytes
    max_gas: int
    coins: Amount
    gas_price: Amount


OperationType = Union[Transaction, RollBuy, RollSell, ExecuteSC]


@dataclass(frozen=True)
class OperationContent:
    """Unsigned operation payload."""

    sender_public_key: str
    fee: Amount
    expire_period: int
    op: OperationType


@dataclass(frozen=True)
class SignedOperation:
    """Operation content with its signature and computed id."""

    content: OperationContent
    signature: str
    id: str = field(default="", compare=False)
