"""Wallet protocol — key lookup and operation signing."""
from typing import Protocol

from ..models import Address, OperationContent, SignedOperation


class Wallet(Protocol):
    """Abstract interface for a key store that can sign operations."""

    def addresses(self) -> list[Address]: ...

    def find_associated_public_key(self, address: Address) -> str | None: ...

    def sign_operation(
        self, content: OperationContent, address: Address
    ) -> SignedOperation: ...
