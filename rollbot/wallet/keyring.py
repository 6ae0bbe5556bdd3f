"""Read-only secp256k1 wallet backed by a ``wallet.dat`` key list."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, utils

from ..chains.massa.codec import (
    b58check_decode,
    b58check_encode,
    compute_operation_id,
    content_hash,
)
from ..errors import WalletError
from ..models import Address, OperationContent, SignedOperation

logger = logging.getLogger(__name__)

# Order of the secp256k1 group; signatures are normalized to low-S.
_SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _public_key_bytes(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )


def _load_private_key(encoded: str) -> ec.EllipticCurvePrivateKey:
    try:
        secret = b58check_decode(encoded)
    except ValueError as e:
        raise WalletError(f"Invalid private key encoding: {e}") from e
    if len(secret) != 32:
        raise WalletError(f"Private key must be 32 bytes, got {len(secret)}")
    try:
        return ec.derive_private_key(
            int.from_bytes(secret, "big"), ec.SECP256K1()
        )
    except ValueError as e:
        raise WalletError(f"Invalid private key: {e}") from e


class KeyringWallet:
    """Holds ``{address -> key}`` in memory. Never writes to disk."""

    def __init__(self, private_keys: list[str]) -> None:
        self._keys: dict[Address, ec.EllipticCurvePrivateKey] = {}
        self._public_keys: dict[Address, str] = {}
        for encoded in private_keys:
            key = _load_private_key(encoded)
            public_key = _public_key_bytes(key)
            address = Address.from_public_key(public_key)
            self._keys[address] = key
            self._public_keys[address] = b58check_encode(public_key)

    @classmethod
    def load(cls, path: str | Path) -> KeyringWallet:
        """Read a JSON array of base58check private keys."""
        path = Path(path)
        try:
            raw = json.loads(path.read_text())
        except FileNotFoundError as e:
            raise WalletError(f"Wallet file not found: {path}") from e
        except (OSError, ValueError) as e:
            raise WalletError(f"Cannot read wallet file {path}: {e}") from e

        if not isinstance(raw, list) or not all(isinstance(k, str) for k in raw):
            raise WalletError(f"Wallet file {path} must hold a list of private keys")

        wallet = cls(raw)
        logger.info("Loaded %d key(s) from %s", len(wallet._keys), path)
        return wallet

    def addresses(self) -> list[Address]:
        return list(self._keys)

    def find_associated_public_key(self, address: Address) -> str | None:
        return self._public_keys.get(address)

    def sign_operation(
        self, content: OperationContent, address: Address
    ) -> SignedOperation:
        """Sign the content hash with the key of ``address``."""
        key = self._keys.get(address)
        if key is None:
            raise WalletError(f"No private key for address {address}")

        der = key.sign(
            content_hash(content), ec.ECDSA(utils.Prehashed(hashes.SHA256()))
        )
        r, s = utils.decode_dss_signature(der)
        if s > _SECP256K1_N // 2:
            s = _SECP256K1_N - s
        signature = b58check_encode(r.to_bytes(32, "big") + s.to_bytes(32, "big"))

        return SignedOperation(
            content=content,
            signature=signature,
            id=compute_operation_id(content, signature),
        )
