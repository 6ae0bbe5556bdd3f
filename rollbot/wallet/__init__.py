"""Wallet implementations."""
from .keyring import KeyringWallet

__all__ = ["KeyringWallet"]
