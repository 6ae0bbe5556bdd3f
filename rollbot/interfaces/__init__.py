"""Protocol interfaces for the roll buyer."""
from .node import NodeApi
from .wallet import Wallet

__all__ = ["NodeApi", "Wallet"]
