"""Massa node JSON-RPC client."""
from .client import MassaClient
from .transport import Transport

__all__ = ["MassaClient", "Transport"]
