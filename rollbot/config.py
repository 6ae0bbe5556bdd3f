"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .errors import AmountError
from .models import Amount

logger = logging.getLogger(__name__)

DEFAULT_PORT = 33035
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeEndpointConfig:
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    timeout: int = 30
    use_tls: bool = False
    clock_compensation: int = 0


@dataclass(frozen=True)
class WalletFileConfig:
    path: str = "wallet.dat"


@dataclass(frozen=True)
class RollPolicyConfig:
    enabled: bool = True
    min_balance: str = "100"
    roll_count: int = 1
    fee: str = "0"


@dataclass(frozen=True)
class AppConfig:
    node: NodeEndpointConfig = field(default_factory=NodeEndpointConfig)
    wallet: WalletFileConfig = field(default_factory=WalletFileConfig)
    roll_policy: RollPolicyConfig = field(default_factory=RollPolicyConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_node(raw: dict[str, Any]) -> NodeEndpointConfig:
    return NodeEndpointConfig(
        host=str(raw.get("host", "127.0.0.1")),
        port=int(raw.get("port", DEFAULT_PORT)),
        timeout=int(raw.get("timeout", 30)),
        use_tls=bool(raw.get("use_tls", False)),
        clock_compensation=int(raw.get("clock_compensation", 0)),
    )


def _build_wallet(raw: dict[str, Any]) -> WalletFileConfig:
    return WalletFileConfig(path=str(raw.get("path", "wallet.dat")))


def _build_roll_policy(raw: dict[str, Any]) -> RollPolicyConfig:
    return RollPolicyConfig(
        enabled=bool(raw.get("enabled", True)),
        min_balance=str(raw.get("min_balance", "100")),
        roll_count=int(raw.get("roll_count", 1)),
        fee=str(raw.get("fee", "0")),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root; when that file does not exist either, built-in
            defaults are used.
    """
    load_dotenv()

    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info("No config file, using defaults")
            cfg = AppConfig()
            _validate(cfg)
            return cfg
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        node=_build_node(raw.get("node") or {}),
        wallet=_build_wallet(raw.get("wallet") or {}),
        roll_policy=_build_roll_policy(raw.get("roll_policy") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.node.host:
        raise ValueError("Node host must not be empty")
    if not 0 < cfg.node.port < 65536:
        raise ValueError(f"Node port out of range: {cfg.node.port}")
    if cfg.node.timeout <= 0:
        raise ValueError(f"Node timeout must be positive: {cfg.node.timeout}")
    if not cfg.wallet.path:
        raise ValueError("Wallet path must not be empty")
    if cfg.roll_policy.roll_count < 1:
        raise ValueError(
            f"Roll count must be at least 1: {cfg.roll_policy.roll_count}"
        )
    for name in ("min_balance", "fee"):
        value = getattr(cfg.roll_policy, name)
        try:
            Amount.from_str(value)
        except AmountError as e:
            raise ValueError(f"Invalid roll_policy.{name} {value!r}: {e}") from e
