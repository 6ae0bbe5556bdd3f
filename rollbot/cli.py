"""Command-line interface for the roll buyer."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from typing import Any

import yaml

from .chains.massa import MassaClient, Transport
from .chains.massa.responses import AddressInfo
from .config import AppConfig, load_config
from .errors import NodeConnectionError, RollbotError, WalletError
from .logging_setup import configure_logging
from .services import OperationBuilder, RollBuyer, RollBuyReport
from .wallet import KeyringWallet


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="rollbot",
        description="Buy a roll for wallet addresses that stake nothing yet",
    )
    parser.add_argument("host", help="Node IP address or hostname")
    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=None,
        help="Node JSON-RPC port (default: from config, 33035)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--wallet",
        default=None,
        help="Path to the wallet file (default: from config, wallet.dat)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Command-line host, port and wallet take precedence over the config file."""
    node = replace(config.node, host=args.host)
    if args.port is not None:
        node = replace(node, port=args.port)
    wallet = config.wallet
    if args.wallet is not None:
        wallet = replace(wallet, path=args.wallet)
    return replace(config, node=node, wallet=wallet)


def _address_info_dict(info: AddressInfo) -> dict[str, Any]:
    return {
        "address": str(info.address),
        "thread": info.thread,
        "final_balance": str(info.ledger_info.final_balance),
        "candidate_balance": str(info.ledger_info.candidate_balance),
        "locked_balance": str(info.ledger_info.locked_balance),
        "active_rolls": info.rolls.active_rolls,
        "final_rolls": info.rolls.final_rolls,
        "candidate_rolls": info.rolls.candidate_rolls,
    }


def print_report(report: RollBuyReport, as_json: bool = False) -> None:
    """Write fetched address state and purchase results to stdout."""
    if as_json:
        print(
            json.dumps(
                {
                    "addresses": [_address_info_dict(i) for i in report.address_infos],
                    "outcomes": [
                        {
                            "address": str(o.address),
                            "operation_ids": list(o.operation_ids),
                            "error": o.error or None,
                        }
                        for o in report.outcomes
                    ],
                },
                indent=2,
            )
        )
        return

    for info in report.address_infos:
        d = _address_info_dict(info)
        print(
            f"{d['address']} (thread {d['thread']}): "
            f"final balance {d['final_balance']}, "
            f"candidate balance {d['candidate_balance']}, "
            f"rolls active/final/candidate "
            f"{d['active_rolls']}/{d['final_rolls']}/{d['candidate_rolls']}"
        )

    for outcome in report.outcomes:
        if outcome.ok:
            print(f"Sent operation IDs for {outcome.address}:")
            for op_id in outcome.operation_ids:
                print(f"  {op_id}")
        else:
            print(f"Error for {outcome.address}: {outcome.error}")


async def _run(args: argparse.Namespace) -> int:
    """Execute one roll-buy pass. Returns the process exit status."""
    configure_logging(args.log_level)
    try:
        config = apply_overrides(load_config(args.config), args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        wallet = KeyringWallet.load(config.wallet.path)
    except WalletError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        transport = await Transport.connect(
            config.node.host,
            config.node.port,
            timeout=config.node.timeout,
            use_tls=config.node.use_tls,
        )
    except NodeConnectionError as e:
        print(f"Unable to connect to node: {e}", file=sys.stderr)
        return 1

    async with transport:
        client = MassaClient(transport)
        builder = OperationBuilder(
            client, wallet, clock_compensation=config.node.clock_compensation
        )
        buyer = RollBuyer(client, wallet, config.roll_policy, builder=builder)
        try:
            report = await buyer.run()
        except RollbotError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print_report(report, as_json=args.json)
    return 0 if all(o.ok for o in report.outcomes) else 2


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(asyncio.run(_run(args)))
