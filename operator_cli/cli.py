"""Operator CLI for rollup fee estimation and reconciliation."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from eth_account import Account
from eth_utils import decode_hex
from web3.exceptions import Web3Exception

from chain_adapter.optimism.client import SubmissionError, connect
from chain_adapter.optimism.erc20 import encode_transfer, read_token_info
from chain_adapter.optimism.receipts import ReceiptDecodeError, receipt_from_rpc
from chain_adapter.optimism.static import SimulationError, StaticFeeOracle
from fee_engine.errors import FeeEngineError
from fee_engine.estimator import FeeEstimator, FeeOracle
from fee_engine.models import FeeEstimate, TransactionReceipt, TransactionRequest
from fee_engine.reconciler import reconcile
from operator_cli.config import Settings, load_settings, parse_price
from operator_cli.report import render_comparison, render_config, render_estimate


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="l2-fees")
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate_parser = subparsers.add_parser("estimate")
    estimate_parser.add_argument("--sender", required=True)
    estimate_parser.add_argument("--to", required=True)
    estimate_parser.add_argument("--data", default="0x")
    estimate_parser.add_argument("--value", type=int, default=0)
    estimate_parser.add_argument("--rpc")
    estimate_parser.add_argument("--gas-limit", type=int)
    estimate_parser.add_argument("--gas-price", type=int)
    estimate_parser.add_argument("--data-fee", type=int)
    estimate_parser.add_argument("--parallel", action="store_true")
    estimate_parser.add_argument("--text", action="store_true")
    estimate_parser.set_defaults(func=_estimate)

    reconcile_parser = subparsers.add_parser("reconcile")
    reconcile_parser.add_argument("--estimate", required=True)
    reconcile_parser.add_argument("--receipt", required=True)
    reconcile_parser.add_argument("--eth-usd-price")
    reconcile_parser.add_argument("--text", action="store_true")
    reconcile_parser.set_defaults(func=_reconcile)

    run_parser = subparsers.add_parser("run")
    run_parser.add_argument("--rpc")
    run_parser.add_argument("--token")
    run_parser.add_argument("--recipient")
    run_parser.add_argument("--amount", type=int)
    run_parser.add_argument("--send", action="store_true")
    run_parser.add_argument("--eth-usd-price")
    run_parser.add_argument("--parallel", action="store_true")
    run_parser.set_defaults(func=_run)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.settings = load_settings()
        return args.func(args)
    except (
        FeeEngineError,
        ReceiptDecodeError,
        SimulationError,
        SubmissionError,
        OSError,
        Web3Exception,
        ValueError,
        KeyError,
    ) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


def _estimate(args: argparse.Namespace) -> int:
    request = TransactionRequest(
        sender=args.sender,
        to=args.to,
        data=decode_hex(args.data),
        value=args.value,
    )
    oracle = _build_oracle(args, args.settings)
    fee_estimate = FeeEstimator(oracle, parallel=args.parallel).estimate(request)

    if args.text:
        _print_lines(render_estimate(fee_estimate))
    else:
        print(json.dumps(fee_estimate.to_dict(), indent=2))
    return 0


def _reconcile(args: argparse.Namespace) -> int:
    fee_estimate = FeeEstimate.from_dict(_load_json(args.estimate))
    receipt = _load_receipt(args.receipt)
    comparison = reconcile(receipt, fee_estimate)

    if args.text:
        _print_lines(render_comparison(comparison, _eth_usd_price(args, args.settings)))
    else:
        print(json.dumps(comparison.to_dict(), indent=2))
    return 0


def _run(args: argparse.Namespace) -> int:
    settings: Settings = args.settings
    if not settings.private_key:
        raise ValueError("Please set PRIVATE_KEY in the environment or .env file.")

    account = Account.from_key(settings.private_key)
    client = connect(args.rpc or settings.rpc_url, timeout=settings.rpc_timeout)

    token = read_token_info(client.w3, args.token or settings.token_address, account.address)
    _print_lines(render_config(account.address, token))

    amount = args.amount if args.amount is not None else settings.transfer_amount
    request = TransactionRequest(
        sender=account.address,
        to=token.address,
        data=encode_transfer(args.recipient or settings.recipient, amount),
        value=0,
    )
    fee_estimate = FeeEstimator(client, parallel=args.parallel).estimate(request)
    _print_lines(render_estimate(fee_estimate))

    if not (args.send or settings.send_tx):
        print("Set SEND_TX=true to send a transaction and see the actual fees")
        return 0

    receipt = client.submit_and_wait_for_receipt(request, settings.private_key)
    print(f"  Transaction included with hash: {receipt.transaction_hash}")
    comparison = reconcile(receipt, fee_estimate)
    _print_lines(render_comparison(comparison, _eth_usd_price(args, settings)))
    return 0


def _build_oracle(args: argparse.Namespace, settings: Settings) -> FeeOracle:
    quote = (args.gas_limit, args.gas_price, args.data_fee)
    if all(value is None for value in quote):
        return connect(args.rpc or settings.rpc_url, timeout=settings.rpc_timeout)
    if any(value is None for value in quote):
        raise ValueError("Offline estimation needs --gas-limit, --gas-price and --data-fee.")
    return StaticFeeOracle(
        gas_limit=args.gas_limit,
        gas_price=args.gas_price,
        data_fee=args.data_fee,
    )


def _load_receipt(source: str) -> TransactionReceipt:
    document = _load_json(source)
    # Accept a raw JSON-RPC response as well as the bare receipt object.
    if isinstance(document, dict) and "result" in document:
        document = document["result"]
    if isinstance(document, dict) and "effective_gas_price" in document:
        return TransactionReceipt.from_dict(document)
    return receipt_from_rpc(document)


def _load_json(source: str):
    if source == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(source).read_text())


def _eth_usd_price(args: argparse.Namespace, settings: Settings):
    if args.eth_usd_price is not None:
        return parse_price(args.eth_usd_price)
    return settings.eth_usd_price


def _print_lines(lines: List[str]) -> None:
    for line in lines:
        print(line)


if __name__ == "__main__":
    raise SystemExit(main())
