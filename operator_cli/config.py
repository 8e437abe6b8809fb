"""Environment and ``.env`` driven settings for the operator CLI."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_RPC_URL = "https://mainnet.optimism.io"
# FRACTION token on OP Mainnet.
DEFAULT_TOKEN_ADDRESS = "0xbD80CFA9d93A87D1bb895f810ea348E496611cD4"
DEFAULT_RECIPIENT = "0x30B125d5Fc58c1b8E3cCB2F1C71a1Cc847f024eE"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    token_address: str = DEFAULT_TOKEN_ADDRESS
    recipient: str = DEFAULT_RECIPIENT
    transfer_amount: int = 1
    send_tx: bool = False
    eth_usd_price: Decimal = Decimal("3500")
    rpc_timeout: int = 20


def load_settings(
    environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None
) -> Settings:
    """Build settings from ``environ``, or from ``os.environ`` after loading ``.env``."""

    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    return Settings(
        rpc_url=environ.get("RPC_URL") or DEFAULT_RPC_URL,
        private_key=environ.get("PRIVATE_KEY") or None,
        token_address=environ.get("TOKEN_ADDRESS") or DEFAULT_TOKEN_ADDRESS,
        recipient=environ.get("RECIPIENT") or DEFAULT_RECIPIENT,
        transfer_amount=_parse_int("TRANSFER_AMOUNT", environ.get("TRANSFER_AMOUNT"), 1),
        send_tx=_parse_flag(environ.get("SEND_TX")),
        eth_usd_price=parse_price(environ.get("ETH_USD_PRICE") or "3500"),
        rpc_timeout=_parse_int("RPC_TIMEOUT", environ.get("RPC_TIMEOUT"), 20),
    )


def parse_price(value: str) -> Decimal:
    try:
        price = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid price: {value!r}") from exc
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid price: {value!r}")
    return price


def _parse_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < 0:
        raise ValueError(f"{name} must be non-negative.")
    return parsed


def _parse_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() not in _FALSE_VALUES
