"""Decode JSON-RPC transaction receipts into fee engine receipts."""

from typing import Any, Mapping, Optional

from eth_utils import is_0x_prefixed, to_int
from web3 import Web3

from fee_engine.models import TransactionReceipt


class ReceiptDecodeError(ValueError):
    """Raised when an RPC receipt cannot be decoded."""


# Rollup fields are not formatted by web3 and usually arrive as hex strings.
_OPTIONAL_FIELDS = {
    "l1_fee": "l1Fee",
    "l1_blob_base_fee": "l1BlobBaseFee",
    "l1_gas_price": "l1GasPrice",
    "l1_gas_used": "l1GasUsed",
}


def receipt_from_rpc(raw: Mapping[str, Any]) -> TransactionReceipt:
    if not isinstance(raw, Mapping):
        raise ReceiptDecodeError("Receipt must be a mapping of RPC fields.")

    for required in ("effectiveGasPrice", "gasUsed"):
        if raw.get(required) is None:
            raise ReceiptDecodeError(f"Receipt is missing {required}.")

    optional = {
        name: _to_int(rpc_name, raw.get(rpc_name))
        for name, rpc_name in _OPTIONAL_FIELDS.items()
    }

    try:
        return TransactionReceipt(
            effective_gas_price=_to_int("effectiveGasPrice", raw["effectiveGasPrice"]),
            gas_used=_to_int("gasUsed", raw["gasUsed"]),
            transaction_hash=_to_hex(raw.get("transactionHash")),
            status=_to_int("status", raw.get("status")),
            **optional,
        )
    except ReceiptDecodeError:
        raise
    except ValueError as exc:
        raise ReceiptDecodeError(str(exc)) from exc


def _to_int(field: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ReceiptDecodeError(f"{field} must be numeric, got a boolean.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if is_0x_prefixed(text):
                return to_int(hexstr=text)
            return to_int(text=text)
        except ValueError as exc:
            raise ReceiptDecodeError(f"{field} is not a valid quantity: {value!r}") from exc
    raise ReceiptDecodeError(f"{field} has unsupported type {type(value).__name__}.")


def _to_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if isinstance(value, str):
        return Web3.to_hex(hexstr=value)
    raise ReceiptDecodeError(f"transactionHash has unsupported type {type(value).__name__}.")
