from .client import (
    GAS_PRICE_ORACLE_ADDRESS,
    OptimismFeeClient,
    SubmissionError,
    connect,
    serialize_unsigned_eip1559,
)
from .erc20 import TokenInfo, encode_transfer, read_token_info
from .receipts import ReceiptDecodeError, receipt_from_rpc
from .static import SimulationError, StaticFeeOracle

__all__ = [
    "GAS_PRICE_ORACLE_ADDRESS",
    "OptimismFeeClient",
    "ReceiptDecodeError",
    "SimulationError",
    "StaticFeeOracle",
    "SubmissionError",
    "TokenInfo",
    "connect",
    "encode_transfer",
    "read_token_info",
    "receipt_from_rpc",
    "serialize_unsigned_eip1559",
]
