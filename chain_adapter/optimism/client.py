"""web3-backed chain reads for OP-stack rollups."""

import logging
from typing import Any, Dict, Optional

import rlp
from eth_account import Account
from eth_utils import to_canonical_address
from web3 import Web3
from web3.exceptions import Web3Exception

from fee_engine.errors import DataFeeEstimationFailed, GasEstimationFailed, PriceLookupFailed
from fee_engine.models import TransactionReceipt, TransactionRequest

from .receipts import receipt_from_rpc

logger = logging.getLogger(__name__)

GAS_PRICE_ORACLE_ADDRESS = "0x420000000000000000000000000000000000000F"

GAS_PRICE_ORACLE_ABI = [
    {
        "inputs": [{"name": "_data", "type": "bytes"}],
        "name": "getL1Fee",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

EIP1559_TX_TYPE = 2

# Failures web3 raises for reverts, RPC errors, and transport problems.
_CHAIN_ERRORS = (Web3Exception, ValueError, OSError)


class SubmissionError(RuntimeError):
    """Raised when broadcasting a transaction or awaiting its receipt fails."""


class OptimismFeeClient:
    """Chain-read primitives for the fee estimator, backed by a ``Web3`` instance."""

    def __init__(
        self,
        w3: Any,
        chain_id: Optional[int] = None,
        oracle_address: str = GAS_PRICE_ORACLE_ADDRESS,
    ) -> None:
        self._w3 = w3
        self._chain_id = chain_id
        self._oracle = w3.eth.contract(
            address=Web3.to_checksum_address(oracle_address), abi=GAS_PRICE_ORACLE_ABI
        )

    @property
    def w3(self) -> Any:
        return self._w3

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self._w3.eth.chain_id)
        return self._chain_id

    def estimate_gas_limit(self, request: TransactionRequest) -> int:
        try:
            return int(self._w3.eth.estimate_gas(_call_params(request)))
        except _CHAIN_ERRORS as exc:
            raise GasEstimationFailed(f"eth_estimateGas failed: {exc}") from exc

    def get_gas_price(self) -> int:
        try:
            return int(self._w3.eth.gas_price)
        except _CHAIN_ERRORS as exc:
            raise PriceLookupFailed(f"eth_gasPrice failed: {exc}") from exc

    def estimate_l1_data_fee(self, request: TransactionRequest) -> int:
        """Quote the L1 data fee from the GasPriceOracle for the serialized request.

        The oracle prices the signed-size envelope, so nonce, gas limit and fee
        fields are read here to build it. They only change a few bytes of the
        compressed payload, so a re-read that drifts from the execution quote
        moves the data fee negligibly. Any failure while building the envelope
        is a data fee failure, independent of the earlier reads.
        """

        try:
            params = _call_params(request)
            payload = serialize_unsigned_eip1559(
                request,
                chain_id=self.chain_id,
                nonce=int(self._w3.eth.get_transaction_count(params["from"])),
                gas_limit=int(self._w3.eth.estimate_gas(params)),
                max_fee_per_gas=int(self._w3.eth.gas_price),
                max_priority_fee_per_gas=int(self._w3.eth.max_priority_fee),
            )
            return int(self._oracle.functions.getL1Fee(payload).call())
        except _CHAIN_ERRORS as exc:
            raise DataFeeEstimationFailed(f"GasPriceOracle.getL1Fee failed: {exc}") from exc

    def submit_and_wait_for_receipt(
        self, request: TransactionRequest, private_key: str, timeout: int = 120
    ) -> TransactionReceipt:
        account = Account.from_key(private_key)
        if account.address.lower() != request.sender.lower():
            raise ValueError("Private key does not control the request sender.")

        try:
            params = _call_params(request)
            base_fee = int(self._w3.eth.get_block("latest").get("baseFeePerGas", 0))
            priority_fee = int(self._w3.eth.max_priority_fee)
            transaction = {
                "type": EIP1559_TX_TYPE,
                "chainId": self.chain_id,
                "nonce": int(self._w3.eth.get_transaction_count(params["from"])),
                "to": params["to"],
                "value": params["value"],
                "data": params["data"],
                "gas": int(self._w3.eth.estimate_gas(params)),
                "maxFeePerGas": 2 * base_fee + priority_fee,
                "maxPriorityFeePerGas": priority_fee,
            }
            signed = account.sign_transaction(transaction)
            tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
            logger.info("Transaction sent with hash %s, waiting for receipt", Web3.to_hex(tx_hash))
            raw_receipt = self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except _CHAIN_ERRORS as exc:
            raise SubmissionError(f"Transaction submission failed: {exc}") from exc

        return receipt_from_rpc(raw_receipt)


def connect(rpc_url: str, timeout: int = 20) -> OptimismFeeClient:
    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
    if not w3.is_connected():
        raise ConnectionError(f"Failed to connect to RPC endpoint: {rpc_url}")
    logger.debug("Connected to %s", rpc_url)
    return OptimismFeeClient(w3)


def serialize_unsigned_eip1559(
    request: TransactionRequest,
    chain_id: int,
    nonce: int,
    gas_limit: int,
    max_fee_per_gas: int,
    max_priority_fee_per_gas: int,
) -> bytes:
    """Typed-transaction envelope of the unsigned request, as posted to L1."""

    fields = [
        chain_id,
        nonce,
        max_priority_fee_per_gas,
        max_fee_per_gas,
        gas_limit,
        to_canonical_address(request.to),
        request.value,
        request.data,
        [],
    ]
    return bytes([EIP1559_TX_TYPE]) + rlp.encode(fields)


def _call_params(request: TransactionRequest) -> Dict[str, Any]:
    return {
        "from": Web3.to_checksum_address(request.sender),
        "to": Web3.to_checksum_address(request.to),
        "data": Web3.to_hex(request.data),
        "value": request.value,
    }
