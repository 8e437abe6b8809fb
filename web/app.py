"""Local-first FastAPI shell for rollup fee estimation and reconciliation."""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional

from eth_utils import decode_hex
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chain_adapter.optimism.client import SubmissionError, connect
from chain_adapter.optimism.receipts import ReceiptDecodeError, receipt_from_rpc
from chain_adapter.optimism.static import SimulationError, StaticFeeOracle
from fee_engine.errors import FeeEngineError
from fee_engine.estimator import FeeOracle, estimate
from fee_engine.models import FeeEstimate, TransactionRequest
from fee_engine.reconciler import reconcile
from operator_cli.config import load_settings

app = FastAPI(title="L2 Fees", description="Local-first fee estimation shell")

_STATE: Dict[str, Optional[FeeOracle]] = {"oracle": None}
_STATE_LOCK = threading.Lock()


class TransactionInput(BaseModel):
    sender: str
    to: str
    data: str = "0x"
    value: int = 0


class QuoteInput(BaseModel):
    gas_limit: int
    gas_price: int
    data_fee: int


class EstimateRequest(BaseModel):
    transaction: TransactionInput
    quote: Optional[QuoteInput] = None


class EstimateInput(BaseModel):
    gas_limit: int
    gas_price: int
    data_fee: int


class ReconcileRequest(BaseModel):
    estimate: EstimateInput
    receipt: Dict[str, Any]


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


async def _handle_errors(request: Request, exc: Exception):
    return JSONResponse(
        {"error": str(exc), "kind": type(exc).__name__}, status_code=400
    )


for _exc_class in (
    FeeEngineError,
    ReceiptDecodeError,
    SimulationError,
    SubmissionError,
    ConnectionError,
    ValueError,
    KeyError,
):
    app.add_exception_handler(_exc_class, _handle_errors)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/estimate")
def estimate_fees(payload: EstimateRequest):
    request = TransactionRequest(
        sender=payload.transaction.sender,
        to=payload.transaction.to,
        data=decode_hex(payload.transaction.data),
        value=payload.transaction.value,
    )
    if payload.quote is not None:
        oracle: FeeOracle = StaticFeeOracle(
            gas_limit=payload.quote.gas_limit,
            gas_price=payload.quote.gas_price,
            data_fee=payload.quote.data_fee,
        )
    else:
        oracle = _get_oracle()
    return estimate(request, oracle).to_dict()


@app.post("/api/reconcile")
def reconcile_fees(payload: ReconcileRequest):
    fee_estimate = FeeEstimate(
        gas_limit=payload.estimate.gas_limit,
        gas_price=payload.estimate.gas_price,
        data_fee=payload.estimate.data_fee,
    )
    receipt = receipt_from_rpc(payload.receipt)
    return reconcile(receipt, fee_estimate).to_dict()


def _get_oracle() -> FeeOracle:
    # Sync handlers run on the threadpool; connect once per process.
    with _STATE_LOCK:
        if _STATE["oracle"] is None:
            settings = load_settings()
            _STATE["oracle"] = connect(settings.rpc_url, timeout=settings.rpc_timeout)
        return _STATE["oracle"]


def _set_oracle(oracle: Optional[FeeOracle]) -> None:
    with _STATE_LOCK:
        _STATE["oracle"] = oracle


def _reset_state() -> None:
    _set_oracle(None)
