from .errors import (
    DataFeeEstimationFailed,
    EstimateWasZero,
    FeeEngineError,
    GasEstimationFailed,
    MissingDataFee,
    PriceLookupFailed,
)
from .estimator import FeeEstimator, FeeOracle, build_estimate, estimate
from .models import FeeActual, FeeComparison, FeeEstimate, TransactionReceipt, TransactionRequest
from .reconciler import compute_actual, reconcile

__all__ = [
    "DataFeeEstimationFailed",
    "EstimateWasZero",
    "FeeActual",
    "FeeComparison",
    "FeeEngineError",
    "FeeEstimate",
    "FeeEstimator",
    "FeeOracle",
    "GasEstimationFailed",
    "MissingDataFee",
    "PriceLookupFailed",
    "TransactionReceipt",
    "TransactionRequest",
    "build_estimate",
    "compute_actual",
    "estimate",
    "reconcile",
]
