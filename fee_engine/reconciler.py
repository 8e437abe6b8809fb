"""Post-inclusion fee breakdown and estimate-vs-actual comparison."""

import logging

from .errors import EstimateWasZero, MissingDataFee
from .models import FeeActual, FeeComparison, FeeEstimate, TransactionReceipt

logger = logging.getLogger(__name__)


def compute_actual(receipt: TransactionReceipt) -> FeeActual:
    """Recompute the fee breakdown from authoritative receipt figures.

    A receipt without an L1 fee is rejected rather than read as zero.
    """

    if receipt.l1_fee is None:
        raise MissingDataFee(
            "Receipt has no L1 data fee; the chain or node does not report one."
        )

    return FeeActual(
        effective_gas_price=receipt.effective_gas_price,
        gas_used=receipt.gas_used,
        data_fee=receipt.l1_fee,
        l1_blob_base_fee=receipt.l1_blob_base_fee,
    )


def reconcile(receipt: TransactionReceipt, estimate: FeeEstimate) -> FeeComparison:
    if estimate.total_fee == 0:
        raise EstimateWasZero("Cannot compare against an estimate with zero total fee.")

    actual = compute_actual(receipt)
    comparison = FeeComparison(estimate=estimate, actual=actual)
    logger.info(
        "Reconciled %s: estimated=%d actual=%d error=%.2f%%",
        receipt.transaction_hash or "transaction",
        estimate.total_fee,
        actual.total_fee,
        comparison.estimation_error_percent,
    )
    return comparison
