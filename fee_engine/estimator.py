"""Pre-submission fee estimation over injected chain-read primitives."""

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Callable, Protocol, Type

from .errors import (
    DataFeeEstimationFailed,
    FeeEngineError,
    GasEstimationFailed,
    PriceLookupFailed,
)
from .models import FeeEstimate, TransactionRequest

logger = logging.getLogger(__name__)


class FeeOracle(Protocol):
    def estimate_gas_limit(self, request: TransactionRequest) -> int:
        ...

    def get_gas_price(self) -> int:
        ...

    def estimate_l1_data_fee(self, request: TransactionRequest) -> int:
        ...


def build_estimate(gas_limit: int, gas_price: int, data_fee: int) -> FeeEstimate:
    return FeeEstimate(gas_limit=gas_limit, gas_price=gas_price, data_fee=data_fee)


def estimate(request: TransactionRequest, oracle: FeeOracle) -> FeeEstimate:
    """Estimate execution fee, L1 data fee, and their total for ``request``.

    Reads run in order: gas limit, gas price, L1 data fee. The first failing
    read aborts the estimate with its error kind; nothing is retried.
    """

    _validate_request(request)

    gas_limit = _read(
        "gas limit", GasEstimationFailed, lambda: oracle.estimate_gas_limit(request)
    )
    gas_price = _read("gas price", PriceLookupFailed, oracle.get_gas_price)
    data_fee = _read(
        "L1 data fee",
        DataFeeEstimationFailed,
        lambda: oracle.estimate_l1_data_fee(request),
    )

    result = build_estimate(gas_limit, gas_price, data_fee)
    logger.debug(
        "Estimated gas_limit=%d gas_price=%d data_fee=%d total=%d",
        gas_limit,
        gas_price,
        data_fee,
        result.total_fee,
    )
    return result


class FeeEstimator:
    """Reusable estimator bound to one oracle.

    With ``parallel=True`` the three independent reads are issued concurrently.
    Error mapping is unchanged, and when several reads fail the one earliest in
    step order is raised.
    """

    def __init__(self, oracle: FeeOracle, parallel: bool = False) -> None:
        self._oracle = oracle
        self._parallel = parallel

    def estimate(self, request: TransactionRequest) -> FeeEstimate:
        if not self._parallel:
            return estimate(request, self._oracle)

        _validate_request(request)
        oracle = self._oracle
        with ThreadPoolExecutor(max_workers=3) as pool:
            gas_limit = pool.submit(
                _read,
                "gas limit",
                GasEstimationFailed,
                lambda: oracle.estimate_gas_limit(request),
            )
            gas_price = pool.submit(
                _read, "gas price", PriceLookupFailed, oracle.get_gas_price
            )
            data_fee = pool.submit(
                _read,
                "L1 data fee",
                DataFeeEstimationFailed,
                lambda: oracle.estimate_l1_data_fee(request),
            )
            return build_estimate(
                gas_limit.result(), gas_price.result(), data_fee.result()
            )


def _read(
    label: str, error_type: Type[FeeEngineError], fetch: Callable[[], int]
) -> int:
    try:
        value = fetch()
    except FeeEngineError:
        raise
    except Exception as exc:
        raise error_type(f"{label} lookup failed: {exc}") from exc

    if isinstance(value, bool) or not isinstance(value, int):
        raise error_type(f"{label} lookup returned a non-integer value: {value!r}")
    if value < 0:
        raise error_type(f"{label} lookup returned a negative value: {value}")
    return value


def _validate_request(request: TransactionRequest) -> None:
    if not isinstance(request, TransactionRequest):
        raise ValueError("request must be a TransactionRequest.")
