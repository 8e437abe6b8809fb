"""Fixed-quote fee oracle for offline estimation without network calls."""

from dataclasses import dataclass

from eth_utils import is_address

from fee_engine.models import TransactionRequest
from fee_engine.units import require_amount


class SimulationError(ValueError):
    """Raised when a request cannot be quoted offline."""


@dataclass(frozen=True)
class StaticFeeOracle:
    gas_limit: int
    gas_price: int
    data_fee: int

    def __post_init__(self) -> None:
        require_amount("gas_limit", self.gas_limit)
        require_amount("gas_price", self.gas_price)
        require_amount("data_fee", self.data_fee)

    def estimate_gas_limit(self, request: TransactionRequest) -> int:
        _validate_request(request)
        return self.gas_limit

    def get_gas_price(self) -> int:
        return self.gas_price

    def estimate_l1_data_fee(self, request: TransactionRequest) -> int:
        _validate_request(request)
        return self.data_fee


def _validate_request(request: TransactionRequest) -> None:
    if not is_address(request.sender):
        raise SimulationError("Request sender must be a valid address.")
    if not is_address(request.to):
        raise SimulationError("Request target must be a valid address.")
