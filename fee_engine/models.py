"""Domain models for rollup fee estimates, receipts, and reconciliation.

Every fee quantity is an integer amount of wei. Totals and percentages are
properties recomputed from the stored integers on each access.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .errors import EstimateWasZero
from .units import percent_of, require_amount


@dataclass(frozen=True)
class TransactionRequest:
    """Unsigned transaction skeleton submitted for estimation."""

    sender: str
    to: str
    data: bytes = b""
    value: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.sender, str) or not self.sender:
            raise ValueError("sender must be a non-empty address string.")
        if not isinstance(self.to, str) or not self.to:
            raise ValueError("to must be a non-empty address string.")
        if not isinstance(self.data, bytes):
            raise ValueError("data must be bytes.")
        require_amount("value", self.value)


@dataclass(frozen=True)
class FeeEstimate:
    gas_limit: int
    gas_price: int
    data_fee: int

    def __post_init__(self) -> None:
        require_amount("gas_limit", self.gas_limit)
        require_amount("gas_price", self.gas_price)
        require_amount("data_fee", self.data_fee)

    @property
    def execution_fee(self) -> int:
        return self.gas_limit * self.gas_price

    @property
    def total_fee(self) -> int:
        return self.execution_fee + self.data_fee

    @property
    def data_fee_percent(self) -> float:
        return percent_of(self.data_fee, self.total_fee)

    def to_dict(self) -> Dict[str, object]:
        return {
            "gas_limit": self.gas_limit,
            "gas_price": self.gas_price,
            "execution_fee": self.execution_fee,
            "data_fee": self.data_fee,
            "total_fee": self.total_fee,
            "data_fee_percent": self.data_fee_percent,
        }

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "FeeEstimate":
        # Derived keys written by to_dict are ignored and recomputed.
        _require_fields(data, ("gas_limit", "gas_price", "data_fee"), "Fee estimate")
        return FeeEstimate(
            gas_limit=data["gas_limit"],
            gas_price=data["gas_price"],
            data_fee=data["data_fee"],
        )


@dataclass(frozen=True)
class TransactionReceipt:
    """Post-inclusion receipt figures. ``l1_*`` fields are rollup extensions."""

    effective_gas_price: int
    gas_used: int
    l1_fee: Optional[int] = None
    l1_blob_base_fee: Optional[int] = None
    l1_gas_price: Optional[int] = None
    l1_gas_used: Optional[int] = None
    transaction_hash: Optional[str] = None
    status: Optional[int] = None

    def __post_init__(self) -> None:
        require_amount("effective_gas_price", self.effective_gas_price)
        require_amount("gas_used", self.gas_used)
        for name in ("l1_fee", "l1_blob_base_fee", "l1_gas_price", "l1_gas_used"):
            value = getattr(self, name)
            if value is not None:
                require_amount(name, value)

    def to_dict(self) -> Dict[str, object]:
        result: Dict[str, object] = {
            "effective_gas_price": self.effective_gas_price,
            "gas_used": self.gas_used,
        }
        for name in (
            "l1_fee",
            "l1_blob_base_fee",
            "l1_gas_price",
            "l1_gas_used",
            "transaction_hash",
            "status",
        ):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "TransactionReceipt":
        _require_fields(data, ("effective_gas_price", "gas_used"), "Receipt")
        return TransactionReceipt(
            effective_gas_price=data["effective_gas_price"],
            gas_used=data["gas_used"],
            l1_fee=data.get("l1_fee"),
            l1_blob_base_fee=data.get("l1_blob_base_fee"),
            l1_gas_price=data.get("l1_gas_price"),
            l1_gas_used=data.get("l1_gas_used"),
            transaction_hash=data.get("transaction_hash"),
            status=data.get("status"),
        )


@dataclass(frozen=True)
class FeeActual:
    effective_gas_price: int
    gas_used: int
    data_fee: int
    l1_blob_base_fee: Optional[int] = None

    def __post_init__(self) -> None:
        require_amount("effective_gas_price", self.effective_gas_price)
        require_amount("gas_used", self.gas_used)
        require_amount("data_fee", self.data_fee)
        if self.l1_blob_base_fee is not None:
            require_amount("l1_blob_base_fee", self.l1_blob_base_fee)

    @property
    def execution_fee(self) -> int:
        return self.effective_gas_price * self.gas_used

    @property
    def total_fee(self) -> int:
        return self.execution_fee + self.data_fee

    @property
    def data_fee_percent(self) -> float:
        return percent_of(self.data_fee, self.total_fee)

    def to_dict(self) -> Dict[str, object]:
        result: Dict[str, object] = {
            "effective_gas_price": self.effective_gas_price,
            "gas_used": self.gas_used,
            "execution_fee": self.execution_fee,
            "data_fee": self.data_fee,
            "total_fee": self.total_fee,
            "data_fee_percent": self.data_fee_percent,
        }
        if self.l1_blob_base_fee is not None:
            result["l1_blob_base_fee"] = self.l1_blob_base_fee
        return result


@dataclass(frozen=True)
class FeeComparison:
    """Estimate paired with the actual fee; positive error means underestimate."""

    estimate: FeeEstimate
    actual: FeeActual

    def __post_init__(self) -> None:
        if self.estimate.total_fee == 0:
            raise EstimateWasZero("Cannot compare against an estimate with zero total fee.")

    @property
    def difference(self) -> int:
        return self.actual.total_fee - self.estimate.total_fee

    @property
    def estimation_error_percent(self) -> float:
        return percent_of(self.difference, self.estimate.total_fee)

    def to_dict(self) -> Dict[str, object]:
        return {
            "estimate": self.estimate.to_dict(),
            "actual": self.actual.to_dict(),
            "difference": self.difference,
            "estimation_error_percent": self.estimation_error_percent,
        }


def _require_fields(data: object, names: Iterable[str], kind: str) -> None:
    if not isinstance(data, Mapping):
        raise ValueError(f"{kind} must be a JSON object, got {type(data).__name__}.")
    missing = [name for name in names if name not in data]
    if missing:
        raise ValueError(f"{kind} is missing {', '.join(missing)}.")
