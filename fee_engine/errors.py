"""Error kinds raised by the fee estimation and reconciliation engine."""


class FeeEngineError(RuntimeError):
    """Base class for fee engine failures. Never retried."""


class GasEstimationFailed(FeeEngineError):
    """Raised when execution simulation reverts or the node cannot be reached."""


class PriceLookupFailed(FeeEngineError):
    """Raised when the gas price oracle call fails."""


class DataFeeEstimationFailed(FeeEngineError):
    """Raised when the L1 data fee estimation call fails."""


class MissingDataFee(FeeEngineError):
    """Raised when a receipt carries no L1 data fee."""


class EstimateWasZero(FeeEngineError):
    """Raised when comparing against an estimate whose total fee is zero."""
