"""Console rendering of fee estimates and reconciliations."""

from decimal import Decimal
from typing import List

from eth_utils import from_wei

from chain_adapter.optimism.erc20 import TokenInfo
from fee_engine.models import FeeActual, FeeComparison, FeeEstimate
from fee_engine.units import format_decimal, format_percent, to_fiat


def render_config(sender: str, token: TokenInfo) -> List[str]:
    return [
        "CONFIG",
        f"  Derived Wallet Address: {sender}",
        f"  Token Contract Address: {token.address}",
        f"  Token Decimals: {token.decimals}",
        f"  Token Symbol: {token.symbol}",
        f"  Wallet Token Balance: {token.formatted_balance}",
    ]


def render_estimate(estimate: FeeEstimate) -> List[str]:
    return [
        "ESTIMATION",
        f"  Estimated Gas Use: {estimate.gas_limit} gas units",
        f"  Current L2 Gas Price: {_gwei(estimate.gas_price)} gwei",
        f"  Estimated L2 Execution Fee: {_meth(estimate.execution_fee)} mETH",
        f"  Estimated L1 Data Fee: {_meth(estimate.data_fee)} mETH",
        f"  Estimated Total Fee: {_meth(estimate.total_fee)} mETH",
        f"  Estimated Percent Data Fee: {format_percent(estimate.data_fee_percent)}",
    ]


def render_actual(actual: FeeActual, eth_usd_price: Decimal) -> List[str]:
    lines = [
        "REALITY",
        f"  Actual L2 Execution Fee: {_meth(actual.execution_fee)} mETH",
        f"  Actual L2 Gas Price: {_gwei(actual.effective_gas_price)} gwei",
        f"  Actual L1 Data Fee: {_meth(actual.data_fee)} mETH",
    ]
    if actual.l1_blob_base_fee is not None:
        lines.append(
            f"  Actual L1 Blob Gas Price: {_gwei(actual.l1_blob_base_fee)} gwei"
        )
    usd = format_decimal(to_fiat(actual.total_fee, eth_usd_price))
    lines.append(f"  Actual Total Fee: {_meth(actual.total_fee)} mETH ({usd} USD)")
    lines.append(f"  Actual Percent Data Fee: {format_percent(actual.data_fee_percent)}")
    return lines


def render_comparison(comparison: FeeComparison, eth_usd_price: Decimal) -> List[str]:
    lines = render_actual(comparison.actual, eth_usd_price)
    lines.append(
        "Difference in percent between actual and estimated: "
        f"{format_percent(comparison.estimation_error_percent)}"
    )
    return lines


def _gwei(value: int) -> str:
    return format_decimal(from_wei(value, "gwei"))


def _meth(value: int) -> str:
    return format_decimal(from_wei(value, "milliether"))
