"""Rendering tests for the console fee reports."""

import unittest
from decimal import Decimal

from chain_adapter.optimism.erc20 import TokenInfo
from fee_engine.models import FeeActual, FeeComparison, FeeEstimate
from operator_cli.report import render_comparison, render_config, render_estimate


class ReportRenderingTests(unittest.TestCase):
    def test_estimate_units(self) -> None:
        lines = render_estimate(FeeEstimate(gas_limit=21_000, gas_price=1_500_000_000, data_fee=1))
        self.assertIn("  Current L2 Gas Price: 1.5 gwei", lines)
        self.assertIn("  Estimated L2 Execution Fee: 0.0315 mETH", lines)
        self.assertIn("  Estimated L1 Data Fee: 0.000000000000001 mETH", lines)

    def test_zero_estimate_renders_plain_zeros(self) -> None:
        lines = render_estimate(FeeEstimate(gas_limit=0, gas_price=0, data_fee=0))
        self.assertIn("  Current L2 Gas Price: 0 gwei", lines)
        self.assertIn("  Estimated Total Fee: 0 mETH", lines)
        self.assertIn("  Estimated Percent Data Fee: 0.00%", lines)

    def test_comparison_lines(self) -> None:
        comparison = FeeComparison(
            estimate=FeeEstimate(gas_limit=21_000, gas_price=1_000_000_000, data_fee=9_000_000_000_000),
            actual=FeeActual(
                effective_gas_price=1_000_000_000,
                gas_used=21_000,
                data_fee=12_000_000_000_000,
                l1_blob_base_fee=1,
            ),
        )
        lines = render_comparison(comparison, Decimal("3500"))
        self.assertIn("  Actual L1 Blob Gas Price: 0.000000001 gwei", lines)
        self.assertIn("  Actual Total Fee: 0.033 mETH (0.1155 USD)", lines)
        self.assertEqual(lines[-1], "Difference in percent between actual and estimated: 10.00%")

    def test_token_balance_uses_token_decimals(self) -> None:
        token = TokenInfo(address="0x00000000000000000000000000000000000000bb", symbol="USDC", decimals=6, balance=1_250_000)
        self.assertIn("  Wallet Token Balance: 1.25", render_config("0xabc", token))
        empty = TokenInfo(address=token.address, symbol="USDC", decimals=6, balance=0)
        self.assertEqual(empty.formatted_balance, "0")


if __name__ == "__main__":
    unittest.main()
