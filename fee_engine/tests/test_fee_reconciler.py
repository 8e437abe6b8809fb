"""Reconciliation tests against authoritative receipt figures."""

import unittest

from fee_engine.errors import EstimateWasZero, MissingDataFee
from fee_engine.estimator import build_estimate
from fee_engine.models import (
    FeeActual,
    FeeComparison,
    FeeEstimate,
    TransactionReceipt,
    TransactionRequest,
)
from fee_engine.reconciler import compute_actual, reconcile


class FeeReconcilerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.estimate = build_estimate(21_000, 1_000_000_000, 9_000_000_000_000)

    def _receipt(self, **overrides) -> TransactionReceipt:
        fields = {
            "effective_gas_price": 1_000_000_000,
            "gas_used": 21_000,
            "l1_fee": 9_000_000_000_000,
        }
        fields.update(overrides)
        return TransactionReceipt(**fields)

    def test_matching_receipt_has_zero_error(self) -> None:
        comparison = reconcile(self._receipt(), self.estimate)

        self.assertEqual(comparison.actual.total_fee, self.estimate.total_fee)
        self.assertEqual(comparison.difference, 0)
        self.assertEqual(comparison.estimation_error_percent, 0.0)

    def test_underestimate_is_positive_error(self) -> None:
        receipt = self._receipt(l1_fee=12_000_000_000_000)
        comparison = reconcile(receipt, self.estimate)

        self.assertEqual(comparison.actual.total_fee, 33_000_000_000_000)
        self.assertEqual(comparison.estimation_error_percent, 10.0)

    def test_overestimate_is_negative_error(self) -> None:
        receipt = self._receipt(gas_used=18_000)
        comparison = reconcile(receipt, self.estimate)
        self.assertEqual(comparison.difference, -3_000_000_000_000)
        self.assertEqual(comparison.estimation_error_percent, -10.0)

    def test_missing_l1_fee_fails(self) -> None:
        receipt = self._receipt(l1_fee=None)
        with self.assertRaises(MissingDataFee):
            compute_actual(receipt)
        with self.assertRaises(MissingDataFee):
            reconcile(receipt, self.estimate)

    def test_zero_estimate_fails_regardless_of_receipt(self) -> None:
        zero = build_estimate(0, 0, 0)
        with self.assertRaises(EstimateWasZero):
            reconcile(self._receipt(), zero)
        with self.assertRaises(EstimateWasZero):
            reconcile(self._receipt(l1_fee=None), zero)

    def test_comparison_rejects_zero_estimate(self) -> None:
        actual = FeeActual(effective_gas_price=1, gas_used=1, data_fee=1)
        with self.assertRaises(EstimateWasZero):
            FeeComparison(estimate=build_estimate(0, 0, 0), actual=actual)

    def test_actual_breakdown(self) -> None:
        actual = compute_actual(self._receipt(l1_blob_base_fee=1_500_000_000))

        self.assertEqual(actual.execution_fee, 21_000_000_000_000)
        self.assertEqual(actual.data_fee, 9_000_000_000_000)
        self.assertEqual(actual.data_fee_percent, 30.0)
        self.assertEqual(actual.l1_blob_base_fee, 1_500_000_000)

    def test_blob_base_fee_does_not_change_totals(self) -> None:
        with_blob = compute_actual(self._receipt(l1_blob_base_fee=10 ** 12))
        without_blob = compute_actual(self._receipt())
        self.assertEqual(with_blob.total_fee, without_blob.total_fee)

    def test_zero_actual_total_reports_zero_percent(self) -> None:
        actual = compute_actual(self._receipt(effective_gas_price=0, l1_fee=0))
        self.assertEqual(actual.total_fee, 0)
        self.assertEqual(actual.data_fee_percent, 0.0)

    def test_comparison_to_dict(self) -> None:
        payload = reconcile(self._receipt(l1_fee=12_000_000_000_000), self.estimate).to_dict()
        self.assertEqual(payload["difference"], 3_000_000_000_000)
        self.assertEqual(payload["estimation_error_percent"], 10.0)
        self.assertEqual(payload["actual"]["total_fee"], 33_000_000_000_000)
        self.assertNotIn("l1_blob_base_fee", payload["actual"])


class ModelValidationTests(unittest.TestCase):
    def test_receipt_rejects_negative_fields(self) -> None:
        with self.assertRaises(ValueError):
            TransactionReceipt(effective_gas_price=-1, gas_used=1)
        with self.assertRaises(ValueError):
            TransactionReceipt(effective_gas_price=1, gas_used=1, l1_fee=-5)

    def test_receipt_round_trips_through_dict(self) -> None:
        receipt = TransactionReceipt(
            effective_gas_price=1,
            gas_used=2,
            l1_fee=3,
            transaction_hash="0xabc",
        )
        self.assertEqual(TransactionReceipt.from_dict(receipt.to_dict()), receipt)

    def test_from_dict_rejects_malformed_documents(self) -> None:
        with self.assertRaisesRegex(ValueError, "must be a JSON object"):
            FeeEstimate.from_dict([1, 2])
        with self.assertRaisesRegex(ValueError, "missing gas_limit"):
            FeeEstimate.from_dict({"gas_price": 1, "data_fee": 1})
        with self.assertRaisesRegex(ValueError, "missing effective_gas_price, gas_used"):
            TransactionReceipt.from_dict({})

    def test_request_validation(self) -> None:
        with self.assertRaises(ValueError):
            TransactionRequest(sender="", to="0x01")
        with self.assertRaises(ValueError):
            TransactionRequest(sender="0x01", to="0x02", data="0x")
        with self.assertRaises(ValueError):
            TransactionRequest(sender="0x01", to="0x02", value=-1)


if __name__ == "__main__":
    unittest.main()
