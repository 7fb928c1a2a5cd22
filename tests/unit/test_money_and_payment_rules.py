from decimal import Decimal

import pytest

from royalty_engine.db.types import basis_points_to_percentage, percentage_to_basis_points
from royalty_engine.exceptions import PaymentDetailsException
from royalty_engine.services.balance_ledger import BalanceSnapshot
from royalty_engine.services.payout_workflow import PayoutWorkflow, validate_payment_details


@pytest.mark.unit
class TestPercentageConversion:
    @pytest.mark.parametrize(
        "percentage, basis_points",
        [(Decimal("60"), 6000), (Decimal("33.3"), 3330), (Decimal("0"), 0), (Decimal("100.0"), 10000)],
    )
    def test_to_basis_points(self, percentage: Decimal, basis_points: int) -> None:
        assert percentage_to_basis_points(percentage) == basis_points

    def test_rejects_extra_precision(self) -> None:
        with pytest.raises(ValueError):
            percentage_to_basis_points(Decimal("33.33"))

    def test_to_percentage(self) -> None:
        assert basis_points_to_percentage(3330) == Decimal("33.3")
        assert str(basis_points_to_percentage(4000)) == "40.0"


@pytest.mark.unit
class TestBalanceSnapshot:
    def test_available_is_earned_minus_committed(self) -> None:
        snapshot = BalanceSnapshot(
            total_earned_cents=50000, total_paid_cents=10000, total_pending_cents=15000
        )

        assert snapshot.available_cents == 25000


@pytest.mark.unit
class TestPaymentDetails:
    def test_valid_details(self) -> None:
        validate_payment_details("paypal", {"paypal_email": "a@example.com"})

    def test_lists_every_missing_field(self) -> None:
        with pytest.raises(PaymentDetailsException) as exc_info:
            validate_payment_details(
                "bank_transfer", {"bank_name": "First Bank", "account_number": ""}
            )

        assert exc_info.value.status_code == 422
        assert exc_info.value.details["errors"] == [
            "account_number is required",
            "routing_number is required",
            "account_holder_name is required",
        ]

    def test_unsupported_method(self) -> None:
        with pytest.raises(PaymentDetailsException) as exc_info:
            validate_payment_details("cheque", {})

        assert exc_info.value.details["errors"] == ["Unsupported payment method: cheque"]


@pytest.mark.unit
class TestReferenceData:
    def test_minimums(self) -> None:
        assert PayoutWorkflow.minimum_payout_cents("USD") == 1000
        assert PayoutWorkflow.minimum_payout_cents("gbp") == 800
        assert PayoutWorkflow.minimum_payout_cents("PLN") == 4000
        assert PayoutWorkflow.minimum_payout_cents("JPY") == 1000

    def test_supported_methods(self) -> None:
        methods = {m.id: m for m in PayoutWorkflow.supported_payment_methods()}

        assert set(methods) == {"bank_transfer", "paypal", "wise", "crypto"}
        assert methods["crypto"].required_fields == ("wallet_address", "currency_type")
