"""Tests for the payment status rule."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from app.models.ticket import PaymentStatus
from app.services.payment_entry_aggregator import PaymentEntryAggregator
from app.services.payment_status import (
    derive_payment_status,
    has_sub_cent_digits,
    remaining_amount,
)


class TestDerivePaymentStatus:
    @pytest.mark.parametrize(
        "price,paid,expected",
        [
            ("1500", "0", PaymentStatus.PENDING),
            ("1500", "1000", PaymentStatus.PENDING),
            ("1500", "1499", PaymentStatus.PENDING),
            ("1500", "1499.01", PaymentStatus.PAID),
            ("1500", "1500", PaymentStatus.PAID),
            ("1500", "1500.99", PaymentStatus.PAID),
            ("1500", "1501", PaymentStatus.PENDING),
            ("0", "0", PaymentStatus.PAID),
            ("0", "0.5", PaymentStatus.PAID),
        ],
    )
    def test_status_follows_one_unit_tolerance(self, price, paid, expected):
        assert derive_payment_status(Decimal(price), Decimal(paid)) == expected

    def test_accepts_floats_and_ints(self):
        assert derive_payment_status(1000, 999.5) == PaymentStatus.PAID
        assert derive_payment_status(1000.0, 500) == PaymentStatus.PENDING

    def test_explicit_tolerance(self):
        assert derive_payment_status(Decimal("100"), Decimal("95"), tolerance=Decimal("10")) == PaymentStatus.PAID
        assert derive_payment_status(Decimal("100"), Decimal("95"), tolerance=Decimal("5")) == PaymentStatus.PENDING

    def test_tolerance_from_settings(self):
        with patch("app.services.payment_status.settings") as mock_settings:
            mock_settings.PAYMENT_TOLERANCE = Decimal("0.01")
            assert derive_payment_status(Decimal("100"), Decimal("99.5")) == PaymentStatus.PENDING
            assert derive_payment_status(Decimal("100"), Decimal("100")) == PaymentStatus.PAID

    def test_status_is_paid_iff_within_tolerance(self):
        for price in range(0, 3001, 250):
            for paid in range(0, 3501, 125):
                expected = abs(Decimal(paid) - Decimal(price)) < 1
                status = derive_payment_status(Decimal(price), Decimal(paid))
                assert (status == PaymentStatus.PAID) == expected


class TestRemainingAmount:
    def test_remaining(self):
        assert remaining_amount(Decimal("1500"), Decimal("1000")) == Decimal("500")

    def test_remaining_negative_on_overpayment(self):
        assert remaining_amount(Decimal("1000"), Decimal("1200")) == Decimal("-200")

    def test_remaining_zero(self):
        assert remaining_amount(Decimal("1000"), Decimal("1000")) == Decimal("0")


class TestPreviewAgreesWithServerRule:
    @pytest.mark.parametrize(
        "price,existing,fields",
        [
            ("1500", [], {"cash_amount": "1000"}),
            ("1500", ["1000"], {"card_amount": "500"}),
            ("1500", [], {"cash_amount": "700", "terminal_amount": "800"}),
            ("1000", ["999"], {}),
            ("1000", [], {"transfer_amount": "999.5"}),
            ("800", ["300"], {"cash_amount": "300", "card_amount": "300"}),
        ],
    )
    def test_projected_status_matches_rule(self, price, existing, fields):
        aggregator = PaymentEntryAggregator.from_fields(
            Decimal(price), [Decimal(e) for e in existing], **fields
        )
        paid = sum((Decimal(e) for e in existing), Decimal("0")) + sum(
            (Decimal(v) for v in fields.values()), Decimal("0")
        )
        assert aggregator.projected_status == derive_payment_status(Decimal(price), paid)
        assert aggregator.remaining == remaining_amount(Decimal(price), paid)


class TestHasSubCentDigits:
    @pytest.mark.parametrize("amount", ["0.12", "1500", "1500.50", "1500.500", Decimal("1E+3")])
    def test_storable_amounts(self, amount):
        assert has_sub_cent_digits(amount) is False

    @pytest.mark.parametrize("amount", ["0.125", "100.005", Decimal("0.001")])
    def test_sub_cent_amounts(self, amount):
        assert has_sub_cent_digits(amount) is True
