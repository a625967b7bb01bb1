"""Tests for the Coupon aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from storefront.coupon.coupon import Coupon


def _coupon(**overrides):
    data = {
        "code": " ramadan10 ",
        "discount_percentage": 10,
        "expiry_date": datetime.now(UTC) + timedelta(days=30),
    }
    data.update(overrides)
    return Coupon.create(**data)


class TestCoupon:
    def test_code_is_normalized(self):
        assert _coupon().code == "RAMADAN10"

    def test_apply_to_subtotal(self):
        assert _coupon(discount_percentage=10).apply_to(621.0) == pytest.approx(558.9)

    def test_full_discount(self):
        assert _coupon(discount_percentage=100).apply_to(80.0) == pytest.approx(0.0)

    def test_redeemable_when_active_and_unexpired(self):
        assert _coupon().is_redeemable()

    def test_expired_coupon(self):
        coupon = _coupon(expiry_date=datetime.now(UTC) - timedelta(minutes=1))
        assert coupon.is_expired()
        assert not coupon.is_redeemable()

    def test_naive_expiry_is_treated_as_utc(self):
        coupon = _coupon(expiry_date=datetime(2030, 1, 1))
        assert not coupon.is_expired(at=datetime(2029, 12, 31, tzinfo=UTC))
        assert coupon.is_expired(at=datetime(2030, 1, 2, tzinfo=UTC))

    def test_deactivated_coupon_is_not_redeemable(self):
        coupon = _coupon()
        coupon.deactivate()
        assert not coupon.is_redeemable()
