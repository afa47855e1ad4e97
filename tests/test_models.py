"""Tests for order totals, order ids and shipping validation."""
import pytest
from datetime import datetime, timezone

from storefront.errors import ValidationError
from storefront.models import (
    CartItem,
    OrderSnapshot,
    PaymentMethod,
    ShippingInfo,
    compute_order_totals,
    generate_order_id,
    round_half_up,
)
from storefront.validation import ensure_valid_shipping, normalize_phone, validate_shipping


class TestOrderTotals:
    def test_shipping_charged_at_threshold(self):
        totals = compute_order_totals(1500)
        assert totals.shipping == 99
        assert totals.tax == 120
        assert totals.total == 1719

    def test_free_shipping_above_threshold(self):
        totals = compute_order_totals(1501)
        assert totals.shipping == 0
        assert totals.tax == 120
        assert totals.total == 1621

    def test_small_order_pays_shipping(self):
        totals = compute_order_totals(1000)
        assert (totals.shipping, totals.tax, totals.total) == (99, 80, 1179)

    def test_1600_ships_free(self):
        assert compute_order_totals(1600).shipping == 0

    def test_tax_rounds_half_up(self):
        # 6.25 * 0.08 = 0.5
        assert compute_order_totals(6.25).tax == 1

    def test_total_is_sum_of_parts(self):
        totals = compute_order_totals(4697)
        assert totals.total == totals.subtotal + totals.shipping + totals.tax
        assert totals.tax == 376

    def test_round_half_up_places(self):
        assert round_half_up(4.65, 1) == 4.7
        assert round_half_up(2.5) == 3
        assert round_half_up(4.666666, 1) == 4.7


class TestOrderIds:
    def test_order_id_is_epoch_millis(self):
        now = datetime(2026, 10, 18, 12, 0, 0, 123000, tzinfo=timezone.utc)
        assert generate_order_id(now) == f"ORDER_{int(now.timestamp() * 1000)}"


class TestSerialization:
    def test_snapshot_uses_camel_case_keys(self, sample_items, sample_shipping):
        snapshot = OrderSnapshot(
            order_id="ORDER_1",
            items=sample_items,
            shipping=sample_shipping,
            payment_method=PaymentMethod.UPI,
            totals=compute_order_totals(4697),
            timestamp="2026-10-18T12:00:00.000Z",
        )
        data = snapshot.to_json_dict()
        assert data["orderId"] == "ORDER_1"
        assert data["paymentMethod"] == "upi"
        assert data["shipping"]["fullName"] == "Priya Sharma"
        assert data["items"][0]["selectedSize"] == "M"
        assert data["status"] == "confirmed"

    def test_snapshot_is_immutable(self, sample_items, sample_shipping):
        snapshot = OrderSnapshot(
            order_id="ORDER_1",
            items=sample_items,
            shipping=sample_shipping,
            payment_method=PaymentMethod.COD,
            totals=compute_order_totals(100),
            timestamp="2026-10-18T12:00:00.000Z",
        )
        with pytest.raises(Exception):
            snapshot.order_id = "ORDER_2"

    def test_cart_item_accepts_aliases(self):
        item = CartItem.model_validate({"productId": 2, "name": "Runner", "price": 10, "selectedSize": "9"})
        assert item.product_id == 2
        assert item.selected_size == "9"
        assert item.line_total == 10

    def test_payment_method_display(self):
        assert PaymentMethod.COD.display_name == "Cash on Delivery"
        assert PaymentMethod.UPI.icon == "Smartphone"
        assert PaymentMethod.STRIPE.display_name == "Credit/Debit Card"


class TestShippingValidation:
    def test_valid_form_has_no_errors(self, sample_shipping):
        assert validate_shipping(sample_shipping) == {}

    def test_empty_form_reports_every_required_field(self):
        errors = validate_shipping(ShippingInfo())
        assert errors == {
            "full_name": "Full name is required",
            "email": "Email is required",
            "phone": "Phone number is required",
            "address": "Address is required",
            "city": "City is required",
            "state": "State is required",
            "zip_code": "ZIP code is required",
        }

    def test_whitespace_only_is_missing(self, sample_shipping):
        info = sample_shipping.model_copy(update={"city": "   "})
        assert validate_shipping(info) == {"city": "City is required"}

    def test_invalid_email(self, sample_shipping):
        info = sample_shipping.model_copy(update={"email": "priya.example.com"})
        assert validate_shipping(info) == {"email": "Invalid email format"}

    @pytest.mark.parametrize("phone", ["12345", "98765432101", "+91 98765 43210"])
    def test_invalid_phone(self, sample_shipping, phone):
        info = sample_shipping.model_copy(update={"phone": phone})
        assert validate_shipping(info) == {"phone": "Invalid phone number"}

    @pytest.mark.parametrize("email,valid", [("not-an-email", False), ("a@b.com", True)])
    def test_email_format(self, sample_shipping, email, valid):
        info = sample_shipping.model_copy(update={"email": email})
        assert ("email" not in validate_shipping(info)) is valid

    @pytest.mark.parametrize("phone,valid", [("123", False), ("9876543210", True), ("987-654-3210", True)])
    def test_phone_digits(self, sample_shipping, phone, valid):
        info = sample_shipping.model_copy(update={"phone": phone})
        assert ("phone" not in validate_shipping(info)) is valid

    def test_phone_formatting_is_ignored(self):
        assert normalize_phone("(987) 654-3210") == "9876543210"

    def test_country_is_optional(self, sample_shipping):
        info = sample_shipping.model_copy(update={"country": ""})
        assert validate_shipping(info) == {}

    def test_ensure_valid_raises_with_field_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid_shipping(ShippingInfo(full_name="Priya"))
        assert "full_name" not in exc_info.value.field_errors
        assert exc_info.value.field_errors["email"] == "Email is required"
