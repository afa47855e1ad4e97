"""Tests for the COD, UPI and card payment drivers."""
import json
import pytest
import httpx
from datetime import datetime, timezone
from unittest.mock import MagicMock

from storefront.errors import PaymentError
from storefront.models import PaymentMethod, UPIPaymentRequest, compute_order_totals, generate_order_id
from storefront.payments import (
    CardDriver,
    CashOnDeliveryDriver,
    PaymentIntentClient,
    PendingOrder,
    UPIDriver,
    create_upi_request,
)
from storefront.payments.upi import build_qr_image_url, format_amount


@pytest.fixture
def pending_order(sample_items, sample_shipping):
    return PendingOrder(
        items=sample_items,
        shipping=sample_shipping,
        payment_method=PaymentMethod.COD,
        totals=compute_order_totals(4697),
    )


class TestUPIRequest:
    def test_upi_uri(self):
        now = datetime(2026, 10, 18, tzinfo=timezone.utc)
        request = create_upi_request("merchant@paytm", "StyleHub", 1179.0, now=now)
        order_id = generate_order_id(now)

        assert request.generated_order_id == order_id
        assert request.upi_uri == (
            f"upi://pay?pa=merchant@paytm&pn=StyleHub&am=1179&cu=INR&tn=Payment for Order {order_id}"
        )

    def test_qr_url_encodes_uri_as_component(self):
        url = build_qr_image_url("upi://pay?pa=merchant@paytm&tn=Payment for Order ORDER_1")
        assert url.startswith("https://api.qrserver.com/v1/create-qr-code/?size=200x200&data=")
        assert url.endswith("upi%3A%2F%2Fpay%3Fpa%3Dmerchant%40paytm%26tn%3DPayment%20for%20Order%20ORDER_1")

    def test_amount_formatting(self):
        assert format_amount(1179.0) == "1179"
        assert format_amount(99.5) == "99.5"


class TestDrivers:
    @pytest.mark.asyncio
    async def test_cod_always_confirms(self, pending_order):
        confirmation = await CashOnDeliveryDriver(delay=0).attempt_payment(pending_order)
        assert confirmation.payment_method == PaymentMethod.COD
        assert confirmation.message == "Order placed successfully! Cash on Delivery selected."

    @pytest.mark.asyncio
    async def test_upi_shows_request_before_confirming(self, pending_order):
        on_update = MagicMock()
        driver = UPIDriver("merchant@paytm", delay=0)

        confirmation = await driver.attempt_payment(pending_order, on_update=on_update)

        request = on_update.call_args.args[0]
        assert isinstance(request, UPIPaymentRequest)
        assert request.amount == 5073
        assert confirmation.message == "UPI payment verified!"
        assert confirmation.reference == request.generated_order_id

    @pytest.mark.asyncio
    async def test_card_creates_intent_then_confirms(self, pending_order):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "success": True,
                "client_secret": "pi_123_secret_abc",
                "payment_intent_id": "pi_123",
                "amount": 507300,
                "currency": "inr",
            })

        client = PaymentIntentClient("http://functions.test/stripe-payment", transport=httpx.MockTransport(handler))
        confirmation = await CardDriver(client, delay=0).attempt_payment(pending_order)

        assert confirmation.message == "Payment successful!"
        assert confirmation.reference == "pi_123"
        assert seen["body"]["action"] == "create_payment_intent"
        assert seen["body"]["amount"] == 5073
        assert seen["body"]["currency"] == "inr"
        assert seen["body"]["orderData"]["shipping"]["email"] == "priya.sharma@example.com"

    @pytest.mark.asyncio
    async def test_card_failure_raises_payment_error(self, pending_order):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json={"success": False, "error": "Stripe configuration missing"})
        )
        client = PaymentIntentClient("http://functions.test/stripe-payment", transport=transport)

        with pytest.raises(PaymentError) as exc_info:
            await CardDriver(client, delay=0).attempt_payment(pending_order)
        assert exc_info.value.message == "Payment failed. Please try again."
        assert exc_info.value.details == "Stripe configuration missing"

    @pytest.mark.asyncio
    async def test_card_without_endpoint_is_not_configured(self, pending_order):
        with pytest.raises(PaymentError, match="not configured"):
            await CardDriver(PaymentIntentClient(None), delay=0).attempt_payment(pending_order)

    @pytest.mark.asyncio
    async def test_unreachable_function_raises_payment_error(self, pending_order):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = PaymentIntentClient("http://functions.test/stripe-payment", transport=httpx.MockTransport(handler))
        with pytest.raises(PaymentError):
            await CardDriver(client, delay=0).attempt_payment(pending_order)
