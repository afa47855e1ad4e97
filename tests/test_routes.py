"""Tests for the HTTP API."""
import asyncio
import pytest
import httpx
from fastapi.testclient import TestClient

from storefront.catalog_routes import get_review_service
from storefront.checkout_routes import get_sessions
from storefront.config import StaticSecretStore
from storefront.models import PaymentMethod
from storefront.payment_function import PaymentIntentFunction
from storefront.payment_function_routes import get_payment_function
from storefront.reviews import ReviewService
from storefront.server import app
from storefront.sessions import SessionRegistry


SHIPPING = {
    "fullName": "Priya Sharma",
    "email": "priya.sharma@example.com",
    "phone": "9876543210",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "zipCode": "560001",
}


def stripe_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={
        "id": "pi_route",
        "client_secret": "pi_route_secret",
        "amount": 10000,
        "currency": "inr",
    })


@pytest.fixture
def registry(fast_settings):
    return SessionRegistry(fast_settings)


@pytest.fixture
def client(registry):
    transport = httpx.MockTransport(stripe_handler)
    function = PaymentIntentFunction(
        secrets=StaticSecretStore({"STRIPE_SECRET_KEY": "sk_test_123", "STRIPE_WEBHOOK_SECRET": "whsec_123"}),
        http_client_factory=lambda: httpx.AsyncClient(transport=transport),
    )
    reviews = ReviewService()

    app.dependency_overrides[get_sessions] = lambda: registry
    app.dependency_overrides[get_payment_function] = lambda: function
    app.dependency_overrides[get_review_service] = lambda: reviews
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client):
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def add_jacket(client, session_id, size="M"):
    return client.post(
        f"/sessions/{session_id}/cart/items",
        json={"product_id": 1, "quantity": 1, "selected_size": size},
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestCatalogRoutes:
    def test_filtered_products(self, client):
        response = client.get("/products", params={"size": "M", "brand": ["Zara", "H&M"]})
        data = response.json()
        assert [p["id"] for p in data["products"]] == [3, 5, 7]
        assert data["count"] == 3
        assert [c["label"] for c in data["chips"]] == ["H&M", "Zara", "Size: M"]

    def test_unknown_product(self, client):
        assert client.get("/products/999").status_code == 404

    def test_reviews(self, client):
        data = client.get("/products/1/reviews").json()
        assert data["totalCount"] == 3
        assert data["averageRating"] == 4.7
        assert data["reviews"][0]["userName"] == "Sarah Johnson"

    def test_add_review(self, client):
        response = client.post("/products/1/reviews", json={"userName": "Arjun", "rating": 4, "comment": "Warm."})
        assert response.status_code == 201

        data = client.get("/products/1/reviews").json()
        assert data["totalCount"] == 4
        assert data["reviews"][0]["userName"] == "Arjun"

    def test_invalid_review(self, client):
        response = client.post("/products/1/reviews", json={"userName": "Arjun", "comment": "Warm."})
        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Please select a rating"


class TestCartRoutes:
    def test_unknown_session(self, client):
        assert client.get("/sessions/nope/cart").status_code == 404

    def test_add_and_remove(self, client, session_id):
        response = add_jacket(client, session_id)
        assert response.status_code == 201
        assert response.json()["cart"]["count"] == 1

        cart = client.delete(f"/sessions/{session_id}/cart/items/1").json()["cart"]
        assert cart["items"] == []

    def test_size_must_be_offered(self, client, session_id):
        response = add_jacket(client, session_id, size="XXL")
        assert response.status_code == 400
        assert "selected_size" in response.json()["detail"]["errors"]

    def test_remove_missing_item(self, client, session_id):
        assert client.delete(f"/sessions/{session_id}/cart/items/1").status_code == 404


class TestCheckoutRoutes:
    def test_empty_cart_cannot_check_out(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/checkout/start")
        assert response.status_code == 400
        assert response.json()["detail"]["redirect_to"] == "/cart"

    def test_pay_requires_shipping(self, client, session_id):
        add_jacket(client, session_id)
        client.post(f"/sessions/{session_id}/checkout/start")

        response = client.post(f"/sessions/{session_id}/checkout/pay", params={"wait": True})
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["message"] == "Please fill in all required fields"
        assert detail["errors"]["email"] == "Email is required"

    def test_cod_checkout_to_confirmation(self, client, session_id):
        add_jacket(client, session_id)
        start = client.post(f"/sessions/{session_id}/checkout/start").json()["checkout"]
        assert start["totals"] == {"subtotal": 3499.0, "shipping": 0.0, "tax": 280.0, "total": 3779.0}

        client.put(f"/sessions/{session_id}/checkout/shipping", json=SHIPPING)
        response = client.post(f"/sessions/{session_id}/checkout/pay", params={"wait": True})
        assert response.status_code == 200
        checkout = response.json()["checkout"]
        assert checkout["status"] == "confirmed"
        assert checkout["redirect_to"] == "/order-confirmation"

        confirmation = client.get(f"/sessions/{session_id}/order-confirmation").json()["confirmation"]
        assert confirmation["order"]["orderId"] == checkout["order_id"]
        assert confirmation["payment_method_name"] == "Cash on Delivery"
        assert confirmation["amount_due_on_delivery"] == 3779.0

        assert client.get(f"/sessions/{session_id}/cart").json()["cart"]["count"] == 0

    def test_confirmation_without_order_redirects_home(self, client, session_id):
        response = client.get(f"/sessions/{session_id}/order-confirmation", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_cancelled_upi_payment(self, client, session_id, registry):
        for driver in registry.drivers.values():
            driver.delay = 10
        add_jacket(client, session_id)
        client.post(f"/sessions/{session_id}/checkout/start")
        client.put(f"/sessions/{session_id}/checkout/shipping", json=SHIPPING)
        client.put(f"/sessions/{session_id}/checkout/payment-method", json={"method": "upi"})

        response = client.post(f"/sessions/{session_id}/checkout/pay")
        assert response.status_code == 202
        checkout = response.json()["checkout"]
        assert checkout["status"] == "awaiting_upi"
        assert checkout["upi_request"]["qrImageUrl"].startswith("https://api.qrserver.com/")

        assert client.post(f"/sessions/{session_id}/checkout/pay").status_code == 409

        cancelled = client.post(f"/sessions/{session_id}/checkout/cancel").json()["checkout"]
        assert cancelled["status"] == "idle"
        assert cancelled["upi_request"] is None
        assert client.get(f"/sessions/{session_id}/order-confirmation", follow_redirects=False).status_code == 303

    @pytest.mark.asyncio
    async def test_cancel_while_waiting_for_payment(self, registry):
        for driver in registry.drivers.values():
            driver.delay = 10
        app.dependency_overrides[get_sessions] = lambda: registry
        transport = httpx.ASGITransport(app=app)
        try:
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as async_client:
                session_id = (await async_client.post("/sessions")).json()["session_id"]
                base = f"/sessions/{session_id}"
                await async_client.post(
                    f"{base}/cart/items",
                    json={"product_id": 1, "quantity": 1, "selected_size": "M"},
                )
                await async_client.post(f"{base}/checkout/start")
                await async_client.put(f"{base}/checkout/shipping", json=SHIPPING)
                await async_client.put(f"{base}/checkout/payment-method", json={"method": "upi"})

                waiting = asyncio.create_task(
                    async_client.post(f"{base}/checkout/pay", params={"wait": True})
                )
                flow = registry.get(session_id).flow
                for _ in range(50):
                    if flow.is_pending:
                        break
                    await asyncio.sleep(0)
                assert flow.is_pending

                cancelled = await async_client.post(f"{base}/checkout/cancel")
                response = await waiting
                confirmation = await async_client.get(f"{base}/order-confirmation", follow_redirects=False)
        finally:
            app.dependency_overrides.clear()

        assert cancelled.status_code == 200
        assert response.status_code == 200
        checkout = response.json()["checkout"]
        assert checkout["status"] == "idle"
        assert checkout["busy"] is False
        assert checkout["order_id"] is None
        assert confirmation.status_code == 303

    def test_card_checkout_through_payment_function(self, client, session_id, registry):
        # Route the card driver's intent call back into the app under test
        card_client = registry.drivers[PaymentMethod.STRIPE].client
        card_client.url = "http://testserver/functions/stripe-payment"
        card_client.transport = httpx.ASGITransport(app=app)

        add_jacket(client, session_id)
        client.post(f"/sessions/{session_id}/checkout/start")
        client.put(f"/sessions/{session_id}/checkout/shipping", json=SHIPPING)
        client.put(f"/sessions/{session_id}/checkout/payment-method", json={"method": "stripe"})

        response = client.post(f"/sessions/{session_id}/checkout/pay", params={"wait": True})
        assert response.status_code == 200
        assert response.json()["checkout"]["status"] == "confirmed"

        confirmation = client.get(f"/sessions/{session_id}/order-confirmation").json()["confirmation"]
        assert confirmation["payment_method_name"] == "Credit/Debit Card"
        assert confirmation["amount_due_on_delivery"] is None

    def test_card_checkout_without_endpoint_fails(self, client, session_id):
        add_jacket(client, session_id)
        client.post(f"/sessions/{session_id}/checkout/start")
        client.put(f"/sessions/{session_id}/checkout/shipping", json=SHIPPING)
        client.put(f"/sessions/{session_id}/checkout/payment-method", json={"method": "stripe"})

        response = client.post(f"/sessions/{session_id}/checkout/pay", params={"wait": True})
        assert response.status_code == 402

        checkout = client.get(f"/sessions/{session_id}/checkout").json()["checkout"]
        assert checkout["status"] == "idle"
        assert checkout["messages"][-1]["content"] == "Card payments are not configured"


class TestPaymentFunctionRoute:
    def test_minimum_amount(self, client):
        response = client.post("/functions/stripe-payment", json={"action": "create_payment_intent", "amount": 0.10})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount. Minimum amount is ₹0.50"

    def test_create_intent(self, client):
        response = client.post("/functions/stripe-payment", json={"action": "create_payment_intent", "amount": 100})
        assert response.status_code == 200
        assert response.json()["amount"] == 10000

    def test_get_not_allowed(self, client):
        assert client.get("/functions/stripe-payment").status_code == 405

    def test_webhook(self, client):
        response = client.post(
            "/functions/stripe-payment",
            json={"action": "webhook", "type": "payment_intent.canceled", "data": {"object": {"id": "pi_1"}}},
            headers={"Stripe-Signature": "t=1,v1=abc"},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}
