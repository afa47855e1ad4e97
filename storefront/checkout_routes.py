# Copyright 2026 StyleHub Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
FastAPI Routes for Cart and Checkout

Every buyer works inside a session created with ``POST /sessions``. The
session holds the cart, the session storage the order snapshot is written to
and the checkout flow. Checkout state is returned after every action so a
page can render busy flags, field errors, toasts and the UPI QR code.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Dict, Optional
import logging

from .catalog import Catalog
from .catalog_routes import get_catalog, to_http_exception
from .checkout import CheckoutFlow
from .constants import Constants
from .errors import StorefrontError, ValidationError
from .models import CartItem, PaymentMethod, ShippingInfo
from .orders import build_confirmation, load_last_order
from .sessions import SessionRegistry, StorefrontSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Checkout"])

# Created on first use so importing the routes does not read the environment
_sessions: Optional[SessionRegistry] = None


def get_sessions() -> SessionRegistry:
    global _sessions
    if _sessions is None:
        _sessions = SessionRegistry()
    return _sessions


class AddToCartRequest(BaseModel):
    """Body of ``POST /sessions/{session_id}/cart/items``."""
    product_id: int
    quantity: int = Field(1, ge=1)
    selected_size: Optional[str] = None


class PaymentMethodRequest(BaseModel):
    method: PaymentMethod


def _session(session_id: str, sessions: SessionRegistry) -> StorefrontSession:
    try:
        return sessions.get(session_id)
    except StorefrontError as e:
        raise to_http_exception(e)


def _cart_payload(session: StorefrontSession) -> dict:
    return {
        "items": [item.to_json_dict() for item in session.cart.items],
        "total": session.cart.total,
        "count": session.cart.count,
    }


def _state_response(flow: CheckoutFlow, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        {"status": "success", "checkout": flow.get_state().model_dump(mode="json")},
        status_code=status_code,
    )


def _shipping_fields(data: Dict[str, str]) -> Dict[str, str]:
    """Accept shipping fields by attribute name or camelCase alias."""
    by_alias = {to_camel(name): name for name in ShippingInfo.model_fields}
    return {by_alias.get(key, key): value for key, value in data.items()}


# ============================================================================
# Sessions and cart
# ============================================================================

@router.post("", status_code=201)
async def create_session(sessions: SessionRegistry = Depends(get_sessions)):
    """Open a new buyer session."""
    session = sessions.create()
    return JSONResponse({"status": "success", "session_id": session.id}, status_code=201)


@router.delete("/{session_id}")
async def close_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    """Close a session; a payment still running for it is abandoned."""
    _session(session_id, sessions)
    sessions.close(session_id)
    return JSONResponse({"status": "success"})


@router.get("/{session_id}/cart")
async def get_cart(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(session_id, sessions)
    return JSONResponse({"status": "success", "cart": _cart_payload(session)})


@router.post("/{session_id}/cart/items", status_code=201)
async def add_cart_item(
    session_id: str,
    request: AddToCartRequest,
    sessions: SessionRegistry = Depends(get_sessions),
    product_catalog: Catalog = Depends(get_catalog),
):
    """Add a product to the cart in the selected size."""
    session = _session(session_id, sessions)

    try:
        product = product_catalog.get_product(request.product_id)
        if product.sizes and request.selected_size not in product.sizes:
            raise ValidationError(
                "Please select a size",
                field_errors={"selected_size": f"Available sizes: {', '.join(product.sizes)}"},
            )
    except StorefrontError as e:
        raise to_http_exception(e)

    item = session.cart.add_item(CartItem(
        product_id=product.id,
        name=product.name,
        brand=product.brand,
        price=product.price,
        quantity=request.quantity,
        selected_size=request.selected_size,
        image=product.image,
    ))
    logger.info(f"Session {session_id}: added {request.quantity} x {product.name} ({request.selected_size})")

    return JSONResponse(
        {"status": "success", "item": item.to_json_dict(), "cart": _cart_payload(session)},
        status_code=201,
    )


@router.delete("/{session_id}/cart/items/{product_id}")
async def remove_cart_item(
    session_id: str,
    product_id: int,
    size: Optional[str] = Query(None, description="Only remove the line in this size"),
    sessions: SessionRegistry = Depends(get_sessions),
):
    session = _session(session_id, sessions)
    try:
        session.cart.remove_item(product_id, size)
    except StorefrontError as e:
        raise to_http_exception(e)

    return JSONResponse({"status": "success", "cart": _cart_payload(session)})


# ============================================================================
# Checkout
# ============================================================================

@router.post("/{session_id}/checkout/start")
async def start_checkout(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    """Enter checkout; an empty cart is sent back to the cart page."""
    session = _session(session_id, sessions)
    flow = session.checkout()
    try:
        flow.start()
    except StorefrontError as e:
        raise to_http_exception(e)

    return _state_response(flow)


@router.get("/{session_id}/checkout")
async def get_checkout(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(session_id, sessions)
    return _state_response(session.flow)


@router.put("/{session_id}/checkout/shipping")
async def update_shipping(
    session_id: str,
    fields: Dict[str, str],
    sessions: SessionRegistry = Depends(get_sessions),
):
    """Update shipping form fields (snake_case or camelCase keys)."""
    session = _session(session_id, sessions)
    try:
        session.flow.update_shipping(**_shipping_fields(fields))
    except StorefrontError as e:
        raise to_http_exception(e)

    return _state_response(session.flow)


@router.put("/{session_id}/checkout/payment-method")
async def select_payment_method(
    session_id: str,
    request: PaymentMethodRequest,
    sessions: SessionRegistry = Depends(get_sessions),
):
    session = _session(session_id, sessions)
    try:
        session.flow.select_method(request.method)
    except StorefrontError as e:
        raise to_http_exception(e)

    return _state_response(session.flow)


@router.post("/{session_id}/checkout/pay")
async def pay(
    session_id: str,
    wait: bool = Query(False, description="Wait for the payment to be confirmed"),
    sessions: SessionRegistry = Depends(get_sessions),
):
    """
    Validate the form and start the payment.

    Without ``wait`` the payment keeps running in the background and the
    response is 202; poll ``GET .../checkout`` for the outcome. With ``wait``
    the response is sent once the order is placed or the payment fails. A
    payment cancelled while waiting answers 200 with the form back in its
    idle state.
    """
    session = _session(session_id, sessions)
    flow = session.flow

    try:
        if wait:
            await flow.pay()
        else:
            await flow.submit()
            return _state_response(flow, status_code=202)
    except StorefrontError as e:
        raise to_http_exception(e)

    return _state_response(flow)


@router.post("/{session_id}/checkout/cancel")
async def cancel_payment(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    """Abandon the running payment, e.g. closing the UPI QR dialog."""
    session = _session(session_id, sessions)
    session.flow.cancel()
    return _state_response(session.flow)


# ============================================================================
# Confirmation
# ============================================================================

@router.get("/{session_id}/order-confirmation")
async def order_confirmation(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    """Show the last placed order; without one the buyer is sent home."""
    session = _session(session_id, sessions)
    snapshot = load_last_order(session.storage)

    if snapshot is None:
        return RedirectResponse(Constants.HOME_PATH, status_code=303)

    confirmation = build_confirmation(snapshot)
    return JSONResponse({"status": "success", "confirmation": confirmation.to_json_dict()})
