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
StyleHub CLI - run the storefront and try checkout from the terminal.

Usage:
    storefront --help
    storefront serve
    storefront checkout
    storefront intent --amount 499
"""

import asyncio
import json
from typing import List, Optional, Tuple

import click
import httpx

from storefront.catalog import Catalog, Product
from storefront.checkout import CheckoutFlow, ToastLevel
from storefront.config import Settings
from storefront.constants import Constants
from storefront.errors import StorefrontError, ValidationError
from storefront.models import CartItem, PaymentMethod, ShippingInfo
from storefront.orders import build_confirmation, load_last_order
from storefront.sessions import SessionRegistry


def section(title: str):
    """Start a block of output under an underlined title."""
    click.echo()
    click.secho(title, bold=True)
    click.echo("-" * len(title))


STATUS_COLORS = {"ok": "green", "info": "cyan", "error": "red"}


def status(message: str, level: str = "info"):
    # Errors go to stderr
    click.secho(f"{level:>5}  {message}", fg=STATUS_COLORS[level], err=level == "error")


def show_toasts(flow: CheckoutFlow):
    """Echo the toasts the checkout page would pop up."""
    for toast in flow.drain_messages():
        status(toast.content, "ok" if toast.type == ToastLevel.SUCCESS else toast.type.value)


# ============================================================================
# Interactive checkout
# ============================================================================

def pick_items(catalog: Catalog) -> List[Tuple[Product, Optional[str], int]]:
    """Prompt for products until the buyer is done."""
    products = catalog.list_products()
    for product in products:
        click.echo(f"  {product.id}. {product.name} ({product.brand}) - Rs. {product.price:g}")

    picked = []
    while True:
        product_id = click.prompt("Product id (0 to finish)", type=int, default=0)
        if product_id == 0:
            return picked
        try:
            product = catalog.get_product(product_id)
        except StorefrontError as e:
            status(e.message, "error")
            continue

        size = None
        if product.sizes:
            size = click.prompt("Size", type=click.Choice(product.sizes))
        quantity = click.prompt("Quantity", type=click.IntRange(min=1), default=1)
        picked.append((product, size, quantity))
        status(f"Added {quantity} x {product.name}", "ok")


def prompt_shipping() -> dict:
    labels = {
        "full_name": "Full name",
        "email": "Email",
        "phone": "Phone",
        "address": "Address",
        "city": "City",
        "state": "State",
        "zip_code": "PIN code",
        "country": "Country",
    }
    defaults = ShippingInfo()
    return {
        name: click.prompt(label, default=getattr(defaults, name) or "", show_default=False)
        for name, label in labels.items()
    }


async def run_checkout(settings: Settings, method: Optional[str]):
    """Run one checkout in an in-process session."""
    section("StyleHub Checkout")

    catalog = Catalog()
    registry = SessionRegistry(settings)
    session = registry.create()

    for product, size, quantity in pick_items(catalog):
        session.cart.add_item(CartItem(
            product_id=product.id,
            name=product.name,
            brand=product.brand,
            price=product.price,
            quantity=quantity,
            selected_size=size,
            image=product.image,
        ))

    flow = session.checkout()
    try:
        totals = flow.start()
    except StorefrontError as e:
        show_toasts(flow)
        status(e.message, "error")
        return

    click.echo(f"\nSubtotal: Rs. {totals.subtotal:g}")
    click.echo(f"Shipping: {'FREE' if totals.shipping == 0 else f'Rs. {totals.shipping:g}'}")
    click.echo(f"Tax:      Rs. {totals.tax:g}")
    click.echo(f"Total:    Rs. {totals.total:g}\n")

    chosen = method or click.prompt(
        "Payment method",
        type=click.Choice([m.value for m in PaymentMethod]),
        default=PaymentMethod.COD.value,
    )
    flow.select_method(PaymentMethod(chosen))

    while True:
        flow.update_shipping(**prompt_shipping())
        try:
            task = await flow.submit()
            break
        except ValidationError as e:
            show_toasts(flow)
            for field, message in e.field_errors.items():
                status(f"{field}: {message}", "error")

    show_toasts(flow)
    if flow.upi_request is not None:
        status(f"Scan to pay: {flow.upi_request.qr_image_url}")
        status(f"UPI link: {flow.upi_request.upi_uri}")
    status("Waiting for payment confirmation...")

    try:
        await task
    except StorefrontError as e:
        show_toasts(flow)
        status(e.details or e.message, "error")
        return
    show_toasts(flow)

    snapshot = load_last_order(session.storage)
    confirmation = build_confirmation(snapshot)
    section("Order Confirmed")
    click.echo(f"Order ID:           {snapshot.order_id}")
    click.echo(f"Payment:            {confirmation.payment_method_name}")
    click.echo(f"Items:              {confirmation.item_count_label}")
    click.echo(f"Total:              Rs. {snapshot.totals.total:g}")
    click.echo(f"Estimated delivery: {confirmation.estimated_delivery_display}")
    if confirmation.amount_due_on_delivery is not None:
        click.echo(f"Pay on delivery:    Rs. {confirmation.amount_due_on_delivery:g}")


# ============================================================================
# Payment function probe
# ============================================================================

async def run_intent_probe(url: str, amount: float, currency: str):
    """POST a create_payment_intent request to a running payment function."""
    section("Payment Function Test")
    status(f"POST {url}")

    body = {
        "action": Constants.ACTION_CREATE_PAYMENT_INTENT,
        "amount": amount,
        "currency": currency,
        "orderData": {"items": [], "shipping": {}},
    }

    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(url, json=body)
    except httpx.ConnectError:
        status(f"Cannot connect to the payment function at {url}", "error")
        status("Is the server running? Start it with: storefront serve")
        return

    try:
        click.echo(json.dumps(response.json(), indent=2))
    except ValueError:
        click.echo(response.text)
    if response.is_success:
        status(f"Payment intent created ({response.status_code})", "ok")
    else:
        status(f"Function returned {response.status_code}", "error")


@click.group()
def cli():
    """StyleHub Storefront CLI"""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (default from STOREFRONT_HOST)")
@click.option("--port", default=None, type=int, help="Port (default from STOREFRONT_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Start the storefront server."""
    from storefront.server import run_server, settings

    host = host or settings.host
    port = port or settings.port
    section("Starting StyleHub Storefront")
    click.echo(f"URL: http://{host}:{port}")
    click.echo("Press Ctrl+C to stop\n")
    run_server(host=host, port=port)


@cli.command()
@click.option(
    "--method", "-m",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=None,
    help="Payment method (asked interactively if omitted)",
)
@click.option("--fast", is_flag=True, help="Skip the simulated confirmation delays")
def checkout(method: Optional[str], fast: bool):
    """Place an order interactively."""
    settings = Settings.from_env()
    if fast:
        settings.cod_delay = settings.upi_delay = settings.card_delay = 0
    asyncio.run(run_checkout(settings, method))


@cli.command()
@click.option("--url", default=None, help="Payment function URL (default from settings)")
@click.option("--amount", default=100.0, type=float, show_default=True, help="Amount in rupees")
@click.option("--currency", default=Constants.DEFAULT_CURRENCY, show_default=True)
def intent(url: Optional[str], amount: float, currency: str):
    """Create a test payment intent through the payment function."""
    target = url or Settings.from_env().payment_function_url
    if not target:
        status("No payment function URL configured", "error")
        raise SystemExit(1)
    asyncio.run(run_intent_probe(target, amount, currency))


if __name__ == "__main__":
    cli()
