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
StyleHub Storefront Server

This module starts the storefront server, which provides:
1. Catalog and review endpoints
2. Session, cart and checkout endpoints
3. The Stripe payment intent function at /functions/stripe-payment

Usage:
    python -m storefront.server

Or:
    storefront serve
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import Settings
from .constants import Constants

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = Settings.from_env()

# Create the main FastAPI app
app = FastAPI(
    title="StyleHub Storefront",
    description="Fashion storefront with cart, checkout and Stripe payment intents",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from .catalog_routes import router as catalog_router
from .checkout_routes import router as checkout_router
from .payment_function_routes import router as payment_function_router

app.include_router(catalog_router)
app.include_router(checkout_router)
app.include_router(payment_function_router)


@app.get("/")
async def home():
    """Storefront home."""
    return {
        "service": Constants.MERCHANT_NAME,
        "products": "/products",
        "sessions": "/sessions",
        "payment_function": "/functions/stripe-payment",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "StyleHub Storefront"}


def run_server(host: str = settings.host, port: int = settings.port):
    """Run the storefront server."""
    logger.info(f"Starting StyleHub Storefront on http://{host}:{port}")
    logger.info("Available endpoints:")
    logger.info("  - GET  /products - Product listing with filters")
    logger.info("  - GET  /products/{id}/reviews - Product reviews")
    logger.info("  - POST /sessions - Open a buyer session")
    logger.info("  - POST /sessions/{id}/checkout/pay - Pay for the cart")
    logger.info("  - GET  /sessions/{id}/order-confirmation - Last order")
    logger.info("  - POST /functions/stripe-payment - Payment intents and webhooks")

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
