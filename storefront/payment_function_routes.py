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
FastAPI binding for the Stripe payment intent function.

The function decides status codes itself (including 405 for non-POST
methods), so the route only passes the raw request through.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import logging

from .payment_function import PaymentIntentFunction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Payment Function"])

payment_function = PaymentIntentFunction()


def get_payment_function() -> PaymentIntentFunction:
    return payment_function


@router.api_route("/stripe-payment", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def stripe_payment(
    request: Request,
    function: PaymentIntentFunction = Depends(get_payment_function),
):
    """Create payment intents and receive Stripe webhooks."""
    body = await request.body()
    result = await function.handle(request.method, request.headers, body)

    if result.status_code >= 500:
        logger.error(f"Payment function failed with {result.status_code}: {result.body.get('error')}")

    return JSONResponse(result.body, status_code=result.status_code)
