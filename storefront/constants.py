from dataclasses import dataclass
@dataclass
class Constants:

    MERCHANT_NAME = "StyleHub"

    SESSION_LAST_ORDER_KEY = "lastOrder"
    ORDER_ID_PREFIX = "ORDER_"
    ORDER_STATUS_CONFIRMED = "confirmed"

    CONFIRMATION_PATH = "/order-confirmation"
    CART_PATH = "/cart"
    HOME_PATH = "/"

    # Totals
    FREE_SHIPPING_THRESHOLD = 1500
    SHIPPING_FEE = 99
    TAX_RATE = "0.08"

    # Estimated delivery, in days
    COD_DELIVERY_DAYS = 7
    PREPAID_DELIVERY_DAYS = 5

    # UPI
    UPI_CURRENCY = "INR"
    QR_SERVER_URL = "https://api.qrserver.com/v1/create-qr-code/"
    QR_SIZE = "200x200"

    # Stripe / payment intent function
    STRIPE_API_URL = "https://api.stripe.com/v1/payment_intents"
    STRIPE_SECRET_KEY = "STRIPE_SECRET_KEY"
    STRIPE_WEBHOOK_SECRET = "STRIPE_WEBHOOK_SECRET"
    STRIPE_SIGNATURE_HEADER = "stripe-signature"
    DEFAULT_CURRENCY = "inr"
    MIN_PAYMENT_AMOUNT = 0.50

    ACTION_CREATE_PAYMENT_INTENT = "create_payment_intent"
    ACTION_WEBHOOK = "webhook"

    EVENT_PAYMENT_SUCCEEDED = "payment_intent.succeeded"
    EVENT_PAYMENT_FAILED = "payment_intent.payment_failed"
    EVENT_PAYMENT_CANCELED = "payment_intent.canceled"
