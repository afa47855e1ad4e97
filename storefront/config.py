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
Storefront configuration.

Settings are read from the process environment. A ``.env`` file in the
working directory is loaded first, so local development can keep Stripe keys
and delay overrides out of the shell profile.

Secrets are deliberately not part of ``Settings``: they are looked up at call
time through a ``SecretStore`` so that a missing key surfaces as a
configuration error on the request that needs it.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric value for {name}: {raw!r}")
        return default


@dataclass
class Settings:
    """Runtime settings for the storefront server and checkout flow."""

    host: str = "localhost"
    port: int = 10999

    # Where the card driver reaches the payment intent function
    payment_function_url: Optional[str] = "http://localhost:10999/functions/stripe-payment"
    payment_function_timeout: float = 30.0

    upi_id: str = "merchant@paytm"
    upi_payee_name: str = "StyleHub"

    # Simulated confirmation delays, in seconds
    cod_delay: float = 2.0
    upi_delay: float = 10.0
    card_delay: float = 3.0

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            dotenv: Load a ``.env`` file before reading the environment

        Returns:
            Settings populated from ``STOREFRONT_*`` variables
        """
        if dotenv:
            load_dotenv()

        defaults = cls()
        origins = os.getenv("STOREFRONT_CORS_ORIGINS")

        return cls(
            host=os.getenv("STOREFRONT_HOST", defaults.host),
            port=int(os.getenv("STOREFRONT_PORT", defaults.port)),
            payment_function_url=os.getenv(
                "STOREFRONT_PAYMENT_FUNCTION_URL", defaults.payment_function_url
            ) or None,
            payment_function_timeout=_env_float(
                "STOREFRONT_PAYMENT_FUNCTION_TIMEOUT", defaults.payment_function_timeout
            ),
            upi_id=os.getenv("STOREFRONT_UPI_ID", defaults.upi_id),
            upi_payee_name=os.getenv("STOREFRONT_UPI_PAYEE_NAME", defaults.upi_payee_name),
            cod_delay=_env_float("STOREFRONT_COD_DELAY", defaults.cod_delay),
            upi_delay=_env_float("STOREFRONT_UPI_DELAY", defaults.upi_delay),
            card_delay=_env_float("STOREFRONT_CARD_DELAY", defaults.card_delay),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins else defaults.cors_origins
            ),
        )


class SecretStore:
    """Resolves named secrets at call time."""

    def get_secret(self, name: str) -> Optional[str]:
        raise NotImplementedError


class EnvSecretStore(SecretStore):
    """Secret store backed by the process environment."""

    def get_secret(self, name: str) -> Optional[str]:
        value = os.environ.get(name)
        return value or None


class StaticSecretStore(SecretStore):
    """Secret store over a fixed mapping, for embedding and tests."""

    def __init__(self, secrets: Optional[dict] = None):
        self._secrets = dict(secrets or {})

    def get_secret(self, name: str) -> Optional[str]:
        return self._secrets.get(name) or None
