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
Buyer sessions.

A session stands in for one browser tab: its own cart, its own session
storage and the checkout flow currently open in it.
"""

import logging
import uuid
from typing import Dict, Optional

from .cart import CartStore
from .checkout import CheckoutFlow, CheckoutStatus
from .config import Settings
from .errors import NotFoundError
from .models import PaymentMethod
from .payments import PaymentDriver, PaymentIntentClient, build_drivers
from .session_store import SessionStorage

logger = logging.getLogger(__name__)


class StorefrontSession:
    """Cart, storage and checkout flow of one buyer."""

    def __init__(self, session_id: str, drivers: Dict[PaymentMethod, PaymentDriver]):
        self.id = session_id
        self.drivers = drivers
        self.cart = CartStore()
        self.storage = SessionStorage()
        self.flow = CheckoutFlow(self.cart, self.storage, drivers)

    def checkout(self) -> CheckoutFlow:
        """The open checkout flow; a finished one is replaced by a fresh flow."""
        if self.flow.status == CheckoutStatus.CONFIRMED:
            self.flow.close()
            self.flow = CheckoutFlow(self.cart, self.storage, self.drivers)
        return self.flow

    def close(self) -> None:
        self.flow.close()


class SessionRegistry:
    """
    Creates and looks up buyer sessions.

    Args:
        settings: Delays and payment endpoints for the drivers
        intent_client: Overrides the client the card driver uses
        drivers: Overrides the drivers entirely
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        intent_client: Optional[PaymentIntentClient] = None,
        drivers: Optional[Dict[PaymentMethod, PaymentDriver]] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.drivers = drivers or build_drivers(self.settings, intent_client)
        self._sessions: Dict[str, StorefrontSession] = {}

    def create(self) -> StorefrontSession:
        session = StorefrontSession(uuid.uuid4().hex, self.drivers)
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id}")
        return session

    def get(self, session_id: str) -> StorefrontSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
            logger.info(f"Closed session {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)
