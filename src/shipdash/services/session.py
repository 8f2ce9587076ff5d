"""Anonymous session bootstrap performed before the shipment store is read."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any

logger = logging.getLogger(__name__)


class AnonymousSession:
    """Establishes an anonymous identity, once.

    With a Supabase client the identity comes from ``auth.sign_in_anonymously``
    (or an already active session); without one a process-local anonymous id
    is issued so in-memory deployments follow the same start-up order.
    """

    def __init__(self, client: Any | None = None) -> None:
        self.client = client
        self.user_id: str | None = None
        self.last_error: str | None = None
        self._lock = threading.Lock()

    @property
    def established(self) -> bool:
        return self.user_id is not None

    def ensure_identity(self) -> bool:
        with self._lock:
            if self.user_id is not None:
                return True
            if self.client is None:
                self.user_id = f"local-{uuid.uuid4()}"
                logger.info(f"No Supabase client configured; using local anonymous identity {self.user_id}")
                self.last_error = None
                return True
            try:
                self.user_id = self._sign_in()
            except Exception as exc:
                self.last_error = str(exc)
                logger.error(f"Anonymous sign-in failed: {exc}")
                return False
            if self.user_id is None:
                self.last_error = "Anonymous sign-in returned no user."
                logger.error(self.last_error)
                return False
            self.last_error = None
            logger.info(f"Anonymous session established for user {self.user_id}")
            return True

    def _sign_in(self) -> str | None:
        auth = self.client.auth
        session = auth.get_session()
        if session is not None and session.user is not None:
            return session.user.id
        response = auth.sign_in_anonymously()
        user = getattr(response, "user", None)
        return user.id if user is not None else None
