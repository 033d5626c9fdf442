"""
Stockage en mémoire des checkouts bKash en attente de callback.
- Indexé par paymentID (renvoyé par bKash sur le callback), jamais un slot global unique
- Les contextes abandonnés expirent après `ttl_seconds` et sont purgés à chaque accès
"""
import logging
import threading
import time
from typing import Callable, Dict, Optional

from .models import PendingCheckoutContext

logger = logging.getLogger(__name__)


class PendingCheckoutStore:
    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, PendingCheckoutContext] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, ctx in self._items.items() if ctx.is_expired(self.ttl_seconds, now)]
        for key in expired:
            del self._items[key]
        if expired:
            logger.info("bkash.pending purged %s expired checkout(s)", len(expired))

    def put(self, context: PendingCheckoutContext) -> None:
        """Enregistre (ou remplace) le contexte du paymentID donné."""
        context.created_at = self._clock()
        with self._lock:
            self._purge_expired()
            self._items[context.payment_id] = context

    def get(self, payment_id: str) -> Optional[PendingCheckoutContext]:
        with self._lock:
            self._purge_expired()
            return self._items.get(payment_id)

    def discard(self, payment_id: str) -> Optional[PendingCheckoutContext]:
        """Retire le contexte (états terminaux); retourne None s'il était absent ou expiré."""
        with self._lock:
            self._purge_expired()
            return self._items.pop(payment_id, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
