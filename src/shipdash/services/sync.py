"""Background polling that pulls foreign changes from the remote store."""

from __future__ import annotations

import logging
import threading

from ..persistence.shipments import ShipmentRepository

logger = logging.getLogger(__name__)


class SnapshotPoller:
    """Calls ``repository.refresh()`` every ``interval_seconds`` until stopped.

    The repository only publishes when the collection differs from its last
    push, so idle polls do not reach the subscribers.
    """

    def __init__(self, repository: ShipmentRepository, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("Polling interval must be positive.")
        self.repository = repository
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="shipment-snapshot-poller", daemon=True)
        self._thread.start()
        logger.info(f"Polling shipment store every {self.interval_seconds:.1f}s")

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                if self.repository.refresh():
                    logger.debug("Remote shipment change picked up by poller")
            except Exception:
                logger.exception("Shipment snapshot poll failed")
