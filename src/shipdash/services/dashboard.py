"""Dashboard application state: session, live store mirror and form controller."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import FilterCriteria, Shipment
from ..persistence.shipments import (
    InMemoryShipmentRepository,
    ShipmentRepository,
    Subscription,
    SupabaseShipmentRepository,
)
from .geocoding import GeocodingClient
from .session import AnonymousSession
from .shipments import SessionUnavailableError, ShipmentFormController, ShipmentStore
from .shipments.form import FormState, Geocoder
from .shipments.store import count_by_personnel, count_by_service_type, filter_shipments
from .sync import SnapshotPoller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardView:
    """Immutable read of the dashboard for one render."""

    criteria: FilterCriteria
    shipments: tuple[Shipment, ...]
    total_count: int
    counts_by_service_type: dict[str, int]
    counts_by_personnel: dict[str, int]
    form: FormState


class ShipmentDashboard:
    """Single owner of the dashboard state.

    ``start`` must establish the anonymous session before the store is
    subscribed; if that fails the dashboard stays in an error state and every
    read or action raises :class:`SessionUnavailableError`.
    """

    def __init__(
        self,
        repository: ShipmentRepository,
        geocoder: Geocoder,
        session: AnonymousSession,
        sync_interval_seconds: float = 0.0,
    ) -> None:
        self.repository = repository
        self.session = session
        self.store = ShipmentStore()
        self.form = ShipmentFormController(self.store, repository, geocoder)
        self.sync_interval_seconds = sync_interval_seconds
        self.error: str | None = None
        self._subscription: Subscription | None = None
        self._poller: SnapshotPoller | None = None

    @property
    def ready(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def start(self) -> bool:
        if self.ready:
            return True
        if not self.session.ensure_identity():
            self.error = f"Unable to establish a session: {self.session.last_error or 'unknown error'}"
            logger.error(self.error)
            return False
        self.error = None
        self._subscription = self.repository.subscribe(self.store.apply_snapshot)
        if self.sync_interval_seconds > 0:
            self._poller = SnapshotPoller(self.repository, self.sync_interval_seconds)
            self._poller.start()
        logger.info(f"Dashboard started with {self.store.total_count()} shipments")
        return True

    def stop(self) -> None:
        if self._poller is not None:
            self._poller.stop()
            self._poller = None
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def require_ready(self) -> None:
        if not self.ready:
            raise SessionUnavailableError(self.error or "Dashboard has not been started.")

    def view(self, criteria: FilterCriteria | None = None) -> DashboardView:
        self.require_ready()
        criteria = criteria or FilterCriteria()
        # One snapshot per view; the poller may swap the store meanwhile
        shipments = self.store.shipments
        return DashboardView(
            criteria=criteria,
            shipments=tuple(filter_shipments(shipments, criteria)),
            total_count=len(shipments),
            counts_by_service_type=count_by_service_type(shipments),
            counts_by_personnel=count_by_personnel(shipments),
            form=self.form.state(),
        )


def build_dashboard() -> ShipmentDashboard:
    """Wire the dashboard from settings; Supabase when configured, otherwise in-memory."""
    client = get_supabase_client()
    if client is None:
        logging.info("Supabase not configured - shipments are kept in memory only")
        repository: ShipmentRepository = InMemoryShipmentRepository()
    else:
        repository = SupabaseShipmentRepository(client, settings.shipments_table)
    return ShipmentDashboard(
        repository=repository,
        geocoder=GeocodingClient(),
        session=AnonymousSession(client),
        sync_interval_seconds=settings.sync_interval_seconds,
    )
