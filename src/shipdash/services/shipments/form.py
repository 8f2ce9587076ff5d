"""Shipment form controller: draft editing, geocoding and submission."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

from ...models.domain import Coordinates, Draft, Location, Shipment
from ...persistence.shipments import ShipmentRepository
from .errors import DraftIncompleteError, GeocodingError, SubmissionInProgressError
from .store import ShipmentStore

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, address: str) -> Coordinates | None: ...


class DraftField(str, Enum):
    """Editable draft fields, valued by their form input names."""

    ID = "id"
    START_LOCATION_NAME = "startLocation.name"
    END_LOCATION_NAME = "endLocation.name"
    SERVICE_TYPE = "serviceType"
    PERSONNEL = "personnel"


@dataclass(frozen=True)
class FormState:
    mode: Literal["create", "edit"]
    editing_id: str | None
    draft: Draft


class ShipmentFormController:
    """Owns the form draft and turns it into stored shipments.

    The controller never touches the visible collection: a saved or deleted
    shipment shows up only once the repository publishes the next snapshot.
    """

    def __init__(self, store: ShipmentStore, repository: ShipmentRepository, geocoder: Geocoder) -> None:
        self.store = store
        self.repository = repository
        self.geocoder = geocoder
        self._draft = Draft()
        self._editing_id: str | None = None
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    @property
    def editing_id(self) -> str | None:
        return self._editing_id

    def state(self) -> FormState:
        with self._lock:
            return FormState(
                mode="edit" if self._editing_id is not None else "create",
                editing_id=self._editing_id,
                draft=self._draft.copy(),
            )

    def begin_edit(self, shipment_id: str) -> bool:
        shipment = self.store.get(shipment_id)
        if shipment is None:
            logger.warning(f"Cannot edit shipment {shipment_id}: not found")
            return False
        with self._lock:
            self._draft = Draft.from_shipment(shipment)
            self._editing_id = shipment.id
        return True

    def cancel_edit(self) -> None:
        with self._lock:
            self._draft = Draft()
            self._editing_id = None

    def update_field(self, field: DraftField | str, value: str) -> None:
        field = DraftField(field)
        with self._lock:
            if field is DraftField.ID:
                if self._editing_id is not None:
                    logger.warning(f"Ignoring id change while editing shipment {self._editing_id}")
                    return
                self._draft.id = value
            elif field is DraftField.START_LOCATION_NAME:
                self._draft.start_location_name = value
            elif field is DraftField.END_LOCATION_NAME:
                self._draft.end_location_name = value
            elif field is DraftField.SERVICE_TYPE:
                self._draft.service_type = value
            else:
                self._draft.personnel = value

    def set_id(self, value: str) -> None:
        self.update_field(DraftField.ID, value)

    def set_start_location_name(self, value: str) -> None:
        self.update_field(DraftField.START_LOCATION_NAME, value)

    def set_end_location_name(self, value: str) -> None:
        self.update_field(DraftField.END_LOCATION_NAME, value)

    def set_service_type(self, value: str) -> None:
        self.update_field(DraftField.SERVICE_TYPE, value)

    def set_personnel(self, value: str) -> None:
        self.update_field(DraftField.PERSONNEL, value)

    def submit(self) -> Shipment | None:
        """Geocode the draft and upsert it.

        Returns the stored shipment, or None when the store rejected the write
        (logged; the draft is kept for a retry). Raises before any write when
        the draft is incomplete, a submit for the same id is outstanding, or
        either location fails to geocode; the draft is left as it was.
        """
        with self._lock:
            draft = self._draft.copy()
            editing_id = self._editing_id

        missing = draft.missing_fields()
        invalid = draft.invalid_fields()
        if missing or invalid:
            raise DraftIncompleteError(missing, invalid)

        shipment_id = editing_id if editing_id is not None else draft.id.strip()
        with self._lock:
            if shipment_id in self._in_flight:
                raise SubmissionInProgressError(shipment_id)
            self._in_flight.add(shipment_id)

        try:
            start_name = draft.start_location_name.strip()
            end_name = draft.end_location_name.strip()
            start, end = self._geocode_endpoints(start_name, end_name)
            unresolved = [name for name, coords in ((start_name, start), (end_name, end)) if coords is None]
            if unresolved:
                logger.warning(f"Submit of shipment {shipment_id} aborted; unresolved: {unresolved}")
                raise GeocodingError(unresolved)

            shipment = Shipment(
                id=shipment_id,
                start_location=Location.resolved(start_name, start),
                end_location=Location.resolved(end_name, end),
                service_type=draft.service_type,
                personnel=draft.personnel,
            )
            if not self.repository.upsert(shipment_id, shipment):
                logger.error(f"Shipment {shipment_id} was not saved; draft kept for retry")
                return None

            with self._lock:
                # A newer edit started meanwhile keeps its draft
                if self._editing_id == editing_id and self._draft == draft:
                    self._draft = Draft()
                    self._editing_id = None
            return shipment
        finally:
            with self._lock:
                self._in_flight.discard(shipment_id)

    def delete_shipment(self, shipment_id: str) -> bool:
        deleted = self.repository.delete(shipment_id.strip())
        if not deleted:
            logger.error(f"Shipment {shipment_id} was not deleted")
        return deleted

    def _geocode_endpoints(self, start_name: str, end_name: str) -> tuple[Coordinates | None, Coordinates | None]:
        with ThreadPoolExecutor(max_workers=2) as executor:
            start_future = executor.submit(self.geocoder.geocode, start_name)
            end_future = executor.submit(self.geocoder.geocode, end_name)
            return self._geocode_result(start_future, start_name), self._geocode_result(end_future, end_name)

    @staticmethod
    def _geocode_result(future: Future, name: str) -> Coordinates | None:
        try:
            return future.result()
        except Exception as exc:
            logger.error(f"Geocoding '{name}' raised: {exc}")
            return None
