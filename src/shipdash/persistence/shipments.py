"""Remote shipment store: keyed upserts, deletes and full-state snapshot subscriptions."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from ..models.domain import Location, Shipment

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Sequence[Shipment]], None]


def shipment_to_record(shipment: Shipment) -> dict[str, Any]:
    """Serialize a shipment into its stored document shape."""
    return {
        "id": shipment.id,
        "start_location": _location_to_dict(shipment.start_location),
        "end_location": _location_to_dict(shipment.end_location),
        "service_type": shipment.service_type,
        "personnel": shipment.personnel,
    }


def shipment_from_record(row: dict[str, Any]) -> Shipment:
    """Build a shipment from a stored row; raises KeyError/ValueError/TypeError on bad data."""
    return Shipment(
        id=str(row["id"]),
        start_location=_location_from_value(row["start_location"]),
        end_location=_location_from_value(row["end_location"]),
        service_type=row["service_type"],
        personnel=row["personnel"],
    )


def _location_to_dict(location: Location) -> dict[str, Any]:
    return {"name": location.name, "lat": location.lat, "lng": location.lng}


def _location_from_value(value: Any) -> Location:
    # jsonb columns come back as dicts, text columns as JSON strings
    if isinstance(value, str):
        value = json.loads(value)
    if not isinstance(value, dict):
        raise TypeError(f"Location must be an object, got {type(value).__name__}")
    lat = value.get("lat")
    lng = value.get("lng")
    return Location(
        name=str(value.get("name") or ""),
        lat=float(lat) if lat is not None else None,
        lng=float(lng) if lng is not None else None,
    )


class Subscription:
    """Handle returned by :meth:`ShipmentRepository.subscribe`."""

    def __init__(self, repository: "ShipmentRepository", listener: SnapshotListener) -> None:
        self._repository = repository
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._repository._remove_listener(self._listener)
            self.active = False


class ShipmentRepository(ABC):
    """Contract for shipment collections keyed by shipment id.

    Every listener receives the full collection immediately on subscribe and
    again after each change the repository observes. Publication is
    serialized, so listeners see snapshots in the order they were read.
    """

    def __init__(self) -> None:
        self._listeners: list[SnapshotListener] = []
        self._publish_lock = threading.RLock()
        self._last_snapshot: tuple[Shipment, ...] | None = None

    @abstractmethod
    def _write(self, record: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def _remove(self, shipment_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _read(self, shipment_id: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def _read_all(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    def upsert(self, shipment_id: str, shipment: Shipment) -> bool:
        """Create or overwrite the shipment stored under ``shipment_id``."""
        if shipment_id != shipment.id:
            raise ValueError(f"Key '{shipment_id}' does not match shipment id '{shipment.id}'")
        try:
            self._write(shipment_to_record(shipment))
        except Exception as exc:
            logger.error(f"Failed to upsert shipment {shipment_id}: {exc}")
            return False
        logger.info(f"Upserted shipment {shipment_id}")
        self._publish(force=True)
        return True

    def delete(self, shipment_id: str) -> bool:
        try:
            self._remove(shipment_id)
        except Exception as exc:
            logger.error(f"Failed to delete shipment {shipment_id}: {exc}")
            return False
        logger.info(f"Deleted shipment {shipment_id}")
        self._publish(force=True)
        return True

    def get(self, shipment_id: str) -> Shipment | None:
        try:
            row = self._read(shipment_id)
        except Exception as exc:
            logger.error(f"Failed to read shipment {shipment_id}: {exc}")
            return None
        if row is None:
            return None
        try:
            return shipment_from_record(row)
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning(f"Stored shipment {shipment_id} is invalid: {exc}")
            return None

    def list_all(self) -> tuple[Shipment, ...]:
        """Read the whole collection, skipping rows that violate the shipment invariants."""
        shipments: list[Shipment] = []
        for row in self._read_all():
            try:
                shipments.append(shipment_from_record(row))
            except (KeyError, ValueError, TypeError) as exc:
                logger.warning(f"Skipping invalid shipment row {row.get('id')!r}: {exc}")
                continue
        return tuple(shipments)

    def subscribe(self, listener: SnapshotListener) -> Subscription:
        with self._publish_lock:
            self._listeners.append(listener)
            snapshot = self._snapshot()
            if snapshot is not None:
                self._last_snapshot = snapshot
                self._deliver(listener, snapshot)
        return Subscription(self, listener)

    def refresh(self) -> bool:
        """Re-read the collection and publish it if it changed since the last push."""
        return self._publish(force=False)

    def _remove_listener(self, listener: SnapshotListener) -> None:
        with self._publish_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _snapshot(self) -> tuple[Shipment, ...] | None:
        try:
            return self.list_all()
        except Exception as exc:
            logger.error(f"Failed to read shipment collection: {exc}")
            return None

    def _publish(self, *, force: bool) -> bool:
        with self._publish_lock:
            snapshot = self._snapshot()
            if snapshot is None:
                return False
            if not force and snapshot == self._last_snapshot:
                return False
            self._last_snapshot = snapshot
            for listener in list(self._listeners):
                self._deliver(listener, snapshot)
            return True

    @staticmethod
    def _deliver(listener: SnapshotListener, snapshot: tuple[Shipment, ...]) -> None:
        try:
            listener(snapshot)
        except Exception:
            logger.exception("Snapshot listener failed")


class SupabaseShipmentRepository(ShipmentRepository):
    """Shipments stored one row per id in a Supabase table."""

    def __init__(self, client: Any, table: str = "shipments") -> None:
        super().__init__()
        self.client = client
        self.table = table

    def _write(self, record: dict[str, Any]) -> None:
        self.client.table(self.table).upsert(record, on_conflict="id").execute()

    def _remove(self, shipment_id: str) -> None:
        self.client.table(self.table).delete().eq("id", shipment_id).execute()

    def _read(self, shipment_id: str) -> dict[str, Any] | None:
        response = self.client.table(self.table).select("*").eq("id", shipment_id).limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    def _read_all(self) -> list[dict[str, Any]]:
        response = self.client.table(self.table).select("*").execute()
        return list(response.data or [])


class InMemoryShipmentRepository(ShipmentRepository):
    """Process-local store used when Supabase is not configured."""

    def __init__(self, shipments: Sequence[Shipment] = ()) -> None:
        super().__init__()
        self._rows: dict[str, dict[str, Any]] = {
            shipment.id: shipment_to_record(shipment) for shipment in shipments
        }
        self._rows_lock = threading.Lock()

    def _write(self, record: dict[str, Any]) -> None:
        with self._rows_lock:
            self._rows[record["id"]] = record

    def _remove(self, shipment_id: str) -> None:
        with self._rows_lock:
            self._rows.pop(shipment_id, None)

    def _read(self, shipment_id: str) -> dict[str, Any] | None:
        with self._rows_lock:
            return self._rows.get(shipment_id)

    def _read_all(self) -> list[dict[str, Any]]:
        with self._rows_lock:
            return list(self._rows.values())
