"""In-memory view of the shipment collection and its derived views."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Sequence

from ...models.domain import FilterCriteria, Shipment

logger = logging.getLogger(__name__)


def filter_shipments(shipments: Sequence[Shipment], criteria: FilterCriteria) -> list[Shipment]:
    return [shipment for shipment in shipments if criteria.matches(shipment)]


def count_by_service_type(shipments: Sequence[Shipment]) -> dict[str, int]:
    return dict(Counter(shipment.service_type for shipment in shipments))


def count_by_personnel(shipments: Sequence[Shipment]) -> dict[str, int]:
    return dict(Counter(shipment.personnel for shipment in shipments))


class ShipmentStore:
    """Mirror of the remote collection, replaced wholesale by each snapshot.

    ``apply_snapshot`` is the only writer; it swaps in a new tuple, so readers
    always iterate a consistent collection without locking. Callers that
    derive several views for one render should read :attr:`shipments` once
    and pass that tuple to the module-level helpers.
    """

    def __init__(self) -> None:
        self._shipments: tuple[Shipment, ...] = ()
        self.snapshots_applied = 0

    @property
    def shipments(self) -> tuple[Shipment, ...]:
        return self._shipments

    def apply_snapshot(self, records: Sequence[Shipment]) -> None:
        # Later duplicates of an id win, matching upsert semantics.
        by_id: dict[str, Shipment] = {}
        for shipment in records:
            by_id.pop(shipment.id, None)
            by_id[shipment.id] = shipment
        self._shipments = tuple(by_id.values())
        self.snapshots_applied += 1
        logger.debug(f"Applied snapshot #{self.snapshots_applied} with {len(self._shipments)} shipments")

    def get(self, shipment_id: str) -> Shipment | None:
        for shipment in self._shipments:
            if shipment.id == shipment_id:
                return shipment
        return None

    def filtered(self, criteria: FilterCriteria) -> list[Shipment]:
        return filter_shipments(self._shipments, criteria)

    def counts_by_service_type(self) -> dict[str, int]:
        return count_by_service_type(self._shipments)

    def counts_by_personnel(self) -> dict[str, int]:
        return count_by_personnel(self._shipments)

    def total_count(self) -> int:
        return len(self._shipments)
