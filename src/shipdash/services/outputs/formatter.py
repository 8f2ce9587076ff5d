"""Utilities to serialize shipment lists into CSV."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import Shipment

CSV_FIELDS = [
    "id",
    "service_type",
    "personnel",
    "start_name",
    "start_lat",
    "start_lng",
    "end_name",
    "end_lat",
    "end_lng",
]


def shipments_to_csv(shipments: Sequence[Shipment]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for shipment in shipments:
        writer.writerow(
            {
                "id": shipment.id,
                "service_type": shipment.service_type,
                "personnel": shipment.personnel,
                "start_name": shipment.start_location.name,
                "start_lat": shipment.start_location.lat,
                "start_lng": shipment.start_location.lng,
                "end_name": shipment.end_location.name,
                "end_lat": shipment.end_location.lat,
                "end_lng": shipment.end_location.lng,
            }
        )
    return buffer.getvalue()
