"""Map overlay payloads: two markers and a curved connector per shipment."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import MapMarker, Shipment
from ..geometry import curve_points


def popup_content(shipment: Shipment) -> dict[str, str]:
    return {
        "shipmentId": shipment.id,
        "serviceType": shipment.service_type,
        "personnel": shipment.personnel,
        "start": shipment.start_location.name,
        "end": shipment.end_location.name,
    }


def shipment_markers(shipment: Shipment) -> tuple[MapMarker, MapMarker]:
    popup = popup_content(shipment)
    return (
        MapMarker(shipment.id, "start", shipment.start_location.coordinates, popup),
        MapMarker(shipment.id, "end", shipment.end_location.coordinates, popup),
    )


def build_map_overlays(shipments: Sequence[Shipment], curve_factor: float | None = None) -> dict:
    """Serialize markers and connectors for the map view, ``[lat, lng]`` ordered."""

    factor = settings.curve_factor if curve_factor is None else curve_factor
    markers: list[dict] = []
    connectors: list[dict] = []
    for shipment in shipments:
        for marker in shipment_markers(shipment):
            markers.append(
                {
                    "shipment_id": marker.shipment_id,
                    "role": marker.role,
                    "position": [marker.position.lat, marker.position.lng],
                    "popup": marker.popup,
                }
            )
        points = curve_points(shipment.start_location, shipment.end_location, factor)
        connectors.append(
            {
                "shipment_id": shipment.id,
                "service_type": shipment.service_type,
                "coordinates": [[point.lat, point.lng] for point in points],
            }
        )
    return {"markers": markers, "connectors": connectors}
