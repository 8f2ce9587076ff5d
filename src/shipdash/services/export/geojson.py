"""GeoJSON export of shipments for GIS tools."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from shapely.geometry import LineString, Point, mapping

from ...config import settings
from ...models.domain import SERVICE_TYPES, Shipment
from ..geometry import curve_points

_SERVICE_TYPE_COLORS = ("#e0003e", "#0000c1", "#38e000", "#e0af00")


def service_type_color(service_type: str) -> str:
    """Stable line color per service type."""
    try:
        index = SERVICE_TYPES.index(service_type)
    except ValueError:
        return "#611cc7"
    return _SERVICE_TYPE_COLORS[index % len(_SERVICE_TYPE_COLORS)]


def shipment_features(shipment: Shipment, curve_factor: float | None = None) -> List[Dict[str, Any]]:
    """Two point features and one curved line feature for a shipment.

    GeoJSON positions are ``[lng, lat]``.
    """
    factor = settings.curve_factor if curve_factor is None else curve_factor
    start = shipment.start_location
    end = shipment.end_location
    properties = {
        "shipmentId": shipment.id,
        "serviceType": shipment.service_type,
        "personnel": shipment.personnel,
        "start": start.name,
        "end": end.name,
    }
    connector = LineString([(point.lng, point.lat) for point in curve_points(start, end, factor)])
    return [
        {
            "type": "Feature",
            "geometry": _as_lists(mapping(Point(start.lng, start.lat))),
            "properties": {**properties, "role": "start"},
        },
        {
            "type": "Feature",
            "geometry": _as_lists(mapping(Point(end.lng, end.lat))),
            "properties": {**properties, "role": "end"},
        },
        {
            "type": "Feature",
            "geometry": _as_lists(mapping(connector)),
            "properties": {
                **properties,
                "role": "connector",
                "stroke": service_type_color(shipment.service_type),
                "wkt": connector.wkt,
            },
        },
    ]


def export_shipments_to_geojson(shipments: Sequence[Shipment], curve_factor: float | None = None) -> Dict[str, Any]:
    features: List[Dict[str, Any]] = []
    for shipment in shipments:
        features.extend(shipment_features(shipment, curve_factor))
    return {"type": "FeatureCollection", "features": features}


def _as_lists(geometry: Any) -> Dict[str, Any]:
    # shapely's mapping() yields nested tuples
    coordinates = geometry["coordinates"]
    if coordinates and isinstance(coordinates[0], tuple):
        coordinates = [list(position) for position in coordinates]
    else:
        coordinates = list(coordinates)
    return {"type": geometry["type"], "coordinates": coordinates}
