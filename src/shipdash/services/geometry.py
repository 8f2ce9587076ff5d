"""Geometry helpers for drawing shipment connectors."""

from __future__ import annotations

from typing import Protocol

from ..models.domain import Coordinates

DEFAULT_CURVE_FACTOR = 0.2


class HasLatLng(Protocol):
    lat: float
    lng: float


def curve_points(start: HasLatLng, end: HasLatLng, factor: float = DEFAULT_CURVE_FACTOR) -> list[Coordinates]:
    """Return a three-point polyline bowing gently between ``start`` and ``end``.

    The middle point is the straight-line midpoint shifted by the segment's
    deltas scaled by ``factor``, with the lat and lng deltas swapped so the
    offset runs across the segment rather than along it. Coincident points
    yield ``[p, p, p]``; NaN inputs propagate unchanged.
    """

    mid_lat = (start.lat + end.lat) / 2
    mid_lng = (start.lng + end.lng) / 2
    curved_mid = Coordinates(
        lat=mid_lat + (end.lng - start.lng) * factor,
        lng=mid_lng + (end.lat - start.lat) * factor,
    )
    return [Coordinates(start.lat, start.lng), curved_mid, Coordinates(end.lat, end.lng)]
