"""Export services."""

from .geojson import (
    export_shipments_to_geojson,
    shipment_features,
)

__all__ = [
    "export_shipments_to_geojson",
    "shipment_features",
]
