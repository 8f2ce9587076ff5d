"""Shipment view-state and form services."""

from .errors import (
    DraftIncompleteError,
    GeocodingError,
    SessionUnavailableError,
    ShipmentDashboardError,
    SubmissionInProgressError,
)
from .form import DraftField, FormState, ShipmentFormController
from .store import ShipmentStore

__all__ = [
    "DraftField",
    "DraftIncompleteError",
    "FormState",
    "GeocodingError",
    "SessionUnavailableError",
    "ShipmentDashboardError",
    "ShipmentFormController",
    "ShipmentStore",
    "SubmissionInProgressError",
]
