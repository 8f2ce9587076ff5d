"""Errors raised by shipment form and dashboard operations."""


class ShipmentDashboardError(Exception):
    """Base class for recoverable, user-action-scoped failures."""


class DraftIncompleteError(ShipmentDashboardError):
    def __init__(self, missing: list[str], invalid: list[str] | None = None) -> None:
        self.missing = missing
        self.invalid = invalid or []
        problems = []
        if missing:
            problems.append(f"missing required fields: {', '.join(missing)}")
        if self.invalid:
            problems.append(f"invalid values for: {', '.join(self.invalid)}")
        super().__init__("Draft is not ready to submit: " + "; ".join(problems))


class GeocodingError(ShipmentDashboardError):
    """One or both location names could not be resolved to coordinates."""

    def __init__(self, unresolved: list[str]) -> None:
        self.unresolved = unresolved
        super().__init__(f"Unable to geocode the provided locations: {', '.join(unresolved)}")


class SubmissionInProgressError(ShipmentDashboardError):
    def __init__(self, shipment_id: str) -> None:
        self.shipment_id = shipment_id
        super().__init__(f"A submission for shipment {shipment_id} is already in progress.")


class SessionUnavailableError(ShipmentDashboardError):
    """The anonymous session could not be established, so the store is not readable."""
