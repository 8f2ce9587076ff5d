"""Shared request dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Query, Request, status

from ..models.domain import FilterCriteria
from ..services.dashboard import ShipmentDashboard
from ..services.shipments import SessionUnavailableError


def get_dashboard(request: Request) -> ShipmentDashboard:
    """Return the running dashboard, or 503 while the session bootstrap has failed."""
    dashboard: ShipmentDashboard = request.app.state.dashboard
    try:
        dashboard.require_ready()
    except SessionUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return dashboard


def get_filter_criteria(
    service_type: str = Query(default="", description="Exact service type; empty for all"),
    personnel: str = Query(default="", description="Exact personnel code; empty for all"),
    search: str = Query(default="", description="Case-insensitive substring of the shipment id"),
) -> FilterCriteria:
    return FilterCriteria(service_type=service_type, personnel=personnel, search_term=search)
