"""Shipment list, lookup, delete and export endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...models.domain import FilterCriteria
from ...schemas.shipments import DeleteResponse, ShipmentListResponse, ShipmentModel
from ...services.dashboard import ShipmentDashboard
from ...services.export import export_shipments_to_geojson
from ...services.outputs.formatter import shipments_to_csv
from ...services.outputs.overlays import build_map_overlays
from ..deps import get_dashboard, get_filter_criteria

router = APIRouter(prefix="/shipments", tags=["shipments"])


@router.get("", response_model=ShipmentListResponse, status_code=status.HTTP_200_OK)
def list_shipments(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    dashboard: ShipmentDashboard = Depends(get_dashboard),
) -> ShipmentListResponse:
    view = dashboard.view(criteria)
    return ShipmentListResponse(
        items=[ShipmentModel.from_domain(shipment) for shipment in view.shipments],
        total=view.total_count,
        filteredTotal=len(view.shipments),
        countsByServiceType=view.counts_by_service_type,
        countsByPersonnel=view.counts_by_personnel,
    )


@router.get("/overlays", status_code=status.HTTP_200_OK)
def get_map_overlays(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    dashboard: ShipmentDashboard = Depends(get_dashboard),
) -> dict:
    return build_map_overlays(dashboard.view(criteria).shipments)


@router.get("/export/geojson", status_code=status.HTTP_200_OK)
def export_geojson(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    dashboard: ShipmentDashboard = Depends(get_dashboard),
) -> dict:
    return export_shipments_to_geojson(dashboard.view(criteria).shipments)


@router.get("/export/csv", status_code=status.HTTP_200_OK)
def export_csv(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    dashboard: ShipmentDashboard = Depends(get_dashboard),
) -> Response:
    content = shipments_to_csv(dashboard.view(criteria).shipments)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="shipments.csv"'},
    )


@router.post("/refresh", status_code=status.HTTP_200_OK)
def refresh_shipments(dashboard: ShipmentDashboard = Depends(get_dashboard)) -> dict:
    """Pull the remote collection now instead of waiting for the poller."""
    published = dashboard.repository.refresh()
    return {"published": published, "total": dashboard.store.total_count()}


@router.get("/{shipment_id:path}", response_model=ShipmentModel, status_code=status.HTTP_200_OK)
def get_shipment(shipment_id: str, dashboard: ShipmentDashboard = Depends(get_dashboard)) -> ShipmentModel:
    shipment = dashboard.store.get(shipment_id)
    if shipment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Shipment {shipment_id} not found")
    return ShipmentModel.from_domain(shipment)


@router.delete("/{shipment_id:path}", response_model=DeleteResponse, status_code=status.HTTP_200_OK)
def delete_shipment(shipment_id: str, dashboard: ShipmentDashboard = Depends(get_dashboard)) -> DeleteResponse:
    deleted = dashboard.form.delete_shipment(shipment_id)
    return DeleteResponse(id=shipment_id, deleted=deleted)
