"""Shipment form endpoints: draft edits and submission."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.shipments import FieldUpdateRequest, FormStateModel, ShipmentModel, SubmitResponse
from ...services.dashboard import ShipmentDashboard
from ...services.shipments import DraftIncompleteError, GeocodingError, SubmissionInProgressError
from ..deps import get_dashboard

router = APIRouter(prefix="/form", tags=["form"])


@router.get("", response_model=FormStateModel, status_code=status.HTTP_200_OK)
def get_form(dashboard: ShipmentDashboard = Depends(get_dashboard)) -> FormStateModel:
    return FormStateModel.from_domain(dashboard.form.state())


@router.patch("", response_model=FormStateModel, status_code=status.HTTP_200_OK)
def update_form_field(
    payload: FieldUpdateRequest, dashboard: ShipmentDashboard = Depends(get_dashboard)
) -> FormStateModel:
    dashboard.form.update_field(payload.field, payload.value)
    return FormStateModel.from_domain(dashboard.form.state())


@router.post("/edit/{shipment_id:path}", response_model=FormStateModel, status_code=status.HTTP_200_OK)
def begin_edit(shipment_id: str, dashboard: ShipmentDashboard = Depends(get_dashboard)) -> FormStateModel:
    if not dashboard.form.begin_edit(shipment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Shipment {shipment_id} not found")
    return FormStateModel.from_domain(dashboard.form.state())


@router.post("/cancel", response_model=FormStateModel, status_code=status.HTTP_200_OK)
def cancel_edit(dashboard: ShipmentDashboard = Depends(get_dashboard)) -> FormStateModel:
    dashboard.form.cancel_edit()
    return FormStateModel.from_domain(dashboard.form.state())


@router.post("/submit", response_model=SubmitResponse, status_code=status.HTTP_200_OK)
def submit_form(dashboard: ShipmentDashboard = Depends(get_dashboard)) -> SubmitResponse:
    try:
        shipment = dashboard.form.submit()
    except DraftIncompleteError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error submitting shipment form: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to submit shipment: {str(exc)}"
        ) from exc

    return SubmitResponse(
        saved=shipment is not None,
        shipment=ShipmentModel.from_domain(shipment) if shipment is not None else None,
        form=FormStateModel.from_domain(dashboard.form.state()),
    )
