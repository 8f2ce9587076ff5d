"""Shipment API schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Draft, Location, Shipment
from ..services.shipments.form import DraftField, FormState


class LocationModel(BaseModel):
    name: str
    lat: Optional[float] = None
    lng: Optional[float] = None

    @classmethod
    def from_domain(cls, location: Location) -> "LocationModel":
        return cls(name=location.name, lat=location.lat, lng=location.lng)


class ShipmentModel(BaseModel):
    id: str
    startLocation: LocationModel
    endLocation: LocationModel
    serviceType: str
    personnel: str

    @classmethod
    def from_domain(cls, shipment: Shipment) -> "ShipmentModel":
        return cls(
            id=shipment.id,
            startLocation=LocationModel.from_domain(shipment.start_location),
            endLocation=LocationModel.from_domain(shipment.end_location),
            serviceType=shipment.service_type,
            personnel=shipment.personnel,
        )


class ShipmentListResponse(BaseModel):
    items: List[ShipmentModel]
    total: int
    filteredTotal: int
    countsByServiceType: dict[str, int]
    countsByPersonnel: dict[str, int]


class DraftModel(BaseModel):
    id: str
    startLocation: LocationModel
    endLocation: LocationModel
    serviceType: str
    personnel: str

    @classmethod
    def from_domain(cls, draft: Draft) -> "DraftModel":
        return cls(
            id=draft.id,
            startLocation=LocationModel(name=draft.start_location_name),
            endLocation=LocationModel(name=draft.end_location_name),
            serviceType=draft.service_type,
            personnel=draft.personnel,
        )


class FormStateModel(BaseModel):
    mode: Literal["create", "edit"]
    editingId: Optional[str] = None
    draft: DraftModel

    @classmethod
    def from_domain(cls, state: FormState) -> "FormStateModel":
        return cls(mode=state.mode, editingId=state.editing_id, draft=DraftModel.from_domain(state.draft))


class FieldUpdateRequest(BaseModel):
    field: DraftField = Field(..., description="Form input name, e.g. 'startLocation.name'.")
    value: str


class SubmitResponse(BaseModel):
    saved: bool
    shipment: Optional[ShipmentModel] = None
    form: FormStateModel


class DeleteResponse(BaseModel):
    id: str
    deleted: bool
