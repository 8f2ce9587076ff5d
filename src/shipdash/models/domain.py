"""Domain models for shipments, their locations and the form draft."""

from dataclasses import dataclass, field
from typing import Literal, Optional, get_args

ServiceType = Literal["One-way OBC", "Airfreight", "Trainfreight", "Direct drive"]
Personnel = Literal["L C", "S M", "S D"]

SERVICE_TYPES: tuple[str, ...] = get_args(ServiceType)
PERSONNEL: tuple[str, ...] = get_args(Personnel)

DEFAULT_SERVICE_TYPE: ServiceType = "One-way OBC"
DEFAULT_PERSONNEL: Personnel = "L C"


@dataclass(slots=True, frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    @property
    def in_range(self) -> bool:
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0


@dataclass(slots=True, frozen=True)
class Location:
    """A named place, either unresolved (blank) or resolved to coordinates."""

    name: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None

    def __post_init__(self) -> None:
        if self.lat is None and self.lng is None:
            if self.name:
                raise ValueError(f"Location '{self.name}' has a name but no coordinates.")
            return
        if self.lat is None or self.lng is None:
            raise ValueError("Location must carry both latitude and longitude.")
        if not self.name:
            raise ValueError("Resolved location requires a name.")
        if not Coordinates(self.lat, self.lng).in_range:
            raise ValueError(f"Coordinates out of range for '{self.name}': ({self.lat}, {self.lng})")

    @property
    def is_resolved(self) -> bool:
        return self.lat is not None

    @property
    def coordinates(self) -> Coordinates:
        if self.lat is None or self.lng is None:
            raise ValueError("Unresolved location has no coordinates.")
        return Coordinates(self.lat, self.lng)

    @classmethod
    def resolved(cls, name: str, coordinates: Coordinates) -> "Location":
        return cls(name=name, lat=coordinates.lat, lng=coordinates.lng)


@dataclass(slots=True, frozen=True)
class Shipment:
    """A tracked movement between two resolved locations."""

    id: str
    start_location: Location
    end_location: Location
    service_type: ServiceType
    personnel: Personnel

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Shipment id must not be empty.")
        if not (self.start_location.is_resolved and self.end_location.is_resolved):
            raise ValueError(f"Shipment {self.id} requires resolved start and end locations.")
        if self.service_type not in SERVICE_TYPES:
            raise ValueError(f"Unknown service type: {self.service_type!r}")
        if self.personnel not in PERSONNEL:
            raise ValueError(f"Unknown personnel: {self.personnel!r}")


@dataclass(slots=True)
class Draft:
    """Working copy edited by the shipment form; every field may be blank."""

    id: str = ""
    start_location_name: str = ""
    end_location_name: str = ""
    service_type: str = DEFAULT_SERVICE_TYPE
    personnel: str = DEFAULT_PERSONNEL

    @classmethod
    def from_shipment(cls, shipment: Shipment) -> "Draft":
        return cls(
            id=shipment.id,
            start_location_name=shipment.start_location.name,
            end_location_name=shipment.end_location.name,
            service_type=shipment.service_type,
            personnel=shipment.personnel,
        )

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.id.strip():
            missing.append("id")
        if not self.start_location_name.strip():
            missing.append("startLocation.name")
        if not self.end_location_name.strip():
            missing.append("endLocation.name")
        return missing

    def invalid_fields(self) -> list[str]:
        invalid: list[str] = []
        if self.service_type not in SERVICE_TYPES:
            invalid.append("serviceType")
        if self.personnel not in PERSONNEL:
            invalid.append("personnel")
        return invalid

    def copy(self) -> "Draft":
        return Draft(
            id=self.id,
            start_location_name=self.start_location_name,
            end_location_name=self.end_location_name,
            service_type=self.service_type,
            personnel=self.personnel,
        )


@dataclass(slots=True, frozen=True)
class FilterCriteria:
    """Transient list filters; an empty string leaves that dimension unconstrained."""

    service_type: str = ""
    personnel: str = ""
    search_term: str = ""

    def matches(self, shipment: Shipment) -> bool:
        if self.service_type and shipment.service_type != self.service_type:
            return False
        if self.personnel and shipment.personnel != self.personnel:
            return False
        return self.search_term.lower() in shipment.id.lower()


@dataclass(slots=True, frozen=True)
class MapMarker:
    """Marker rendered at one end of a shipment, with its popup content."""

    shipment_id: str
    role: Literal["start", "end"]
    position: Coordinates
    popup: dict[str, str] = field(default_factory=dict)
