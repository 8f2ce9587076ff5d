from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from shipdash.main import create_app
from shipdash.models.domain import Coordinates, Location, Shipment
from shipdash.persistence.shipments import InMemoryShipmentRepository
from shipdash.services.dashboard import ShipmentDashboard
from shipdash.services.session import AnonymousSession


class DummyGeocoder:
    known = {
        "Paris": Coordinates(48.8566, 2.3522),
        "Berlin": Coordinates(52.5200, 13.4050),
        "Madrid": Coordinates(40.4168, -3.7038),
    }

    def geocode(self, address):
        return self.known.get(address)


def _shipment(sid: str, service_type: str = "Airfreight", personnel: str = "L C") -> Shipment:
    return Shipment(
        id=sid,
        start_location=Location(name="Paris", lat=48.8566, lng=2.3522),
        end_location=Location(name="Madrid", lat=40.4168, lng=-3.7038),
        service_type=service_type,
        personnel=personnel,
    )


@pytest.fixture
def repository() -> InMemoryShipmentRepository:
    return InMemoryShipmentRepository(
        [_shipment("A1"), _shipment("B2", personnel="S M"), _shipment("T9", "Trainfreight", "S D")]
    )


@pytest.fixture
def api_client(repository):
    dashboard = ShipmentDashboard(repository, DummyGeocoder(), AnonymousSession(None))
    with TestClient(create_app(dashboard)) as client:
        yield client


def _fill_form(client: TestClient, **fields: str) -> None:
    for field, value in fields.items():
        response = client.patch("/api/form", json={"field": field, "value": value})
        assert response.status_code == 200


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    session = api_client.get("/api/health/session").json()
    assert session["established"] is True
    assert session["subscribed"] is True


def test_list_shipments_with_filters_and_counts(api_client: TestClient):
    response = api_client.get("/api/shipments", params={"service_type": "Airfreight", "search": "a"})

    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["items"]] == ["A1"]
    assert payload["total"] == 3
    assert payload["filteredTotal"] == 1
    assert payload["countsByServiceType"] == {"Airfreight": 2, "Trainfreight": 1}
    assert payload["countsByPersonnel"] == {"L C": 1, "S M": 1, "S D": 1}
    assert payload["items"][0]["startLocation"] == {"name": "Paris", "lat": 48.8566, "lng": 2.3522}


def test_submit_flow_creates_shipment(api_client: TestClient):
    _fill_form(
        api_client,
        **{
            "id": "S100",
            "startLocation.name": "Paris",
            "endLocation.name": "Berlin",
            "serviceType": "Airfreight",
            "personnel": "L C",
        },
    )

    response = api_client.post("/api/form/submit")

    assert response.status_code == 200
    payload = response.json()
    assert payload["saved"] is True
    assert payload["shipment"]["endLocation"] == {"name": "Berlin", "lat": 52.52, "lng": 13.405}
    assert payload["form"]["mode"] == "create"
    assert payload["form"]["draft"]["id"] == ""

    listing = api_client.get("/api/shipments", params={"service_type": "Airfreight"}).json()
    assert "S100" in [item["id"] for item in listing["items"]]


def test_submit_with_unknown_location_keeps_draft(api_client: TestClient, repository):
    _fill_form(api_client, **{"id": "S200", "startLocation.name": "Paris", "endLocation.name": "Atlantis"})

    response = api_client.post("/api/form/submit")

    assert response.status_code == 422
    assert "Atlantis" in response.json()["detail"]
    form = api_client.get("/api/form").json()
    assert form["draft"]["id"] == "S200"
    assert form["draft"]["endLocation"]["name"] == "Atlantis"
    assert repository.get("S200") is None


def test_submit_incomplete_draft_is_bad_request(api_client: TestClient):
    _fill_form(api_client, id="S300")

    response = api_client.post("/api/form/submit")

    assert response.status_code == 400


def test_unknown_form_field_is_rejected(api_client: TestClient):
    response = api_client.patch("/api/form", json={"field": "startLocation.lat", "value": "1"})

    assert response.status_code == 422


def test_edit_and_resubmit_updates_in_place(api_client: TestClient):
    response = api_client.post("/api/form/edit/B2")
    assert response.status_code == 200
    assert response.json()["mode"] == "edit"
    assert response.json()["draft"]["startLocation"]["name"] == "Paris"

    _fill_form(api_client, **{"endLocation.name": "Berlin", "serviceType": "Direct drive"})
    payload = api_client.post("/api/form/submit").json()

    assert payload["saved"] is True
    assert payload["shipment"]["id"] == "B2"
    shipment = api_client.get("/api/shipments/B2").json()
    assert shipment["serviceType"] == "Direct drive"
    assert shipment["endLocation"]["name"] == "Berlin"
    assert api_client.get("/api/shipments").json()["total"] == 3


def test_edit_unknown_shipment_is_not_found(api_client: TestClient):
    response = api_client.post("/api/form/edit/GHOST")

    assert response.status_code == 404
    assert api_client.get("/api/form").json()["mode"] == "create"


def test_cancel_edit(api_client: TestClient):
    api_client.post("/api/form/edit/A1")

    response = api_client.post("/api/form/cancel")

    assert response.json()["mode"] == "create"
    assert response.json()["editingId"] is None


def test_delete_shipment(api_client: TestClient):
    response = api_client.delete("/api/shipments/A1")

    assert response.status_code == 200
    assert response.json() == {"id": "A1", "deleted": True}
    assert api_client.get("/api/shipments/A1").status_code == 404
    assert api_client.get("/api/shipments").json()["total"] == 2


def test_ids_containing_slashes_are_reachable(api_client: TestClient):
    _fill_form(
        api_client,
        **{
            "id": "EU/1",
            "startLocation.name": "Paris",
            "endLocation.name": "Berlin",
            "serviceType": "Airfreight",
            "personnel": "S M",
        },
    )
    assert api_client.post("/api/form/submit").json()["saved"] is True

    assert api_client.get("/api/shipments/EU/1").json()["id"] == "EU/1"
    assert api_client.get("/api/shipments/EU%2F1").json()["id"] == "EU/1"
    edit = api_client.post("/api/form/edit/EU/1")
    assert edit.status_code == 200
    assert edit.json()["editingId"] == "EU/1"
    api_client.post("/api/form/cancel")

    response = api_client.delete("/api/shipments/EU/1")

    assert response.json() == {"id": "EU/1", "deleted": True}
    assert api_client.get("/api/shipments/EU/1").status_code == 404
    assert api_client.get("/api/shipments/overlays").status_code == 200


def test_overlays_and_exports_follow_filters(api_client: TestClient):
    overlays = api_client.get("/api/shipments/overlays", params={"personnel": "S D"}).json()
    assert {m["shipment_id"] for m in overlays["markers"]} == {"T9"}
    assert len(overlays["connectors"]) == 1
    assert len(overlays["connectors"][0]["coordinates"]) == 3

    geojson = api_client.get("/api/shipments/export/geojson", params={"search": "b2"}).json()
    assert {f["properties"]["shipmentId"] for f in geojson["features"]} == {"B2"}

    csv_response = api_client.get("/api/shipments/export/csv")
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert csv_response.text.splitlines()[0].startswith("id,service_type,personnel")
    assert len(csv_response.text.strip().splitlines()) == 4


def test_refresh_picks_up_foreign_changes(api_client: TestClient, repository):
    from shipdash.persistence.shipments import shipment_to_record

    repository._write(shipment_to_record(_shipment("X1")))

    response = api_client.post("/api/shipments/refresh")

    assert response.json() == {"published": True, "total": 4}


def test_failed_session_makes_shipment_endpoints_unavailable(repository):
    class FailingAuth:
        def get_session(self):
            raise ConnectionError("auth service down")

    session = AnonymousSession(SimpleNamespace(auth=FailingAuth()))
    dashboard = ShipmentDashboard(repository, DummyGeocoder(), session)

    with TestClient(create_app(dashboard)) as client:
        assert client.get("/api/health").status_code == 200
        response = client.get("/api/shipments")
        assert response.status_code == 503
        assert "auth service down" in response.json()["detail"]
        assert client.post("/api/form/submit").status_code == 503
        assert client.get("/api/health/session").json()["established"] is False
