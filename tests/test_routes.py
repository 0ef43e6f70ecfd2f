"""Tests for the server-rendered pages."""

import io
import os
from datetime import datetime, timedelta

import pytest

from RealtyMVP.services.entity_store import find_entity, get_entity, list_entities, update_entity


class TestPages:
    """Every page renders with and without data."""

    @pytest.mark.parametrize(
        "path",
        ["/dashboard/", "/properties/", "/clients/", "/commissions/", "/reminders/", "/map/",
         "/properties/new", "/clients/new", "/commissions/new", "/reminders/new", "/interactions/new"],
    )
    def test_empty_pages_render(self, client, path) -> None:
        assert client.get(path).status_code == 200

    def test_root_redirects_to_dashboard(self, client) -> None:
        response = client.get("/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard/")

    def test_dashboard_with_data(self, client, sample_records) -> None:
        html = client.get("/dashboard/").get_data(as_text=True)
        assert "Sunny Loft" in html
        assert "Open house" in html
        # overdue reminders are not listed as upcoming
        assert "Call back" not in html
        assert "Contracts ending soon" in html

    def test_property_detail(self, client, sample_records) -> None:
        loft = sample_records["loft"]
        html = client.get(f"/properties/{loft.id}").get_data(as_text=True)
        assert "$1.3M" in html
        assert "Maria Lopez" in html
        assert "Viewed the loft" in html

    def test_client_detail(self, client, sample_records) -> None:
        seller = sample_records["seller"]
        html = client.get(f"/clients/{seller.id}").get_data(as_text=True)
        assert "Sunny Loft" in html

    def test_missing_record_is_404(self, client) -> None:
        assert client.get("/properties/999").status_code == 404
        assert client.get("/clients/999/edit").status_code == 404

    def test_property_search(self, client, sample_records) -> None:
        html = client.get("/properties/?search=queens").get_data(as_text=True)
        assert "Garden Flat" in html
        assert "Sunny Loft" not in html

    def test_client_filters(self, client, sample_records) -> None:
        html = client.get("/clients/?status=inactive").get_data(as_text=True)
        assert "James Carter" in html
        assert "Maria Lopez" not in html

    def test_commission_period_filter(self, client, sample_records) -> None:
        html = client.get("/commissions/?period=month").get_data(as_text=True)
        assert "$5,000" in html

    def test_reminder_tabs(self, client, sample_records) -> None:
        html = client.get("/reminders/?status=completed").get_data(as_text=True)
        assert "Send contract" in html
        assert "Open house" not in html


class TestPropertyForms:
    """Create / edit / delete listings through the form pages."""

    def test_create_property(self, client, sample_records) -> None:
        response = client.post("/properties/new", data={
            "title": "Brownstone",
            "address": "10 Park Pl",
            "city": "Brooklyn",
            "property_type": "townhouse",
            "listing_type": "sale",
            "status": "available",
            "price": "2100000",
            "owner_client_id": str(sample_records["seller"].id),
            "features": ["Garden", "Fireplace"],
            "portal_listings-0-portal_name": "Zillow",
            "portal_listings-0-listing_url": "https://www.zillow.com/brownstone",
            "portal_listings-0-listed_date": "2026-10-01",
            "new_images": [(io.BytesIO(b"img"), "front.jpg")],
        }, content_type="multipart/form-data")

        assert response.status_code == 302
        created = [p for p in list_entities("property") if p.title == "Brownstone"][0]
        assert created.features == ["Garden", "Fireplace"]
        assert created.owner_client_id == sample_records["seller"].id
        assert created.portal_listings == [{
            "portal_name": "Zillow",
            "listing_url": "https://www.zillow.com/brownstone",
            "listed_date": "2026-10-01",
        }]
        assert len(created.images) == 1
        assert created.images[0].startswith("/uploads/")

    def test_invalid_property_rerenders(self, client) -> None:
        response = client.post("/properties/new", data={"title": "", "address": "", "price": ""})
        assert response.status_code == 200
        assert list_entities("property") == []

    def test_edit_removes_image(self, client, sample_records) -> None:
        loft = sample_records["loft"]
        update_entity("property", loft.id, {"images": ["/uploads/a.jpg", "/uploads/b.jpg"]})
        response = client.post(f"/properties/{loft.id}/edit", data={
            "title": "Sunny Loft",
            "address": "145 Bedford Ave",
            "property_type": "condo",
            "listing_type": "sale",
            "status": "under_contract",
            "price": "1200000",
            "remove_images": ["/uploads/a.jpg"],
        })

        assert response.status_code == 302
        updated = get_entity("property", loft.id)
        assert updated.status == "under_contract"
        assert updated.images == ["/uploads/b.jpg"]
        assert updated.owner_client_id == sample_records["seller"].id

    def test_edit_deletes_unticked_upload(self, app, client, sample_records) -> None:
        folder = app.config["UPLOAD_FOLDER"]
        os.makedirs(folder, exist_ok=True)
        with open(os.path.join(folder, "abc123_old.jpg"), "wb") as f:
            f.write(b"old")
        loft = sample_records["loft"]
        update_entity("property", loft.id, {"images": ["/uploads/abc123_old.jpg"]})

        response = client.post(f"/properties/{loft.id}/edit", data={
            "title": "Sunny Loft", "address": "145 Bedford Ave", "property_type": "condo",
            "listing_type": "sale", "status": "available", "price": "1250000",
            "remove_images": ["/uploads/abc123_old.jpg"],
        })

        assert response.status_code == 302
        assert get_entity("property", loft.id).images == []
        assert os.listdir(folder) == []

    def test_edit_page_prefills(self, client, sample_records) -> None:
        loft = sample_records["loft"]
        html = client.get(f"/properties/{loft.id}/edit").get_data(as_text=True)
        assert 'value="Sunny Loft"' in html

    def test_delete_property(self, client, sample_records) -> None:
        flat = sample_records["flat"]
        response = client.post(f"/properties/{flat.id}/delete")
        assert response.status_code == 302
        assert find_entity("property", flat.id) is None


class TestClientForms:
    """Create / edit clients."""

    def test_create_client(self, client) -> None:
        response = client.post("/clients/new", data={
            "name": "Nora Diaz",
            "email": "nora@diazrealty.com",
            "client_type": "buyer",
            "status": "active",
            "budget_min": "300000",
            "budget_max": "450000",
            "preferred_locations": "Astoria,  Harlem ,",
            "preferred_property_types": ["Condo"],
        })

        assert response.status_code == 302
        nora = list_entities("client")[0]
        assert nora.preferred_locations == ["Astoria", "Harlem"]
        assert nora.budget_max == 450000

    def test_budget_max_below_min_rejected(self, client) -> None:
        response = client.post("/clients/new", data={
            "name": "Nora Diaz", "client_type": "buyer", "status": "active",
            "budget_min": "500000", "budget_max": "100000",
        })
        assert response.status_code == 200
        assert list_entities("client") == []

    def test_edit_client(self, client, sample_records) -> None:
        buyer = sample_records["buyer"]
        response = client.post(f"/clients/{buyer.id}/edit", data={
            "name": "James Carter", "client_type": "both", "status": "active",
        })
        assert response.status_code == 302
        assert get_entity("client", buyer.id).client_type == "both"


class TestCommissionForms:
    """Commission pages."""

    def test_new_prefills_from_property(self, client, sample_records) -> None:
        loft = sample_records["loft"]
        html = client.get(f"/commissions/new?property_id={loft.id}").get_data(as_text=True)
        assert 'value="1250000' in html

    def test_create_commission_computes_amount(self, client, sample_records) -> None:
        response = client.post("/commissions/new", data={
            "property_id": str(sample_records["flat"].id),
            "client_id": "",
            "deal_type": "rental",
            "deal_value": "38400",
            "commission_rate": "8",
            "status": "pending",
            "closing_date": "2026-10-01",
        })
        assert response.status_code == 302
        created = list_entities("commission", sort="-id")[0]
        assert created.commission_amount == 3072.0
        assert created.client_id is None


class TestCrmForms:
    """Interactions and reminders."""

    def test_log_interaction_redirects_to_next(self, client, sample_records) -> None:
        buyer = sample_records["buyer"]
        response = client.post("/interactions/new", data={
            "client_id": str(buyer.id),
            "property_id": "",
            "type": "call",
            "title": "Discussed financing",
            "outcome": "neutral",
            "date": "2026-10-19T10:30",
            "next": f"/clients/{buyer.id}",
        })
        assert response.status_code == 302
        assert response.headers["Location"].endswith(f"/clients/{buyer.id}")
        logged = list_entities("interaction", sort="-id")[0]
        assert logged.date == datetime(2026, 10, 19, 10, 30)

    def test_external_next_is_ignored(self, client) -> None:
        response = client.post("/interactions/new", data={
            "client_id": "", "property_id": "", "type": "note", "title": "Note", "outcome": "pending",
            "next": "https://evil.example.com/",
        })
        assert response.status_code == 302
        assert "evil.example.com" not in response.headers["Location"]

    def test_create_reminder(self, client) -> None:
        due = (datetime.now() + timedelta(days=2)).strftime("%Y-%m-%dT%H:%M")
        response = client.post("/reminders/new", data={
            "title": "Schedule photographer",
            "due_date": due,
            "reminder_type": "custom",
            "priority": "low",
            "client_id": "",
            "property_id": "",
        })
        assert response.status_code == 302
        assert list_entities("reminder")[0].status == "pending"

    def test_reminder_requires_due_date(self, client) -> None:
        response = client.post("/reminders/new", data={
            "title": "No date", "reminder_type": "custom", "priority": "low", "client_id": "", "property_id": "",
        })
        assert response.status_code == 200
        assert list_entities("reminder") == []

    @pytest.mark.parametrize("action, status", [("complete", "completed"), ("dismiss", "dismissed")])
    def test_complete_and_dismiss(self, client, sample_records, action, status) -> None:
        reminder = sample_records["reminders"]["overdue"]
        response = client.post(f"/reminders/{reminder.id}/{action}")
        assert response.status_code == 302
        assert get_entity("reminder", reminder.id).status == status

    def test_complete_missing_reminder(self, client) -> None:
        assert client.post("/reminders/999/complete").status_code == 404


class TestMap:
    """Map marker endpoint."""

    def test_markers_json(self, client, sample_records) -> None:
        data = client.get("/map/markers").get_json()
        assert [m["title"] for m in data["markers"]] == ["Sunny Loft"]
        assert data["center"] == {"lat": 40.7177, "lng": -73.9571}

    def test_markers_default_center(self, client) -> None:
        data = client.get("/map/markers?status=sold").get_json()
        assert data["markers"] == []
        assert data["center"] == {"lat": 40.7128, "lng": -74.006}
