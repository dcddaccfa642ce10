import pytest

from tripmates.schemas.trips import TripRole

SAMPLE_PAYLOADS = {
    "itinerary-items": {
        "date": "2026-07-02",
        "time": "09:30:00",
        "title": "Tram 28",
        "type": "transport",
    },
    "accommodations": {
        "name": "Casa do Rio",
        "check_in": "2026-07-01",
        "check_out": "2026-07-05",
        "confirmation_number": "ABC123",
    },
    "activities": {
        "name": "Oceanarium",
        "date": "2026-07-03",
        "cost": "25 EUR pp",
        "booking_required": True,
    },
    "packing-items": {"item": "Sunscreen", "category": "Toiletries"},
    "notes": {"title": "Wifi", "content": "casadorio / hunter2"},
    "reminders": {"title": "Check in online", "due_date": "2026-06-30"},
}


@pytest.fixture
def family(make_user, make_trip, add_member):
    owner = make_user("owner@example.com")
    editor = make_user("editor@example.com")
    viewer = make_user("viewer@example.com")
    trip = make_trip(owner)
    add_member(trip, editor, TripRole.editor, owner)
    add_member(trip, viewer, TripRole.viewer, owner)
    return {"trip": trip, "owner": owner, "editor": editor, "viewer": viewer}


@pytest.mark.parametrize("collection", sorted(SAMPLE_PAYLOADS))
def test_editor_manages_collection(client, family, auth_headers, collection):
    trip = family["trip"]
    headers = auth_headers(family["editor"])

    created = client.post(
        f"/trips/{trip.id}/{collection}",
        json=SAMPLE_PAYLOADS[collection],
        headers=headers,
    )
    assert created.status_code == 201
    item = created.json()
    assert item["trip_id"] == trip.id
    assert item["created_by_id"] == family["editor"].id

    listed = client.get(
        f"/trips/{trip.id}/{collection}", headers=auth_headers(family["viewer"])
    )
    assert listed.status_code == 200
    assert [row["id"] for row in listed.json()] == [item["id"]]

    deleted = client.delete(f"/{collection}/{item['id']}", headers=headers)
    assert deleted.status_code == 204

    empty = client.get(f"/trips/{trip.id}/{collection}", headers=headers)
    assert empty.json() == []


@pytest.mark.parametrize("collection", sorted(SAMPLE_PAYLOADS))
def test_viewer_cannot_create(client, family, auth_headers, collection):
    response = client.post(
        f"/trips/{family['trip'].id}/{collection}",
        json=SAMPLE_PAYLOADS[collection],
        headers=auth_headers(family["viewer"]),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "denied"


def test_non_member_listing_is_denied(client, family, make_user, auth_headers):
    stranger = make_user("stranger@example.com")

    response = client.get(
        f"/trips/{family['trip'].id}/notes", headers=auth_headers(stranger)
    )

    assert response.status_code == 403


def test_listing_without_token_is_unauthenticated(client, family):
    response = client.get(f"/trips/{family['trip'].id}/notes")

    assert response.status_code == 401


def test_member_with_no_rows_gets_empty_list(client, family, auth_headers):
    response = client.get(
        f"/trips/{family['trip'].id}/reminders", headers=auth_headers(family["viewer"])
    )

    assert response.status_code == 200
    assert response.json() == []


def test_viewer_cannot_update_or_delete(client, family, auth_headers):
    trip = family["trip"]
    note = client.post(
        f"/trips/{trip.id}/notes",
        json=SAMPLE_PAYLOADS["notes"],
        headers=auth_headers(family["owner"]),
    ).json()
    headers = auth_headers(family["viewer"])

    patched = client.patch(f"/notes/{note['id']}", json={"title": "Mine"}, headers=headers)
    deleted = client.delete(f"/notes/{note['id']}", headers=headers)

    assert patched.status_code == 403
    assert deleted.status_code == 403


def test_itinerary_is_ordered_by_date_and_time(client, family, auth_headers):
    trip = family["trip"]
    headers = auth_headers(family["owner"])
    for day, at, title in [
        ("2026-07-03", "08:00:00", "Sintra"),
        ("2026-07-02", "18:00:00", "Dinner"),
        ("2026-07-02", "09:00:00", "Breakfast"),
    ]:
        client.post(
            f"/trips/{trip.id}/itinerary-items",
            json={"date": day, "time": at, "title": title, "type": "activity"},
            headers=headers,
        )

    listed = client.get(f"/trips/{trip.id}/itinerary-items", headers=headers).json()

    assert [row["title"] for row in listed] == ["Breakfast", "Dinner", "Sintra"]


def test_patch_item_keeps_unsent_fields(client, family, auth_headers):
    trip = family["trip"]
    headers = auth_headers(family["editor"])
    activity = client.post(
        f"/trips/{trip.id}/activities",
        json={
            "name": "Fado night",
            "description": "Alfama",
            "cost": "40 EUR",
        },
        headers=headers,
    ).json()
    assert activity["status"] == "planned"
    assert activity["booking_required"] is False

    response = client.patch(
        f"/activities/{activity['id']}",
        json={"status": "booked", "cost": None},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "booked"
    assert body["cost"] is None
    assert body["description"] == "Alfama"


def test_patch_missing_item_is_not_found(client, family, auth_headers):
    response = client.patch(
        "/notes/999", json={"title": "Ghost"}, headers=auth_headers(family["owner"])
    )

    assert response.status_code == 404


def test_accommodation_dates_are_validated_on_update(client, family, auth_headers):
    trip = family["trip"]
    headers = auth_headers(family["owner"])
    stay = client.post(
        f"/trips/{trip.id}/accommodations",
        json=SAMPLE_PAYLOADS["accommodations"],
        headers=headers,
    ).json()

    response = client.patch(
        f"/accommodations/{stay['id']}",
        json={"check_out": "2026-06-01"},
        headers=headers,
    )

    assert response.status_code == 422
    assert response.json()["code"] == "invalid_payload"
    unchanged = client.get(f"/trips/{trip.id}/accommodations", headers=headers).json()
    assert unchanged[0]["check_out"] == "2026-07-05"


def test_packing_item_can_only_be_assigned_to_members(
    client, family, make_user, auth_headers
):
    trip = family["trip"]
    outsider = make_user("outsider@example.com")
    headers = auth_headers(family["owner"])

    to_member = client.post(
        f"/trips/{trip.id}/packing-items",
        json={"item": "Charger", "category": "Electronics", "assigned_to_id": family["viewer"].id},
        headers=headers,
    )
    to_outsider = client.post(
        f"/trips/{trip.id}/packing-items",
        json={"item": "Charger", "category": "Electronics", "assigned_to_id": outsider.id},
        headers=headers,
    )

    assert to_member.status_code == 201
    assert to_member.json()["assigned_to_id"] == family["viewer"].id
    assert to_outsider.status_code == 422


def test_toggle_packed(client, family, auth_headers):
    trip = family["trip"]
    headers = auth_headers(family["editor"])
    item = client.post(
        f"/trips/{trip.id}/packing-items",
        json=SAMPLE_PAYLOADS["packing-items"],
        headers=headers,
    ).json()
    assert item["packed"] is False

    first = client.post(f"/packing-items/{item['id']}/toggle", headers=headers)
    second = client.post(f"/packing-items/{item['id']}/toggle", headers=headers)

    assert first.json()["packed"] is True
    assert second.json()["packed"] is False


def test_toggle_reminder_requires_mutating_role(client, family, auth_headers):
    trip = family["trip"]
    reminder = client.post(
        f"/trips/{trip.id}/reminders",
        json=SAMPLE_PAYLOADS["reminders"],
        headers=auth_headers(family["owner"]),
    ).json()

    by_viewer = client.post(
        f"/reminders/{reminder['id']}/toggle", headers=auth_headers(family["viewer"])
    )
    by_owner = client.post(
        f"/reminders/{reminder['id']}/toggle", headers=auth_headers(family["owner"])
    )

    assert by_viewer.status_code == 403
    assert by_owner.status_code == 200
    assert by_owner.json()["completed"] is True


def test_packing_list_is_grouped_by_category(client, family, auth_headers):
    trip = family["trip"]
    headers = auth_headers(family["owner"])
    for item, category in [("Socks", "Clothes"), ("Toothbrush", "Toiletries"), ("Hat", "Clothes")]:
        client.post(
            f"/trips/{trip.id}/packing-items",
            json={"item": item, "category": category},
            headers=headers,
        )

    listed = client.get(f"/trips/{trip.id}/packing-items", headers=headers).json()

    assert [row["item"] for row in listed] == ["Socks", "Hat", "Toothbrush"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
