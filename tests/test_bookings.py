from database import Base


def create(client, payload, **overrides):
    resp = client.post("/booking", json={**payload, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_index_is_plain_text(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "If you see this, the API is working!"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_returns_record_with_generated_id(client, booking_payload):
    resp = client.post("/booking", json=booking_payload)

    assert resp.status_code == 201
    body = resp.json()
    assert isinstance(body["id"], int)
    assert {k: v for k, v in body.items() if k != "id"} == booking_payload


def test_created_booking_is_listed_for_its_owner(client, booking_payload):
    created = create(client, booking_payload)

    listed = client.get("/booking/u1").json()

    assert created["userId"] == "u1"
    assert [b["id"] for b in listed] == [created["id"]]


def test_list_is_in_creation_order_and_scoped_to_owner(client, booking_payload):
    first = create(client, booking_payload, seatType="A1")
    create(client, booking_payload, seatType="B7", userId="u2")
    second = create(client, booking_payload, seatType="C3")

    listed = client.get("/booking/u1").json()

    assert [b["id"] for b in listed] == [first["id"], second["id"]]
    assert {b["userId"] for b in listed} == {"u1"}


def test_list_for_user_without_bookings_is_empty(client):
    resp = client.get("/booking/nobody")
    assert resp.status_code == 200
    assert resp.json() == []


def test_get_single_booking(client, booking_payload):
    created = create(client, booking_payload)

    resp = client.get(f"/booking/u1/{created['id']}")

    assert resp.status_code == 200
    assert resp.json() == created


def test_get_missing_booking_is_404(client):
    resp = client.get("/booking/u1/999")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Booking not found"}


def test_get_other_users_booking_is_404(client, booking_payload):
    created = create(client, booking_payload)
    assert client.get(f"/booking/u2/{created['id']}").status_code == 404


def test_update_replaces_fields(client, booking_payload):
    created = create(client, booking_payload)
    changes = {**booking_payload, "seatType": "B2", "date": "2024-02-02", "endTime": "12:30"}

    resp = client.put(f"/booking/{created['id']}", json=changes)

    assert resp.status_code == 200
    assert resp.json() == {**changes, "id": created["id"]}
    assert client.get(f"/booking/u1/{created['id']}").json()["seatType"] == "B2"


def test_update_with_wrong_owner_is_404_and_leaves_row(client, booking_payload):
    created = create(client, booking_payload)

    resp = client.put(
        f"/booking/{created['id']}",
        json={**booking_payload, "seatType": "Z9", "userId": "intruder"},
    )

    assert resp.status_code == 404
    assert "seatType" not in resp.json()
    assert client.get(f"/booking/u1/{created['id']}").json() == created


def test_update_missing_booking_is_404(client, booking_payload):
    assert client.put("/booking/999", json=booking_payload).status_code == 404


def test_delete_returns_deleted_row(client, booking_payload):
    created = create(client, booking_payload)

    resp = client.request("DELETE", f"/booking/{created['id']}", json={"userId": "u1"})

    assert resp.status_code == 200
    assert resp.json() == {"booking": created, "message": "Booking deleted successfully"}
    assert client.get("/booking/u1").json() == []


def test_delete_with_wrong_owner_is_404(client, booking_payload):
    created = create(client, booking_payload)

    resp = client.request("DELETE", f"/booking/{created['id']}", json={"userId": "u2"})

    assert resp.status_code == 404
    assert client.get(f"/booking/u1/{created['id']}").status_code == 200


def test_retried_create_makes_a_duplicate(client, booking_payload):
    first = create(client, booking_payload)
    second = create(client, booking_payload)
    assert first["id"] != second["id"]
    assert len(client.get("/booking/u1").json()) == 2


def test_malformed_body_is_rejected(client, booking_payload):
    bad = [
        {**booking_payload, "email": "not-an-email"},
        {**booking_payload, "date": "yesterday"},
        {**booking_payload, "startTime": "25:00"},
        {**booking_payload, "endTime": "09:00"},
        {k: v for k, v in booking_payload.items() if k != "userId"},
    ]
    for body in bad:
        assert client.post("/booking", json=body).status_code == 422
    assert client.get("/booking/u1").json() == []


def test_delete_requires_user_id(client, booking_payload):
    created = create(client, booking_payload)
    assert client.request("DELETE", f"/booking/{created['id']}", json={}).status_code == 422


def test_database_fault_is_generic_500(app, client):
    Base.metadata.drop_all(bind=app.state.engine)

    resp = client.get("/booking/u1")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}
