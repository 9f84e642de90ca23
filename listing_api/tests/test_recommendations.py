from conftest import auth_headers, make_user, seed_property


def test_recommend_property_to_another_user(client, db_session):
    alice = make_user(db_session, "alice@example.com", "Alice")
    bob = make_user(db_session, "bob@example.com", "Bob")
    prop = seed_property(db_session, alice)

    r = client.post(
        "/api/recommendations",
        json={"propertyId": prop.id, "recipientEmail": "bob@example.com"},
        headers=auth_headers(alice),
    )
    assert r.status_code == 201, r.text
    created = r.json()["data"]
    assert created["fromUserId"] == alice.id
    assert created["toUserId"] == bob.id

    inbox = client.get("/api/recommendations", headers=auth_headers(bob))
    assert inbox.status_code == 200
    rows = inbox.json()["data"]
    assert len(rows) == 1
    assert rows[0]["property"]["id"] == prop.id
    assert rows[0]["sender"] == {"id": alice.id, "name": "Alice", "email": "alice@example.com"}

    assert client.get("/api/recommendations", headers=auth_headers(alice)).json()["data"] == []


def test_recommendation_errors(client, db_session):
    alice = make_user(db_session, "alice@example.com", "Alice")
    prop = seed_property(db_session, alice)
    headers = auth_headers(alice)

    unknown = client.post(
        "/api/recommendations",
        json={"propertyId": prop.id, "recipientEmail": "ghost@example.com"},
        headers=headers,
    )
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "Recipient not found"

    bad_email = client.post(
        "/api/recommendations",
        json={"propertyId": prop.id, "recipientEmail": "nope"},
        headers=headers,
    )
    assert bad_email.status_code == 400
    assert bad_email.json()["errors"][0]["field"] == "recipientEmail"

    anonymous = client.post(
        "/api/recommendations",
        json={"propertyId": prop.id, "recipientEmail": "alice@example.com"},
    )
    assert anonymous.status_code == 401
