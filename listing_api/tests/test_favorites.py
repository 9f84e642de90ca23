from conftest import auth_headers, make_user, seed_property


def test_add_list_and_remove_favorite(client, db_session):
    user = make_user(db_session, "favuser@example.com", "Fav User")
    prop = seed_property(db_session, user)
    headers = auth_headers(user)

    r = client.post("/api/favorites", json={"propertyId": prop.id}, headers=headers)
    assert r.status_code == 201, r.text
    fav = r.json()["data"]
    assert fav["propertyId"] == prop.id
    assert fav["userId"] == user.id
    assert fav["property"]["title"] == "Seeded"

    # Adding again keeps a single favourite
    again = client.post("/api/favorites", json={"propertyId": prop.id}, headers=headers)
    assert again.status_code == 201
    assert again.json()["data"]["id"] == fav["id"]

    listed = client.get("/api/favorites", headers=headers)
    assert listed.status_code == 200
    assert [f["propertyId"] for f in listed.json()["data"]] == [prop.id]

    removed = client.delete(f"/api/favorites/{prop.id}", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["message"] == "Removed from favorites"
    assert client.get("/api/favorites", headers=headers).json()["data"] == []

    # Removing a favourite that is gone is not an error
    assert client.delete(f"/api/favorites/{prop.id}", headers=headers).status_code == 200


def test_favorites_are_private_to_each_user(client, db_session):
    alice = make_user(db_session, "alice@example.com", "Alice")
    bob = make_user(db_session, "bob@example.com", "Bob")
    prop = seed_property(db_session, alice)

    client.post("/api/favorites", json={"propertyId": prop.id}, headers=auth_headers(alice))

    assert len(client.get("/api/favorites", headers=auth_headers(alice)).json()["data"]) == 1
    assert client.get("/api/favorites", headers=auth_headers(bob)).json()["data"] == []


def test_favorite_errors(client, db_session):
    user = make_user(db_session)
    headers = auth_headers(user)

    missing = client.post("/api/favorites", json={"propertyId": 4242}, headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Property not found"}

    invalid = client.post("/api/favorites", json={"propertyId": "abc"}, headers=headers)
    assert invalid.status_code == 400
    assert invalid.json()["errors"][0]["field"] == "propertyId"

    bad_id = client.delete("/api/favorites/abc", headers=headers)
    assert bad_id.status_code == 400

    assert client.get("/api/favorites").status_code == 401
