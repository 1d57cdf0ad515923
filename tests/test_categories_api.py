def create_category(client, headers, **payload):
    payload.setdefault("name", "Gym")
    response = client.post("/api/categories", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_authentication(client):
    assert client.get("/api/categories").status_code == 401
    assert client.post("/api/categories", json={"name": "Gym"}).status_code == 401


def test_new_user_has_default_categories(client, auth_headers):
    categories = client.get("/api/categories", headers=auth_headers).json()
    names = [c["name"] for c in categories]
    assert names == sorted(names)
    assert {"Utilities", "Rent", "Other"} <= set(names)
    assert all(c["isDefault"] for c in categories)


def test_create_with_defaults(client, auth_headers):
    category = create_category(client, auth_headers, name="Streaming")
    assert category["icon"] == "📄"
    assert category["color"] == "#6b7280"
    assert category["isDefault"] is False
    assert category["userId"]


def test_create_validation(client, auth_headers):
    response = client.post(
        "/api/categories", json={"name": "", "color": "blue"}, headers=auth_headers
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "color"}


def test_update(client, auth_headers):
    category = create_category(client, auth_headers)
    response = client.put(
        f"/api/categories/{category['id']}",
        json={"icon": "🏋️", "color": "#22c55e"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["icon"] == "🏋️"
    assert response.json()["name"] == "Gym"


def test_update_other_users_category_is_not_found(client, auth_headers, other_auth_headers):
    category = create_category(client, auth_headers)
    response = client.put(
        f"/api/categories/{category['id']}", json={"name": "Mine now"}, headers=other_auth_headers
    )
    assert response.status_code == 404


def test_delete(client, auth_headers, other_auth_headers):
    category = create_category(client, auth_headers)
    url = f"/api/categories/{category['id']}"

    assert client.delete(url, headers=other_auth_headers).status_code == 404

    response = client.delete(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Category deleted successfully"

    assert client.delete(url, headers=auth_headers).status_code == 404


def test_default_category_cannot_be_deleted(client, auth_headers):
    default = client.get("/api/categories", headers=auth_headers).json()[0]
    response = client.delete(f"/api/categories/{default['id']}", headers=auth_headers)
    assert response.status_code == 400
