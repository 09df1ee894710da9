"""
Category and tag API tests: defaults, per-owner uniqueness, ownership and patch semantics.
"""
import pytest

RESOURCES = [
    ("/api/categories", "#FFD700", "Category"),
    ("/api/tags", "#C0C0C0", "Tag"),
]


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_create_applies_default_color(client, auth_headers, path, default_color, label):
    resp = await client.post(path, json={"name": "Work"}, headers=auth_headers)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["name"] == "Work"
    assert data["color"] == default_color
    assert data["activity_count"] == 0


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_create_requires_name(client, auth_headers, path, default_color, label):
    for payload in ({}, {"name": ""}, {"name": "   "}, {"name": "<b></b>"}):
        resp = await client.post(path, json=payload, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == {
            "code": "VALIDATION_ERROR",
            "message": f"{label} name is required",
            "details": [],
        }


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_create_rejects_bad_color(client, auth_headers, path, default_color, label):
    resp = await client.post(path, json={"name": "Odd", "color": "gold"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    resp = await client.post(path, json={"name": "Short hex", "color": "#abc"}, headers=auth_headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["color"] == "#abc"


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_name_uniqueness_is_per_owner(client, make_user, path, default_color, label):
    _, alice = await make_user()
    _, bob = await make_user()

    assert (await client.post(path, json={"name": "Work"}, headers=alice)).status_code == 201
    assert (await client.post(path, json={"name": "Work"}, headers=bob)).status_code == 201

    resp = await client.post(path, json={"name": "Work"}, headers=alice)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "DUPLICATE_NAME"


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_read_one_checks_existence_then_ownership(client, make_user, path, default_color, label):
    _, alice = await make_user()
    _, bob = await make_user()
    item_id = (await client.post(path, json={"name": "Private"}, headers=alice)).json()["data"]["id"]

    resp = await client.get(f"{path}/{item_id}", headers=alice)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Private"

    resp = await client.get(f"{path}/{item_id}", headers=bob)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"

    resp = await client.get(f"{path}/{item_id + 1000}", headers=bob)
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == f"{label} not found"

    for method in ("put", "delete"):
        kwargs = {"json": {"name": "Stolen"}} if method == "put" else {}
        resp = await getattr(client, method)(f"{path}/{item_id}", headers=bob, **kwargs)
        assert resp.status_code == 403


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_list_is_scoped_to_owner(client, make_user, path, default_color, label):
    _, alice = await make_user()
    _, bob = await make_user()
    await client.post(path, json={"name": "Alpha"}, headers=alice)
    await client.post(path, json={"name": "Beta"}, headers=alice)
    await client.post(path, json={"name": "Gamma"}, headers=bob)

    resp = await client.get(path, headers=alice)
    assert resp.status_code == 200
    assert [item["name"] for item in resp.json()["data"]] == ["Alpha", "Beta"]


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_update_is_a_patch(client, auth_headers, path, default_color, label):
    item = (await client.post(path, json={"name": "Home", "color": "#123456"}, headers=auth_headers)).json()["data"]

    resp = await client.put(f"{path}/{item['id']}", json={"color": "#654321"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Home"
    assert resp.json()["data"]["color"] == "#654321"

    # Renaming to its own name is not a conflict
    resp = await client.put(f"{path}/{item['id']}", json={"name": "Home"}, headers=auth_headers)
    assert resp.status_code == 200

    for empty in ("", None):
        resp = await client.put(f"{path}/{item['id']}", json={"name": empty}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == f"{label} name cannot be empty"


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_update_rejects_name_taken_by_sibling(client, auth_headers, path, default_color, label):
    await client.post(path, json={"name": "Taken"}, headers=auth_headers)
    other = (await client.post(path, json={"name": "Free"}, headers=auth_headers)).json()["data"]

    resp = await client.put(f"{path}/{other['id']}", json={"name": "Taken"}, headers=auth_headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "DUPLICATE_NAME"


@pytest.mark.parametrize("path,default_color,label", RESOURCES)
async def test_delete(client, auth_headers, path, default_color, label):
    item_id = (await client.post(path, json={"name": "Temp"}, headers=auth_headers)).json()["data"]["id"]

    resp = await client.delete(f"{path}/{item_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {"message": f"{label} deleted successfully"}}

    resp = await client.get(f"{path}/{item_id}", headers=auth_headers)
    assert resp.status_code == 404


async def test_activity_counts_on_listing(client, auth_headers):
    category = (await client.post("/api/categories", json={"name": "Work"}, headers=auth_headers)).json()["data"]
    tag = (await client.post("/api/tags", json={"name": "Urgent"}, headers=auth_headers)).json()["data"]
    for title in ("One", "Two"):
        await client.post(
            "/api/activities",
            json={"title": title, "category_id": category["id"], "tag_ids": [tag["id"]]},
            headers=auth_headers,
        )

    categories = (await client.get("/api/categories", headers=auth_headers)).json()["data"]
    tags = (await client.get("/api/tags", headers=auth_headers)).json()["data"]
    assert categories[0]["activity_count"] == 2
    assert tags[0]["activity_count"] == 2

    resp = await client.get(f"/api/categories/{category['id']}", headers=auth_headers)
    assert resp.json()["data"]["activity_count"] == 2


async def test_resources_require_authentication(client):
    for path in ("/api/categories", "/api/tags", "/api/activities"):
        resp = await client.get(path)
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"
