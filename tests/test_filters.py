"""
Activity list filtering: category OR-membership, tag AND-coverage and filter clearing.
"""
import pytest


@pytest.fixture
async def tagged(client, auth_headers):
    """Activities tagged {A}, {B}, {A,B} plus one untagged, spread over two categories."""
    async def post(path, payload):
        resp = await client.post(path, json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]["id"]

    cat_x = await post("/api/categories", {"name": "X"})
    cat_y = await post("/api/categories", {"name": "Y"})
    tag_a = await post("/api/tags", {"name": "A"})
    tag_b = await post("/api/tags", {"name": "B"})

    only_a = await post("/api/activities", {"title": "only A", "category_id": cat_x, "tag_ids": [tag_a]})
    only_b = await post("/api/activities", {"title": "only B", "category_id": cat_y, "tag_ids": [tag_b]})
    both = await post("/api/activities", {"title": "A and B", "category_id": cat_x, "tag_ids": [tag_a, tag_b]})
    none = await post("/api/activities", {"title": "untagged"})

    return {
        "cat_x": cat_x, "cat_y": cat_y, "tag_a": tag_a, "tag_b": tag_b,
        "only_a": only_a, "only_b": only_b, "both": both, "none": none,
    }


async def _ids(client, headers, **params):
    resp = await client.get("/api/activities", params=params, headers=headers)
    assert resp.status_code == 200, resp.text
    return [a["id"] for a in resp.json()["data"]]


async def test_unfiltered_list_is_newest_first(client, auth_headers, tagged):
    ids = await _ids(client, auth_headers)
    assert ids == [tagged["none"], tagged["both"], tagged["only_b"], tagged["only_a"]]


async def test_tag_filter_requires_every_tag(client, auth_headers, tagged):
    ids = await _ids(client, auth_headers, tag_ids=f"{tagged['tag_a']},{tagged['tag_b']}")
    assert ids == [tagged["both"]]


async def test_single_tag_filter(client, auth_headers, tagged):
    ids = await _ids(client, auth_headers, tag_ids=str(tagged["tag_a"]))
    assert set(ids) == {tagged["only_a"], tagged["both"]}


async def test_repeated_tag_id_counts_once(client, auth_headers, tagged):
    ids = await _ids(client, auth_headers, tag_ids=f"{tagged['tag_b']},{tagged['tag_b']}")
    assert set(ids) == {tagged["only_b"], tagged["both"]}


async def test_category_filter_is_any_of(client, auth_headers, tagged):
    ids = await _ids(client, auth_headers, category_ids=str(tagged["cat_x"]))
    assert set(ids) == {tagged["only_a"], tagged["both"]}

    ids = await _ids(client, auth_headers, category_ids=f"{tagged['cat_x']}, {tagged['cat_y']}")
    assert set(ids) == {tagged["only_a"], tagged["only_b"], tagged["both"]}


async def test_category_and_tag_filters_combine(client, auth_headers, tagged):
    ids = await _ids(
        client, auth_headers, category_ids=str(tagged["cat_x"]), tag_ids=str(tagged["tag_b"])
    )
    assert ids == [tagged["both"]]

    ids = await _ids(
        client, auth_headers, category_ids=str(tagged["cat_y"]), tag_ids=str(tagged["tag_a"])
    )
    assert ids == []


async def test_clearing_filters_restores_full_list(client, auth_headers, tagged):
    original = await _ids(client, auth_headers)
    await _ids(client, auth_headers, category_ids=str(tagged["cat_x"]), tag_ids=str(tagged["tag_a"]))
    assert await _ids(client, auth_headers, category_ids="", tag_ids="") == original
    assert await _ids(client, auth_headers) == original


async def test_listing_includes_display_fields(client, auth_headers, tagged):
    resp = await client.get("/api/activities", headers=auth_headers)
    by_id = {a["id"]: a for a in resp.json()["data"]}
    both = by_id[tagged["both"]]
    assert both["category_name"] == "X"
    assert [t["name"] for t in both["tags"]] == ["A", "B"]
    assert by_id[tagged["none"]]["category_name"] is None


async def test_malformed_filter_is_rejected(client, auth_headers, tagged):
    resp = await client.get("/api/activities", params={"tag_ids": "1,two"}, headers=auth_headers)
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"] == [{"field": "tag_ids", "value": "two"}]
