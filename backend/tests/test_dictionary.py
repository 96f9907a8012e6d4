"""Tests for dictionary administration and the public lookup."""

import pytest


@pytest.fixture
def entries(client, admin_headers):
    rows = [
        {"type": "brand_category", "label": "核心品牌", "value": "1", "sort": 2},
        {"type": "brand_category", "label": "重点品牌", "value": "2", "sort": 1},
        {"type": "mall_level", "label": "A级", "value": "A"},
    ]
    created = []
    for row in rows:
        resp = client.post("/api/admin/dictionaries", json=row, headers=admin_headers)
        assert resp.status_code == 200
        created.append(resp.json()["data"])
    return created


class TestDictionaryAdmin:
    def test_duplicate_value_is_a_validation_error(self, client, admin_headers, entries):
        resp = client.post(
            "/api/admin/dictionaries",
            json={"type": "brand_category", "label": "另一个", "value": "1"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Value already exists for this type"

    def test_same_value_in_another_type_is_allowed(self, client, admin_headers, entries):
        resp = client.post(
            "/api/admin/dictionaries",
            json={"type": "mall_level", "label": "一", "value": "1"},
            headers=admin_headers,
        )
        assert resp.status_code == 200

    def test_update_into_duplicate(self, client, admin_headers, entries):
        resp = client.put(
            f"/api/admin/dictionaries/{entries[1]['id']}",
            json={"value": "1"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_mutations_require_admin(self, client, user_headers):
        resp = client.post(
            "/api/admin/dictionaries",
            json={"type": "t", "label": "l", "value": "v"},
            headers=user_headers,
        )
        assert resp.status_code == 403

    def test_list_is_sorted_by_type_then_sort(self, client, entries):
        data = client.get("/api/admin/dictionaries").json()["data"]
        assert [(d["type"], d["value"]) for d in data["dictionaries"]] == [
            ("brand_category", "2"),
            ("brand_category", "1"),
            ("mall_level", "A"),
        ]
        assert data["pagination"]["limit"] == 20

    def test_search_and_types(self, client, entries):
        data = client.get("/api/admin/dictionaries", params={"search": "mall"}).json()["data"]
        assert [d["value"] for d in data["dictionaries"]] == ["A"]
        types = client.get("/api/admin/dictionaries/types").json()["data"]
        assert types == ["brand_category", "mall_level"]

    def test_batch_sort(self, client, admin_headers, entries):
        resp = client.put(
            "/api/admin/dictionaries/batch/sort",
            json={"items": [{"id": entries[0]["id"], "sort": 0}, {"id": entries[1]["id"], "sort": 5}]},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = client.get("/api/admin/dictionaries", params={"type": "brand_category"}).json()["data"]
        assert [d["value"] for d in data["dictionaries"]] == ["1", "2"]

    def test_delete(self, client, admin_headers, entries):
        assert client.delete(f"/api/admin/dictionaries/{entries[2]['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/admin/dictionaries/{entries[2]['id']}", headers=admin_headers).status_code == 404


class TestDictionaryLookup:
    def test_single_type_is_a_list(self, client, entries):
        data = client.get("/api/map/dictionaries", params={"type": "brand_category"}).json()["data"]
        assert data == [{"label": "重点品牌", "value": "2"}, {"label": "核心品牌", "value": "1"}]

    def test_several_types_are_keyed(self, client, entries):
        data = client.get("/api/map/dictionaries", params={"type": "brand_category,mall_level"}).json()["data"]
        assert set(data) == {"brand_category", "mall_level"}
        assert data["mall_level"] == [{"label": "A级", "value": "A"}]

    def test_no_type_groups_everything(self, client, entries):
        data = client.get("/api/map/dictionaries").json()["data"]
        assert set(data) == {"brand_category", "mall_level"}
        assert len(data["brand_category"]) == 2
