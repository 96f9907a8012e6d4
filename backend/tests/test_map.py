"""Tests for the public read endpoints under /api/map."""

import math

import pytest
from sqlalchemy import func, select

from mallmap.models import BrandStore, Province
from mallmap.services.compare_service import store_score


@pytest.fixture
def placements(catalog, place):
    place(catalog["apple"], catalog["skp"])
    place(catalog["nike"], catalog["skp"])
    place(catalog["apple"], catalog["joy"])
    place(catalog["dji"], catalog["direct"])
    place(catalog["apple"], catalog["ifc"])
    return catalog


class TestListsAndPagination:
    @pytest.mark.parametrize("limit", [1, 2, 3, 5])
    def test_limit_bounds_items_and_pages(self, client, placements, limit):
        resp = client.get("/api/map/malls", params={"limit": limit})
        data = resp.json()["data"]
        assert len(data["malls"]) <= limit
        assert data["pagination"]["total"] == 4
        assert data["pagination"]["pages"] == math.ceil(4 / limit)

    def test_limit_zero_returns_everything(self, client, placements):
        data = client.get("/api/map/malls", params={"limit": 0}).json()["data"]
        assert len(data["malls"]) == 4
        assert data["pagination"]["pages"] == 1

    def test_negative_limit_is_rejected(self, client):
        assert client.get("/api/map/malls", params={"limit": -1}).status_code == 400

    def test_search_is_case_insensitive(self, client, placements):
        data = client.get("/api/map/brands", params={"search": "APP"}).json()["data"]
        assert [brand["name"] for brand in data["brands"]] == ["Apple"]
        assert data["brands"][0]["storeCount"] == 3

    def test_province_detail_lists_cities(self, client, geo):
        data = client.get(f"/api/map/provinces/{geo['beijing'].id}").json()["data"]
        assert data["province"]["name"] == "北京市"
        assert [city["name"] for city in data["cities"]] == ["北京市"]

    def test_city_detail_and_districts(self, client, geo):
        data = client.get(f"/api/map/cities/{geo['city'].id}").json()["data"]
        assert {d["name"] for d in data["districts"]} == {"朝阳区", "海淀区"}
        districts = client.get("/api/map/districts", params={"cityId": geo["city"].id}).json()["data"]
        assert districts["pagination"]["total"] == 2

    def test_national_summary_uses_cached_counters(self, client, db, geo):
        geo["beijing"].brand_count = 5
        geo["beijing"].mall_count = 3
        db.commit()
        data = client.get("/api/map/national").json()["data"]
        assert data["totalProvinces"] == 2
        assert data["totalBrands"] == 5
        assert data["totalMalls"] == 3

    def test_statistics(self, client, placements, geo):
        data = client.get("/api/map/statistics", params={"provinceId": geo["beijing"].id}).json()["data"]
        assert data == {"brandCount": 0, "mallCount": 3}


class TestTree:
    def test_level_one_matches_direct_counts(self, client, db, placements):
        provinces = client.get("/api/map/tree", params={"level": 1}).json()["data"]["provinces"]
        active = db.scalar(select(func.count(Province.id)).where(Province.is_active.is_(True)))
        assert len(provinces) == active

        for node in provinces:
            assert "cities" not in node
            store_count = db.scalar(select(func.count(BrandStore.id)).where(BrandStore.province_id == node["id"]))
            mall_count = db.scalar(
                select(func.count(func.distinct(BrandStore.mall_id))).where(BrandStore.province_id == node["id"])
            )
            brand_count = db.scalar(
                select(func.count(func.distinct(BrandStore.brand_id))).where(BrandStore.province_id == node["id"])
            )
            assert node["storeCount"] == store_count
            assert node["mallCount"] == mall_count
            assert node["brandCount"] == brand_count

    def test_level_three_nests_malls_and_direct_malls(self, client, placements, geo):
        provinces = client.get(
            "/api/map/tree", params={"level": 3, "provinceId": geo["beijing"].id}
        ).json()["data"]["provinces"]
        assert len(provinces) == 1
        beijing = provinces[0]
        assert beijing["storeCount"] == 4
        assert beijing["brandCount"] == 3

        city = beijing["cities"][0]
        chaoyang = next(d for d in city["districts"] if d["name"] == "朝阳区")
        haidian = next(d for d in city["districts"] if d["name"] == "海淀区")
        assert {mall["name"] for mall in chaoyang["malls"]} == {"北京SKP", "朝阳大悦城"}
        skp = next(mall for mall in chaoyang["malls"] if mall["name"] == "北京SKP")
        assert {brand["name"] for brand in skp["brands"]} == {"Apple", "Nike"}
        assert chaoyang["mallCount"] == 2
        assert haidian["malls"] == []
        assert [mall["name"] for mall in city["malls"]] == ["北京站商城"]

    def test_level_two_stops_at_cities(self, client, placements):
        provinces = client.get("/api/map/tree", params={"level": 2}).json()["data"]["provinces"]
        for province in provinces:
            for city in province["cities"]:
                assert "districts" not in city
                assert "malls" not in city

    def test_brand_filter(self, client, placements, geo):
        provinces = client.get(
            "/api/map/tree", params={"level": 1, "brandId": placements["apple"].id}
        ).json()["data"]["provinces"]
        by_name = {p["name"]: p for p in provinces}
        assert by_name["北京市"]["storeCount"] == 2
        assert by_name["北京市"]["brandCount"] == 1
        assert by_name["上海市"]["storeCount"] == 1

    def test_invalid_level(self, client):
        assert client.get("/api/map/tree", params={"level": 4}).status_code == 400


class TestDetail:
    def test_requires_region(self, client):
        resp = client.get("/api/map/detail")
        assert resp.status_code == 400

    def test_sorted_by_brand_then_mall(self, client, placements, geo):
        data = client.get("/api/map/detail", params={"cityId": geo["city"].id}).json()["data"]
        pairs = [(store["brand"]["name"], store["mall"]["name"]) for store in data["stores"]]
        assert pairs == sorted(pairs)
        assert data["stats"] == {"mallCount": 3, "brandCount": 3, "storeCount": 4}
        assert data["regionInfo"]["city"]["name"] == "北京市"
        assert data["pagination"]["limit"] == 20

    def test_search_on_brand_name(self, client, placements, geo):
        data = client.get(
            "/api/map/detail", params={"provinceId": geo["beijing"].id, "search": "nik"}
        ).json()["data"]
        assert [store["brand"]["name"] for store in data["stores"]] == ["Nike"]
        assert data["stats"]["storeCount"] == 1


class TestCompare:
    def test_score_falls_back_to_category_when_zero_or_missing(self):
        assert store_score(0, "1") == 10
        assert store_score(None, "2") == 5
        assert store_score(None, "9") == 0
        assert store_score(7, "1") == 7

    def test_compare_malls(self, client, placements):
        ids = f"{placements['skp'].id},{placements['joy'].id},{placements['direct'].id}"
        data = client.get("/api/map/compare", params={"type": "mall", "ids": ids}).json()["data"]
        locations = data["locations"]
        assert [loc["name"] for loc in locations] == ["北京SKP", "朝阳大悦城", "北京站商城"]
        skp = locations[0]
        # Apple scores 10 by category, Nike has an explicit 7.
        assert skp["totalScore"] == 17
        assert skp["averageScore"] == 8.5
        assert skp["brandCount"] == 2
        assert skp["rank"] == 1
        assert locations[2]["totalScore"] == 5

    def test_compare_cities_with_brand_filter(self, client, placements, geo):
        ids = f"{geo['city'].id},{geo['sh_city'].id}"
        data = client.get(
            "/api/map/compare",
            params={"type": "city", "ids": ids, "brandIds": str(placements["apple"].id)},
        ).json()["data"]
        by_id = {loc["id"]: loc for loc in data["locations"]}
        assert by_id[geo["city"].id]["storeCount"] == 2
        assert by_id[geo["city"].id]["brands"][0]["averageScore"] == 10
        assert by_id[geo["sh_city"].id]["totalScore"] == 10

    def test_unknown_ids(self, client, placements):
        resp = client.get("/api/map/compare", params={"type": "mall", "ids": "999"})
        assert resp.status_code == 404

    def test_ids_required(self, client):
        assert client.get("/api/map/compare", params={"type": "mall"}).status_code == 400
        assert client.get("/api/map/compare", params={"type": "mall", "ids": ","}).status_code == 400
        assert client.get("/api/map/compare", params={"type": "shop", "ids": "1"}).status_code == 400
