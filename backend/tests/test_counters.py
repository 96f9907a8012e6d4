"""Tests for rebuilding the cached geography counters."""

from mallmap.services import recompute_counters


class TestRecomputeCounters:
    def test_counts_match_live_data(self, db, catalog, place, geo):
        place(catalog["apple"], catalog["skp"])
        place(catalog["nike"], catalog["skp"])
        place(catalog["apple"], catalog["joy"])
        place(catalog["apple"], catalog["ifc"])

        recompute_counters(db)

        assert geo["beijing"].mall_count == 3
        assert geo["beijing"].brand_count == 2
        assert geo["beijing"].district_count == 2
        assert geo["city"].district_count == 2
        assert geo["chaoyang"].mall_count == 2
        assert geo["chaoyang"].brand_count == 2
        assert geo["haidian"].mall_count == 0
        assert geo["shanghai"].brand_count == 1

    def test_second_pass_changes_nothing(self, db, catalog, place):
        place(catalog["apple"], catalog["skp"])
        first = recompute_counters(db)
        second = recompute_counters(db)
        assert first["provinces"] > 0
        assert second == {"provinces": 0, "cities": 0, "districts": 0}

    def test_endpoint_is_admin_only(self, client, admin_headers, user_headers, geo):
        assert client.post("/api/admin/counters/recompute", headers=user_headers).status_code == 403
        resp = client.post("/api/admin/counters/recompute", headers=admin_headers)
        assert resp.status_code == 200
        assert set(resp.json()["data"]) == {"provinces", "cities", "districts"}
