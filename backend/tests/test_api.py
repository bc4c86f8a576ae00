"""
Tests for the REST API, against an in-memory SQLite database.

Run with: pytest backend/tests/test_api.py -v
"""
from app.models import Event


def titles(response):
    return [event["title"] for event in response.json()]


class TestPeriods:
    def test_sorted_by_order(self, seeded_client):
        response = seeded_client.get("/api/periods")
        assert response.status_code == 200
        body = response.json()
        assert [p["_id"] for p in body] == ["p1", "p2"]
        assert body[0]["startYear"] == -2879
        assert body[0]["slug"] == "ancient"

    def test_sub_periods(self, seeded_client):
        body = seeded_client.get("/api/subperiods").json()
        assert [sp["_id"] for sp in body] == ["sp4", "sp3"]
        assert body[0]["periodId"] == "p2"

    def test_sub_periods_of_period(self, seeded_client):
        assert seeded_client.get("/api/subperiods/period/p1").json() == []
        body = seeded_client.get("/api/subperiods/period/p2").json()
        assert [sp["name"] for sp in body] == ["Ngô Dynasty", "Trần Dynasty"]


class TestReadEvents:
    def test_list(self, seeded_client):
        body = seeded_client.get("/api/events").json()
        assert len(body) == 4
        event = next(e for e in body if e["_id"] == "e3")
        assert event["date"] == {"year": 1288, "month": 3, "day": 9}
        assert event["subPeriodId"] == "sp3"
        assert event["featured"] is False
        assert "endDate" not in event

    def test_get_one(self, seeded_client):
        response = seeded_client.get("/api/events/e2")
        assert response.status_code == 200
        assert response.json()["location"]["name"] == "Cổ Loa"

    def test_not_found(self, seeded_client):
        response = seeded_client.get("/api/events/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_by_period_ordered_by_year(self, seeded_client):
        response = seeded_client.get("/api/events/period/p2")
        assert titles(response) == ["Relocation to Thang Long", "Battle of Bach Dang"]

    def test_by_sub_period(self, seeded_client):
        assert titles(seeded_client.get("/api/events/subperiod/sp3")) == ["Battle of Bach Dang"]

    def test_range(self, seeded_client):
        response = seeded_client.get("/api/events/range", params={"start": -3000, "end": 1010})
        assert titles(response) == ["Founding of Van Lang", "Co Loa Citadel", "Relocation to Thang Long"]

    def test_range_requires_both_years(self, seeded_client):
        response = seeded_client.get("/api/events/range", params={"start": -3000})
        assert response.status_code == 400
        assert response.json() == {"error": "Valid start and end years required"}

    def test_range_rejects_non_numbers(self, seeded_client):
        response = seeded_client.get("/api/events/range", params={"start": "early", "end": 10})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_near(self, seeded_client):
        response = seeded_client.get("/api/events/near", params={"lat": 21.0285, "lng": 105.8542})
        # Thăng Long sits on the query point, Cổ Loa about 10 km and Bạch Đằng about 95 km away
        assert titles(response) == ["Relocation to Thang Long", "Co Loa Citadel", "Battle of Bach Dang"]

    def test_near_with_distance(self, seeded_client):
        params = {"lat": 21.0285, "lng": 105.8542, "distance": 1000}
        assert titles(seeded_client.get("/api/events/near", params=params)) == ["Relocation to Thang Long"]

    def test_near_requires_coordinates(self, seeded_client):
        response = seeded_client.get("/api/events/near", params={"lat": 21.0})
        assert response.status_code == 400
        assert response.json() == {"error": "Valid latitude and longitude required"}

    def test_search_ranks_by_matched_terms(self, seeded_client):
        response = seeded_client.get("/api/events/search", params={"q": "tran citadel"})
        # one term each, ties keep year order
        assert titles(response) == ["Co Loa Citadel", "Battle of Bach Dang"]

        response = seeded_client.get("/api/events/search", params={"q": "mongol tran"})
        assert titles(response) == ["Battle of Bach Dang"]

    def test_search_requires_query(self, seeded_client):
        for params in ({}, {"q": ""}, {"q": "   "}):
            response = seeded_client.get("/api/events/search", params=params)
            assert response.status_code == 400
            assert response.json() == {"error": "Search query required"}


class TestMutations:
    def test_create(self, client, db_session):
        payload = {
            "title": "Battle of Chi Lăng",
            "periodId": {"$oid": "65a1f0000000000000000003"},
            "date": {"year": 1427, "month": 9},
            "location": {"name": "Chi Lăng", "coordinates": [106.58, 21.67]},
            "keyFigures": [{"name": "Lê Lợi", "role": "Commander"}],
        }
        response = client.post("/api/events", json=payload)
        assert response.status_code == 201
        body = response.json()
        assert len(body["_id"]) == 24
        assert body["periodId"] == "65a1f0000000000000000003"

        stored = db_session.get(Event, body["_id"])
        assert stored.year == 1427
        assert (stored.latitude, stored.longitude) == (21.67, 106.58)

    def test_create_requires_fields(self, client):
        response = client.post("/api/events", json={"title": "No date", "periodId": "p1"})
        assert response.status_code == 400
        assert response.json() == {"error": "Title, periodId, and date are required"}

    def test_create_validates_date(self, client):
        payload = {"title": "Bad month", "periodId": "p1", "date": {"year": 1000, "month": 12}}
        response = client.post("/api/events", json=payload)
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid date.month")

    def test_update_sets_only_sent_fields(self, seeded_client, seeded_db):
        response = seeded_client.put("/api/events/e3", json={"featured": True, "date": {"year": 1287}})
        assert response.status_code == 200
        assert response.json() == {"message": "Event updated successfully"}

        body = seeded_client.get("/api/events/e3").json()
        assert body["featured"] is True
        assert body["title"] == "Battle of Bach Dang"
        assert body["date"] == {"year": 1287}
        assert seeded_db.get(Event, "e3").year == 1287

    def test_update_rejects_null_required_fields(self, seeded_client, seeded_db):
        for field in ("title", "date", "periodId"):
            response = seeded_client.put("/api/events/e3", json={field: None})
            assert response.status_code == 400
            assert "cannot be null" in response.json()["error"]

        stored = seeded_db.get(Event, "e3")
        assert stored.title == "Battle of Bach Dang"
        assert stored.year == 1288
        assert stored.period_id == "p2"

    def test_update_missing(self, client):
        response = client.put("/api/events/missing", json={"featured": True})
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_delete(self, seeded_client):
        response = seeded_client.delete("/api/events/e1")
        assert response.json() == {"message": "Event deleted successfully"}
        assert seeded_client.get("/api/events/e1").status_code == 404
        assert seeded_client.delete("/api/events/e1").status_code == 404


class TestDiagnostics:
    def test_stats(self, seeded_client):
        body = seeded_client.get("/api/stats").json()
        assert body["totalEvents"] == 4
        assert body["totalPeriods"] == 2
        assert body["totalSubPeriods"] == 2
        counts = {row["_id"]: row["count"] for row in body["eventsByPeriod"]}
        assert counts == {"p1": 2, "p2": 2}

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "OK"
        assert body["database"] == "Connected"
        assert body["environment"] == "development"
        assert "timestamp" in body

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"
