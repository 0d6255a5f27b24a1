"""Tests for the calculator, country and server-side share endpoints."""

import pytest


class TestGetWeeks:
    def test_breakdown_for_explicit_expectancy(self, client):
        response = client.get("/api/weeks", params={"age": 30, "life_expectancy": 70})
        assert response.status_code == 200
        data = response.json()
        assert data["weeksLived"] == 1560
        assert data["totalWeeks"] == 3640
        assert data["remainingWeeks"] == 2080
        assert data["sleepWeeks"] == 686
        assert data["awakeWeeks"] == 1394
        assert data["percentageLived"] == pytest.approx(42.857, abs=0.01)
        assert "42.9%" in data["summary"]

    def test_expectancy_from_country(self, client):
        data = client.get("/api/weeks", params={"age": 0, "country": "Japan"}).json()
        assert data["lifeExpectancy"] == 84.7
        assert data["totalWeeks"] == 4404

    def test_default_country_when_nothing_given(self, client):
        data = client.get("/api/weeks", params={"age": 0}).json()
        assert data["lifeExpectancy"] == 70.1

    def test_negative_age_is_clamped(self, client):
        data = client.get(
            "/api/weeks", params={"age": -5, "life_expectancy": 80}
        ).json()
        assert data["weeksLived"] == 0
        assert data["remainingWeeks"] == 4160

    def test_age_required(self, client):
        response = client.get("/api/weeks")
        assert response.status_code == 400


class TestCountries:
    def test_lists_all(self, client):
        rows = client.get("/api/countries").json()
        assert len(rows) == 27
        assert rows[-1] == {"country": "Other", "life_expectancy": 80.0, "year": None}
        assert {"country", "life_expectancy", "year"} <= set(rows[0])

    def test_filters(self, client):
        rows = client.get("/api/countries", params={"q": "united"}).json()
        assert [r["country"] for r in rows] == ["United Kingdom", "United States"]


class TestShareWeeks:
    def test_renders_and_stores(self, client, store):
        response = client.post("/api/weeks/share", json={"age": 30, "lifeExpectancy": 80})
        assert response.status_code == 200
        body = response.json()
        assert body["url"] == f"https://weeks.example.com/api/images/{body['id']}"
        assert store.get(body["id"]).startswith("data:image/png;base64,")

    def test_share_link_serves_page(self, client):
        body = client.post(
            "/api/weeks/share", json={"age": 1, "lifeExpectancy": 2}
        ).json()
        page = client.get(f"/api/images/{body['id']}")
        assert page.status_code == 200
        assert 'property="og:image" content="data:image/png;base64,' in page.text

    @pytest.mark.parametrize(
        "body",
        [
            {"age": -1, "lifeExpectancy": 80},
            {"age": 30, "lifeExpectancy": 1000},
            {"age": 30},
        ],
    )
    def test_invalid_input_is_400(self, client, body):
        response = client.post("/api/weeks/share", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}
