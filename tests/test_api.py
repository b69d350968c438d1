"""
Tests for the Infant Growth Percentiles API
Run: pytest tests/test_api.py -v
"""
import pytest
from fastapi.testclient import TestClient

from src.api.server import app

client = TestClient(app)


class TestHealth:

    def test_health(self):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        assert len(data["series_available"]) == 6
        assert "weight/male" in data["series_available"]

    def test_docs_available(self):
        r = client.get("/docs")
        assert r.status_code == 200


class TestPercentileEndpoints:

    def test_percentile(self):
        r = client.get("/percentile", params={
            "value": 5.8458, "age_days": 91, "type": "weight", "sex": "female",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["percentile"] == 50.0
        assert data["z_score"] == 0.0
        assert data["band"] == "normal"

    def test_percentile_out_of_range(self):
        r = client.get("/percentile", params={
            "value": 10, "age_days": 1000, "type": "weight", "sex": "male",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["percentile"] is None
        assert data["z_score"] is None
        assert data["band"] is None

    def test_percentile_lines(self):
        r = client.get("/who/percentile-lines",
                       params={"type": "weight", "sex": "male"})
        assert r.status_code == 200
        data = r.json()
        assert len(data["lines"]) == 7  # P3, P10, P25, P50, P75, P90, P97
        assert all(len(line["points"]) == 17 for line in data["lines"])

    def test_percentile_lines_custom(self):
        r = client.get("/who/percentile-lines",
                       params={"type": "head", "sex": "female", "percentiles": "15,85"})
        assert r.status_code == 200
        lines = r.json()["lines"]
        assert [line["percentile"] for line in lines] == [15, 85]
        assert lines[0]["points"][0]["age_days"] == 0

    def test_percentile_lines_bad_list(self):
        r = client.get("/who/percentile-lines", params={"percentiles": "abc"})
        assert r.status_code == 422

    def test_percentile_lines_non_finite(self):
        for bad in ("nan", "inf", "3,-inf"):
            r = client.get("/who/percentile-lines", params={"percentiles": bad})
            assert r.status_code == 422

    def test_percentile_lines_default_from_settings(self, monkeypatch):
        monkeypatch.setattr("config.settings.CHART_PERCENTILES", [5.0, 95.0])
        r = client.get("/who/percentile-lines",
                       params={"type": "height", "sex": "female"})
        assert r.status_code == 200
        assert [line["percentile"] for line in r.json()["lines"]] == [5.0, 95.0]

    def test_invalid_type(self):
        r = client.get("/percentile", params={"value": 5, "age_days": 10, "type": "bmi"})
        assert r.status_code == 422


class TestInfantCRUD:

    def test_create_infant(self):
        r = client.post("/infants", json={
            "infant_id": "test-001",
            "sex": "female",
            "name": "Test Baby",
            "birth_date": "2024-01-01",
        })
        assert r.status_code in (201, 409)  # 409 if already exists

    def test_duplicate_infant(self):
        payload = {"infant_id": "test-dup", "sex": "male", "birth_date": "2024-01-01"}
        client.post("/infants", json=payload)
        r = client.post("/infants", json=payload)
        assert r.status_code == 409

    def test_list_infants(self):
        r = client.get("/infants")
        assert r.status_code == 200
        assert "count" in r.json()

    def test_get_infant(self):
        client.post("/infants", json={
            "infant_id": "test-002", "sex": "male", "birth_date": "2024-01-01",
        })
        r = client.get("/infants/test-002")
        assert r.status_code == 200
        assert r.json()["name"] == "test-002"

    def test_get_nonexistent(self):
        r = client.get("/infants/nonexistent-999")
        assert r.status_code == 404


class TestMeasurements:

    @pytest.fixture(autouse=True)
    def setup_infant(self):
        client.post("/infants", json={
            "infant_id": "test-measure", "sex": "female", "birth_date": "2024-01-01",
        })

    def _add(self, measurement_id="m1", measured_on="2024-04-01", **overrides):
        payload = {
            "id": measurement_id, "date": measured_on,
            "weight_kg": 5.8458, "height_cm": 59.8029, "head_cm": 39.5328,
        }
        payload.update(overrides)
        return client.post("/infants/test-measure/measurements", json=payload)

    def test_add_measurement(self):
        r = self._add()
        assert r.status_code == 200
        data = r.json()
        assert data["age_in_days"] == 91
        assert data["weight_percentile"] == 50.0
        assert data["height_percentile"] == 50.0
        assert data["head_percentile"] == 50.0
        assert data["weight_band"] == "normal"

    def test_implausible_weight(self):
        r = self._add(weight_kg=0.3)
        assert r.status_code == 422

    def test_implausible_head(self):
        r = self._add(head_cm=60)
        assert r.status_code == 422

    def test_date_before_birth(self):
        r = self._add(measured_on="2023-12-31")
        assert r.status_code == 422

    def test_date_in_future(self):
        r = self._add(measured_on="2999-01-01")
        assert r.status_code == 422

    def test_delete_measurement(self):
        self._add(measurement_id="to-delete")
        r = client.delete("/infants/test-measure/measurements/to-delete")
        assert r.status_code == 204
        r = client.delete("/infants/test-measure/measurements/to-delete")
        assert r.status_code == 404

    def test_update_profile_recomputes(self):
        client.post("/infants", json={
            "infant_id": "test-update", "sex": "female", "birth_date": "2024-01-01",
        })
        client.post("/infants/test-update/measurements", json={
            "id": "m1", "date": "2024-04-01",
            "weight_kg": 5.8458, "height_cm": 59.8029, "head_cm": 39.5328,
        })
        r = client.put("/infants/test-update", json={"sex": "male"})
        assert r.status_code == 200
        m = r.json()["measurements"][0]
        assert m["weight_percentile"] < 50.0

    def test_chart(self):
        self._add()
        r = client.get("/infants/test-measure/chart", params={"type": "head"})
        assert r.status_code == 200
        data = r.json()
        assert data["sex"] == "female"
        assert len(data["lines"]) == 7
        assert {"age_days": 91, "value": 39.5328} in data["measurements"]


class TestValidation:

    def test_invalid_sex(self):
        r = client.post("/infants", json={
            "infant_id": "bad-sex", "sex": "unknown", "birth_date": "2024-01-01",
        })
        assert r.status_code == 422

    def test_missing_birth_date(self):
        r = client.post("/infants", json={"infant_id": "no-birth", "sex": "male"})
        assert r.status_code == 422

    def test_negative_value(self):
        r = client.get("/percentile", params={"value": -1.0, "age_days": 10})
        assert r.status_code == 422

    def test_infinite_value(self):
        r = client.get("/percentile", params={"value": "inf", "age_days": 10})
        assert r.status_code == 422

    def test_chart_default_from_settings(self, monkeypatch):
        client.post("/infants", json={
            "infant_id": "chart-settings", "sex": "male", "birth_date": "2024-01-01",
        })
        monkeypatch.setattr("config.settings.CHART_PERCENTILES", [5.0, 95.0])
        r = client.get("/infants/chart-settings/chart", params={"type": "head"})
        assert r.status_code == 200
        assert [line["percentile"] for line in r.json()["lines"]] == [5.0, 95.0]
