"""
Integration Tests for FastAPI Backend

Tests for API endpoints: prediction, reference data, health checks.
Uses async httpx for ASGI app testing.
"""
import math

import pytest
import httpx

from stemi.core.features import FEATURE_NAMES
from stemi.core.inference import logit
from stemi import main
from stemi.main import app
from stemi.utils.exceptions import ConfigurationError, InferenceError


@pytest.fixture
async def async_client():
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        """Test root endpoint returns health info."""
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["model_version"] == "stemi-lr-demo-1"

    async def test_health_endpoint(self, async_client):
        """Test /health endpoint."""
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["uptime_seconds"] >= 0


@pytest.mark.asyncio
class TestReferenceEndpoints:
    """Tests for feature schema and model info."""

    async def test_list_features(self, async_client):
        response = await async_client.get("/api/v1/features")
        assert response.status_code == 200

        names = [f["name"] for f in response.json()["features"]]
        assert names == list(FEATURE_NAMES)

    async def test_model_info(self, async_client):
        response = await async_client.get("/api/v1/model")
        assert response.status_code == 200

        data = response.json()
        assert data["thresholds"] == {"low": 0.1, "high": 0.5}
        assert "intercept" in data["coefficients"]


@pytest.mark.asyncio
class TestPredictEndpoint:
    """Tests for the prediction endpoint."""

    @pytest.mark.parametrize("path", ["/api/v1/predict", "/api/predict"])
    async def test_predict_example(self, async_client, example_features, path):
        """Example patient returns a consistent prediction."""
        response = await async_client.post(path, json=example_features)
        assert response.status_code == 200

        data = response.json()
        assert set(data) == {"probability", "riskCategory", "contributions"}
        assert 0.0 < data["probability"] < 1.0
        assert data["riskCategory"] == "High"
        assert set(data["contributions"]) == {"intercept", *FEATURE_NAMES}
        assert math.isclose(
            sum(data["contributions"].values()), logit(data["probability"]), rel_tol=1e-9
        )

    async def test_predict_low_risk(self, async_client, low_risk_features):
        response = await async_client.post("/api/v1/predict", json=low_risk_features)
        assert response.status_code == 200
        assert response.json()["riskCategory"] == "Low"

    async def test_validation_errors_aggregated(self, async_client, example_features):
        """Both independent problems are reported in one 400 response."""
        example_features["ageYears"] = 150
        del example_features["heartRateBpm"]

        response = await async_client.post("/api/v1/predict", json=example_features)
        assert response.status_code == 400

        data = response.json()
        assert data["error"] == "Invalid input"
        by_field = {i["field"]: i for i in data["issues"]}
        assert set(by_field) == {"ageYears", "heartRateBpm"}
        assert by_field["ageYears"]["type"] == "out_of_range"
        assert by_field["ageYears"]["path"] == ["ageYears"]
        assert by_field["heartRateBpm"]["type"] == "missing"

    async def test_string_numbers_rejected(self, async_client, example_features):
        example_features["troponinNgL"] = "80"

        response = await async_client.post("/api/v1/predict", json=example_features)
        assert response.status_code == 400
        assert response.json()["issues"][0]["type"] == "wrong_type"

    @pytest.mark.parametrize("age,status", [(17, 400), (18, 200), (100, 200), (101, 400)])
    async def test_age_boundaries(self, async_client, example_features, age, status):
        example_features["ageYears"] = age
        response = await async_client.post("/api/v1/predict", json=example_features)
        assert response.status_code == status

    async def test_malformed_json(self, async_client):
        """Unparseable body is a generic bad request, not a schema error."""
        response = await async_client.post(
            "/api/v1/predict",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Bad request"}

    @pytest.mark.parametrize("body", [b"[1, 2, 3]", b"\"text\"", b"null"])
    async def test_non_object_body(self, async_client, body):
        response = await async_client.post(
            "/api/v1/predict",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Bad request"}

    async def test_empty_object(self, async_client):
        response = await async_client.post("/api/v1/predict", json={})
        assert response.status_code == 400
        assert len(response.json()["issues"]) == len(FEATURE_NAMES)



class _FailingEngine:
    """Stands in for a scoring engine whose model is corrupted."""

    model_version = "broken"

    def __init__(self, exc):
        self.exc = exc

    def predict(self, record):
        raise self.exc


@pytest.mark.asyncio
class TestInternalErrors:
    """Model failures surface as 500 with the error envelope."""

    @pytest.mark.parametrize("exc,code", [
        (InferenceError("Linear predictor is not finite"), "INFERENCE_ERROR"),
        (ConfigurationError("Coefficient table is unusable", component="coefficients"), "CONFIGURATION_ERROR"),
    ])
    async def test_model_failure_returns_500(self, async_client, monkeypatch, example_features, exc, code):
        monkeypatch.setattr(main._prediction_service, "engine", _FailingEngine(exc))

        response = await async_client.post("/api/v1/predict", json=example_features)
        assert response.status_code == 500

        data = response.json()
        assert data["error"] == code
        assert data["message"] == exc.message
        assert "details" in data

    async def test_validation_still_runs_first(self, async_client, monkeypatch):
        monkeypatch.setattr(
            main._prediction_service, "engine", _FailingEngine(InferenceError("unreachable"))
        )

        response = await async_client.post("/api/v1/predict", json={})
        assert response.status_code == 400


@pytest.mark.asyncio
class TestAPIDocumentation:
    """Tests for API documentation availability."""

    async def test_docs_endpoint(self, async_client):
        response = await async_client.get("/docs")
        assert response.status_code == 200

    async def test_openapi_lists_predict(self, async_client):
        response = await async_client.get("/openapi.json")
        assert response.status_code == 200
        assert "/api/v1/predict" in response.json()["paths"]
