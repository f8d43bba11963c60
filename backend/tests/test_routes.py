"""Tests for API routes."""
import pytest
from fastapi.testclient import TestClient

from src.config import settings
from src.exceptions import (
    BatchTimeoutError,
    BrowserSessionError,
    NoURLsConfiguredError,
    URLListError,
)
from src.main import app
from src.models import ScrapeOutcome
from src.routes.scrape import get_orchestrator

BATCH = {
    "arrivalDate": "2024-06-01",
    "departureDate": "2024-06-05",
    "urls": ["https://example.com/a", "https://example.com/b"],
}


class StubOrchestrator:
    """Orchestrator stand-in recording the batches it receives."""

    def __init__(self, outcomes=None, error=None):
        self.outcomes = outcomes or []
        self.error = error
        self.batches = []

    async def handle_batch(self, request, cancel_event=None):
        self.batches.append(request)
        if self.error:
            raise self.error
        return self.outcomes


@pytest.fixture
def stub():
    """Install a stub orchestrator for the duration of a test."""
    orchestrator = StubOrchestrator(
        outcomes=[
            ScrapeOutcome(url="https://example.com/a?checkin=2024-06-01&checkout=2024-06-05", price="$99"),
            ScrapeOutcome(url="https://example.com/b?checkin=2024-06-01&checkout=2024-06-05", price="N/A"),
        ]
    )
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield orchestrator
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health and root endpoints."""

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data


class TestScrapeEndpoint:
    """Tests for the scrape endpoint."""

    def test_scrape_returns_outcomes(self, client, stub):
        """A valid batch returns a JSON array of url/price records."""
        response = client.post("/scrape", json=BATCH)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == [
            {"url": "https://example.com/a?checkin=2024-06-01&checkout=2024-06-05", "price": "$99"},
            {"url": "https://example.com/b?checkin=2024-06-01&checkout=2024-06-05", "price": "N/A"},
        ]

        batch = stub.batches[0]
        assert batch.arrival_date == "2024-06-01"
        assert batch.departure_date == "2024-06-05"
        assert batch.urls == BATCH["urls"]

    def test_urls_optional(self, client, stub):
        """Omitting urls sends an empty list to the orchestrator."""
        response = client.post(
            "/scrape", json={"arrivalDate": "2024-06-01", "departureDate": "2024-06-05"}
        )
        assert response.status_code == 200
        assert stub.batches[0].urls == []

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_wrong_method(self, client, stub, method):
        """Methods other than POST are rejected before any scraping."""
        response = getattr(client, method)("/scrape")
        assert response.status_code == 405
        assert stub.batches == []

    def test_malformed_json(self, client, stub):
        """A body that is not JSON is a bad request."""
        response = client.post(
            "/scrape",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid JSON"
        assert stub.batches == []

    def test_wrong_field_type(self, client, stub):
        """urls must be a list of strings."""
        response = client.post("/scrape", json={**BATCH, "urls": "https://example.com/a"})
        assert response.status_code == 400
        assert stub.batches == []

    def test_missing_dates(self, client, stub):
        """Both stay dates are required."""
        response = client.post("/scrape", json={"urls": BATCH["urls"]})
        assert response.status_code == 400
        assert stub.batches == []

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (NoURLsConfiguredError(), 400),
            (BrowserSessionError("chromium not found"), 503),
            (BatchTimeoutError("too slow", completed=1, total=2), 504),
        ],
    )
    def test_batch_errors(self, client, stub, error, status_code):
        """Batch-level failures become a single error response."""
        stub.error = error
        response = client.post("/scrape", json=BATCH)

        assert response.status_code == status_code
        assert "detail" in response.json()

    def test_not_initialized(self, client, monkeypatch):
        """Without startup there is no orchestrator to serve the request."""
        monkeypatch.setattr(app.state, "orchestrator", None, raising=False)
        response = client.post("/scrape", json=BATCH)
        assert response.status_code == 503


class TestCORS:
    """Tests for cross-origin handling."""

    def test_allowed_origin_header(self, client, stub):
        """Responses to the configured origin carry the allow-origin header."""
        response = client.post("/scrape", json=BATCH, headers={"Origin": settings.cors_origin})
        assert response.headers["access-control-allow-origin"] == settings.cors_origin

    def test_other_origin_not_allowed(self, client, stub):
        """Other origins get no allow-origin header."""
        response = client.post("/scrape", json=BATCH, headers={"Origin": "https://evil.example"})
        assert "access-control-allow-origin" not in response.headers

    def test_preflight(self, client, stub):
        """Preflight requests are answered without running a batch."""
        response = client.options(
            "/scrape",
            headers={
                "Origin": settings.cors_origin,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]
        assert stub.batches == []

    def test_bare_options(self, client, stub):
        """A plain OPTIONS request gets an empty response."""
        response = client.options("/scrape")
        assert response.status_code == 200
        assert response.content == b""
        assert stub.batches == []


class TestStartup:
    """Tests for application startup."""

    def test_loads_default_urls(self, tmp_path, monkeypatch):
        """The URL list is loaded once and handed to the orchestrator."""
        path = tmp_path / "list.txt"
        path.write_text("https://example.com/x\n\nhttps://example.com/y\n")
        monkeypatch.setattr(settings, "url_list_path", str(path))

        with TestClient(app):
            orchestrator = app.state.orchestrator
            assert orchestrator.default_urls == (
                "https://example.com/x",
                "https://example.com/y",
            )

    def test_missing_list_aborts_startup(self, tmp_path, monkeypatch):
        """Startup fails when the URL list cannot be read."""
        monkeypatch.setattr(settings, "url_list_path", str(tmp_path / "missing.txt"))

        with pytest.raises(URLListError):
            with TestClient(app):
                pass
