"""Tests for the analysis endpoints."""

import asyncio
import time
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from company_analyzer.main import app, lifespan
from company_analyzer.models.analysis import JobStatus
from company_analyzer.services.analyzer import AnalysisOrchestrator, get_orchestrator
from company_analyzer.services.analyzer.errors import FetchError
from company_analyzer.services.analyzer.job_store import InMemoryJobStore
from company_analyzer.services.analyzer.page_fetcher import PageFetcher
from company_analyzer.services.analyzer.summarizer import Summarizer

SITE = "https://example.com"

PAGES = {
    SITE: (
        "<html><head><title>Acme</title></head><body><h1>Acme</h1>"
        "<p>Logistics for everyone.</p>"
        "<a href='https://linkedin.com/company/acme'>in</a></body></html>"
    ),
    f"{SITE}/about": (
        "<html><body><p>Founded in 1998, our mission is to simplify logistics.</p>"
        "<p>Our drivers, planners and engineers care about every shipment we "
        "handle, from the first mile to the last.</p></body></html>"
    ),
}


class CannedFetcher(PageFetcher):
    async def fetch(self, url: str, timeout: float) -> str:
        if url not in PAGES:
            raise FetchError("HTTP 404: Not Found", url=url, status_code=404)
        return PAGES[url]


class HeldFetcher(CannedFetcher):
    """Holds fetches of *held* URLs until released; refuses to fetch once closed."""

    def __init__(self, held: set[str]) -> None:
        self.held = held
        self.release = asyncio.Event()
        self.closed = False

    async def fetch(self, url: str, timeout: float) -> str:
        if url in self.held:
            await self.release.wait()
        if self.closed:
            raise FetchError(f"HTTP client closed before fetching {url}", url=url)
        return await super().fetch(url, timeout)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def orchestrator():
    return AnalysisOrchestrator(
        store=InMemoryJobStore(),
        fetcher=CannedFetcher(),
        summarizer=Summarizer(None, "test-model"),
    )


@pytest.fixture
def client(orchestrator):
    """Test client wired to an in-memory orchestrator."""

    async def _override():
        return orchestrator

    app.dependency_overrides[get_orchestrator] = _override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _poll(client: TestClient, job_id: int, attempts: int = 100) -> dict:
    for _ in range(attempts):
        data = client.get(f"/api/analysis/{job_id}").json()
        if data["status"] != "pending":
            return data
        time.sleep(0.02)
    raise AssertionError(f"analysis {job_id} never finished")


class TestHealthEndpoint:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ["healthy", "degraded"]
        assert "summarizer" in data["services"]


class TestAnalyze:
    def test_submit_returns_job_shape(self, client):
        response = client.post("/api/analyze", json={"url": SITE})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {
            "id",
            "url",
            "status",
            "website_data",
            "linkedin_data",
            "error_message",
            "created_at",
        }
        assert data["url"] == SITE
        assert data["status"] in ["pending", "completed"]
        _poll(client, data["id"])

    def test_end_to_end_about_page(self, client):
        job = client.post("/api/analyze", json={"url": SITE}).json()

        final = _poll(client, job["id"])

        assert final["status"] == "completed"
        website = final["website_data"]
        assert website["about"]["founding_year"] == "1998"
        assert "simplify logistics" in website["about"]["mission_statement"]
        assert website["services"] is None
        assert website["products"] is None
        assert website["contact"] is None
        assert website["home"]["page_title"] == "Acme"
        assert website["social_media"]["linkedin_url"] == "https://linkedin.com/company/acme"
        assert final["linkedin_data"] is None
        assert final["error_message"] is None

    def test_completed_url_returns_same_job(self, client):
        job = client.post("/api/analyze", json={"url": SITE}).json()
        first = _poll(client, job["id"])

        again = client.post("/api/analyze", json={"url": SITE}).json()

        assert again == first

    def test_homepage_failure_reported(self, client):
        job = client.post("/api/analyze", json={"url": "https://unreachable.example"}).json()

        final = _poll(client, job["id"])

        assert final["status"] == "failed"
        assert final["error_message"] == "HTTP 404: Not Found"
        assert final["website_data"] is None

    def test_terminal_job_unchanged_on_reread(self, client):
        job = client.post("/api/analyze", json={"url": SITE}).json()
        first = _poll(client, job["id"])
        assert client.get(f"/api/analysis/{job['id']}").json() == first

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"url": ""},
            {"url": "not a url"},
            {"url": "example.com"},
            {"url": "ftp://example.com"},
        ],
    )
    def test_invalid_url_rejected(self, client, body):
        response = client.post("/api/analyze", json=body)
        assert response.status_code == 400
        assert "detail" in response.json()

    def test_malformed_json_rejected(self, client):
        response = client.post(
            "/api/analyze",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestGetAnalysis:
    def test_unknown_id_is_404(self, client):
        response = client.get("/api/analysis/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Analysis 999 not found"

    def test_non_integer_id_is_400(self, client):
        response = client.get("/api/analysis/abc")
        assert response.status_code == 400


@pytest.mark.asyncio
class TestShutdown:
    @staticmethod
    def _orchestrator(fetcher: HeldFetcher) -> AnalysisOrchestrator:
        return AnalysisOrchestrator(
            store=InMemoryJobStore(),
            fetcher=fetcher,
            summarizer=Summarizer(None, "test-model"),
        )

    async def test_shutdown_waits_for_in_flight_analysis(self):
        fetcher = HeldFetcher({f"{SITE}/about"})
        orchestrator = self._orchestrator(fetcher)

        with patch(
            "company_analyzer.main.get_orchestrator",
            AsyncMock(return_value=orchestrator),
        ), patch("company_analyzer.main.reset_orchestrator"):
            async with lifespan(app):
                job = await orchestrator.submit(SITE)
                asyncio.get_running_loop().call_later(0.05, fetcher.release.set)

        final = await orchestrator.get(job.id)
        assert final.status is JobStatus.COMPLETED
        assert final.website_data.about.founding_year == "1998"
        assert fetcher.closed is True

    async def test_subpage_after_grace_period_is_skipped(self):
        fetcher = HeldFetcher({f"{SITE}/about"})
        orchestrator = self._orchestrator(fetcher)

        with patch(
            "company_analyzer.main.get_orchestrator",
            AsyncMock(return_value=orchestrator),
        ), patch("company_analyzer.main.reset_orchestrator"), patch(
            "company_analyzer.main.SHUTDOWN_GRACE_SECONDS", 0.01
        ):
            async with lifespan(app):
                job = await orchestrator.submit(SITE)

        assert fetcher.closed is True
        fetcher.release.set()
        await orchestrator.wait_idle()

        final = await orchestrator.get(job.id)
        assert final.status is JobStatus.COMPLETED
        assert final.website_data.about is None
        assert final.website_data.home.page_title == "Acme"
