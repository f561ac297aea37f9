"""HTTP client for the analysis API.

Submits a URL and polls the job until it reaches a terminal status.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

from company_analyzer.models.analysis import AnalysisJob
from company_analyzer.services.analyzer.constants import POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class AnalysisClient:
    """Async client for ``/api/analyze`` and ``/api/analysis/{id}``."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        client: Optional[httpx.AsyncClient] = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=30)
        self.poll_interval = poll_interval

    async def __aenter__(self) -> "AnalysisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, url: str) -> AnalysisJob:
        resp = await self._client.post("/api/analyze", json={"url": url})
        resp.raise_for_status()
        return AnalysisJob.model_validate(resp.json())

    async def get(self, analysis_id: int) -> AnalysisJob:
        resp = await self._client.get(f"/api/analysis/{analysis_id}")
        resp.raise_for_status()
        return AnalysisJob.model_validate(resp.json())

    async def wait(
        self, analysis_id: int, *, timeout: Optional[float] = None
    ) -> AnalysisJob:
        """Poll until the job is terminal.

        Raises:
            TimeoutError: *timeout* seconds elapsed first.
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        while True:
            job = await self.get(analysis_id)
            if job.status.is_terminal:
                return job
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(f"Analysis {analysis_id} still pending")
            logger.debug(f"Analysis {analysis_id} pending; polling again")
            await asyncio.sleep(self.poll_interval)

    async def analyze(self, url: str, *, timeout: Optional[float] = None) -> AnalysisJob:
        """Submit *url* and wait for the final result."""
        job = await self.submit(url)
        if job.status.is_terminal:
            return job
        return await self.wait(job.id, timeout=timeout)
