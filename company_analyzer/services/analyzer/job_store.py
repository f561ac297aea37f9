"""Keyed storage of analysis jobs.

``JobStore`` is the only shared mutable state in the analyzer. Two
backends are provided: an in-process dict guarded by an ``asyncio.Lock``
and a Supabase table. Updates are whole-record replacements; both backends
refuse to modify a job that already reached a terminal status.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Optional

from supabase import AsyncClient

from company_analyzer.models.analysis import (
    AnalysisJob,
    JobStatus,
    LinkedinData,
    WebsiteData,
)
from company_analyzer.services.analyzer.errors import JobNotFoundError, JobStateError

logger = logging.getLogger(__name__)


# =====================================================================
# State transitions
# =====================================================================


def _ensure_pending(job: AnalysisJob) -> None:
    if job.status.is_terminal:
        raise JobStateError(f"Analysis {job.id} is already {job.status.value}")


def complete_job(
    job: AnalysisJob,
    website_data: Optional[WebsiteData],
    linkedin_data: Optional[LinkedinData],
) -> AnalysisJob:
    """Return the ``completed`` form of a pending job."""
    _ensure_pending(job)
    return job.model_copy(
        update={
            "status": JobStatus.COMPLETED,
            "website_data": website_data,
            "linkedin_data": linkedin_data,
            "error_message": None,
        }
    )


def fail_job(job: AnalysisJob, message: str) -> AnalysisJob:
    """Return the ``failed`` form of a pending job."""
    _ensure_pending(job)
    return job.model_copy(
        update={
            "status": JobStatus.FAILED,
            "website_data": None,
            "linkedin_data": None,
            "error_message": message,
        }
    )


# =====================================================================
# Backends
# =====================================================================


class JobStore(ABC):
    """Create / get-by-id / get-by-url / update for analysis jobs."""

    @abstractmethod
    async def create(self, url: str) -> AnalysisJob:
        """Persist a new ``pending`` job for *url*."""

    @abstractmethod
    async def get(self, job_id: int) -> Optional[AnalysisJob]:
        """Return the job with *job_id*, or ``None``."""

    @abstractmethod
    async def get_by_url(self, url: str) -> Optional[AnalysisJob]:
        """Return the most recently created job for *url*, or ``None``."""

    @abstractmethod
    async def update(self, job: AnalysisJob) -> AnalysisJob:
        """Replace the stored record with *job*.

        Raises:
            JobNotFoundError: No job with ``job.id`` exists.
            JobStateError: The stored job is already terminal.
        """


class InMemoryJobStore(JobStore):
    """Process-local store; ids are monotonic integers starting at 1."""

    def __init__(self) -> None:
        self._jobs: dict[int, AnalysisJob] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def create(self, url: str) -> AnalysisJob:
        async with self._lock:
            job = AnalysisJob(id=next(self._ids), url=url)
            self._jobs[job.id] = job
            return job

    async def get(self, job_id: int) -> Optional[AnalysisJob]:
        async with self._lock:
            return self._jobs.get(job_id)

    async def get_by_url(self, url: str) -> Optional[AnalysisJob]:
        async with self._lock:
            matches = [j for j in self._jobs.values() if j.url == url]
            return matches[-1] if matches else None

    async def update(self, job: AnalysisJob) -> AnalysisJob:
        async with self._lock:
            existing = self._jobs.get(job.id)
            if existing is None:
                raise JobNotFoundError(job.id)
            _ensure_pending(existing)
            self._jobs[job.id] = job
            return job


class SupabaseJobStore(JobStore):
    """Jobs persisted as rows of a Supabase table.

    Expected columns: ``id`` (serial), ``url``, ``status``, ``website_data``
    (jsonb), ``linkedin_data`` (jsonb), ``error_message``, ``created_at``.
    """

    def __init__(self, client: AsyncClient, table: str = "analysis_results") -> None:
        self.client = client
        self.table = table

    async def create(self, url: str) -> AnalysisJob:
        draft = AnalysisJob(id=0, url=url)
        row = draft.model_dump(mode="json", exclude={"id"})
        resp = await self.client.table(self.table).insert(row).execute()
        return AnalysisJob.model_validate(resp.data[0])

    async def get(self, job_id: int) -> Optional[AnalysisJob]:
        resp = (
            await self.client.table(self.table)
            .select("*")
            .eq("id", job_id)
            .limit(1)
            .execute()
        )
        return AnalysisJob.model_validate(resp.data[0]) if resp.data else None

    async def get_by_url(self, url: str) -> Optional[AnalysisJob]:
        resp = (
            await self.client.table(self.table)
            .select("*")
            .eq("url", url)
            .order("id", desc=True)
            .limit(1)
            .execute()
        )
        return AnalysisJob.model_validate(resp.data[0]) if resp.data else None

    async def update(self, job: AnalysisJob) -> AnalysisJob:
        row = job.model_dump(mode="json", exclude={"id", "url", "created_at"})
        # Conditional on the stored row still being pending
        resp = (
            await self.client.table(self.table)
            .update(row)
            .eq("id", job.id)
            .eq("status", JobStatus.PENDING.value)
            .execute()
        )
        if resp.data:
            return AnalysisJob.model_validate(resp.data[0])

        existing = await self.get(job.id)
        if existing is None:
            raise JobNotFoundError(job.id)
        raise JobStateError(f"Analysis {job.id} is already {existing.status.value}")


async def create_job_store(backend: str, table: str = "analysis_results") -> JobStore:
    """Build the store selected by ``Settings.job_store_backend``."""
    if backend == "supabase":
        from company_analyzer.db.supabase import get_async_supabase_client

        logger.info(f"Using Supabase job store (table {table})")
        return SupabaseJobStore(await get_async_supabase_client(), table=table)
    return InMemoryJobStore()
