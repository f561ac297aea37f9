"""Orchestrator for website analysis jobs.

Coordinates fetch → extract → enrich → store for one job at a time, and
turns that otherwise-synchronous crawl into a pollable job by running it as
a detached ``asyncio`` task.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin

from company_analyzer.config import get_settings
from company_analyzer.models.analysis import AnalysisJob, JobStatus, WebsiteData
from company_analyzer.services.analyzer.constants import (
    CANDIDATE_PATHS,
    HOMEPAGE_TIMEOUT_SECONDS,
    SUBPAGE_TIMEOUT_SECONDS,
    SUBSTANTIAL_CONTENT_THRESHOLD,
)
from company_analyzer.services.analyzer.document import DocumentView
from company_analyzer.services.analyzer.enrichment import (
    LinkedinEnrichmentProvider,
    NullLinkedinProvider,
)
from company_analyzer.services.analyzer.errors import (
    FetchError,
    JobNotFoundError,
    JobStateError,
)
from company_analyzer.services.analyzer.extractors import (
    extract_about,
    extract_contact,
    extract_home,
    extract_products,
    extract_services,
    extract_social_links,
)
from company_analyzer.services.analyzer.job_store import (
    JobStore,
    complete_job,
    create_job_store,
    fail_job,
)
from company_analyzer.services.analyzer.page_fetcher import (
    PageFetcher,
    create_page_fetcher,
)
from company_analyzer.services.analyzer.summarizer import Summarizer

logger = logging.getLogger(__name__)

# Singleton state
_orchestrator: Optional["AnalysisOrchestrator"] = None
_lock = asyncio.Lock()


class AnalysisOrchestrator:
    """Runs website analyses and records their outcome in the job store."""

    def __init__(
        self,
        store: JobStore,
        fetcher: PageFetcher,
        summarizer: Summarizer,
        *,
        linkedin_provider: Optional[LinkedinEnrichmentProvider] = None,
        candidate_paths: tuple[str, ...] = CANDIDATE_PATHS,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.linkedin_provider = linkedin_provider or NullLinkedinProvider()
        self.candidate_paths = candidate_paths
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Job lifecycle
    # ------------------------------------------------------------------

    async def submit(self, url: str) -> AnalysisJob:
        """Start (or reuse) an analysis of *url* and return immediately.

        A completed job for the same URL is returned unchanged. Otherwise a
        new pending job is created and the pipeline runs in the background.
        """
        existing = await self.store.get_by_url(url)
        if existing is not None and existing.status is JobStatus.COMPLETED:
            logger.info(f"Reusing completed analysis {existing.id} for {url}")
            return existing

        job = await self.store.create(url)
        logger.info(f"Created analysis {job.id} for {url}")

        task = asyncio.create_task(self.run(job), name=f"analysis-{job.id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job

    async def get(self, job_id: int) -> AnalysisJob:
        job = await self.store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    async def run(self, job: AnalysisJob) -> AnalysisJob:
        """Run the pipeline for *job* and write its terminal state.

        Never raises: every failure is recorded on the job instead.
        """
        try:
            website_data = await self.crawl_website(job.url)
            social = website_data.social_media
            linkedin_data = await self.linkedin_provider.enrich(
                social.linkedin_url if social else None
            )
            final = complete_job(job, website_data, linkedin_data)
        except FetchError as e:
            logger.error(f"Analysis {job.id} failed fetching homepage: {e}")
            final = fail_job(job, str(e))
        except Exception as e:
            logger.exception(f"Analysis {job.id} failed: {e}")
            final = fail_job(job, str(e) or e.__class__.__name__)

        try:
            final = await self.store.update(final)
        except (JobNotFoundError, JobStateError) as e:
            logger.error(f"Could not record result of analysis {job.id}: {e}")
            return final
        except Exception as e:
            logger.exception(f"Job store failed recording analysis {job.id}: {e}")
            return final

        logger.info(f"Analysis {job.id} {final.status.value}")
        return final

    @property
    def in_flight(self) -> int:
        """Number of background analyses still running."""
        return len(self._tasks)

    async def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait for all background analyses to finish.

        Tasks still running after *timeout* seconds are left running, not
        cancelled. Returns ``True`` when nothing is in flight anymore.
        """
        if not self._tasks:
            return True
        _, pending = await asyncio.wait(list(self._tasks), timeout=timeout)
        return not pending

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def crawl_website(self, url: str) -> WebsiteData:
        """Crawl the homepage and candidate subpages of *url*.

        Raises:
            FetchError: The homepage could not be fetched.
        """
        html = await self.fetcher.fetch(url, HOMEPAGE_TIMEOUT_SECONDS)
        home_view = DocumentView(html)
        home = await extract_home(home_view, self.summarizer)
        data = WebsiteData(home=home, social_media=extract_social_links(home_view))
        title_hint = home.page_title
        logger.info(f"Crawled homepage {url}: {len(home_view.body_text())} chars")

        for path in self.candidate_paths:
            page_url = urljoin(url, path)
            try:
                page_html = await self.fetcher.fetch(page_url, SUBPAGE_TIMEOUT_SECONDS)
            except FetchError as e:
                logger.info(f"Skipping {page_url}: {e}")
                continue

            view = DocumentView(page_html)
            if len(view.analysis_text) <= SUBSTANTIAL_CONTENT_THRESHOLD:
                logger.info(f"Skipping {page_url}: not enough content")
                continue

            if "about" in path:
                data.about = await extract_about(view, self.summarizer, title_hint)
            elif "services" in path:
                data.services = await extract_services(view, self.summarizer, title_hint)
            elif "products" in path:
                data.products = await extract_products(view, self.summarizer, title_hint)
            elif "contact" in path:
                data.contact = extract_contact(view, page_url)
            logger.info(f"Crawled {page_url}")

        return data

    async def aclose(self) -> None:
        await self.fetcher.aclose()


# =====================================================================
# Singleton factory (guarded by asyncio.Lock)
# =====================================================================


async def get_orchestrator() -> AnalysisOrchestrator:
    """Get or create the singleton ``AnalysisOrchestrator``."""
    global _orchestrator
    if _orchestrator is not None:
        return _orchestrator

    async with _lock:
        # Double-checked locking
        if _orchestrator is not None:
            return _orchestrator

        settings = get_settings()
        if not settings.summarizer_api_key:
            logger.warning("No summarization API key configured; summaries degraded")

        _orchestrator = AnalysisOrchestrator(
            store=await create_job_store(
                settings.job_store_backend, settings.supabase_table
            ),
            fetcher=create_page_fetcher(settings.fetch_mode),
            summarizer=Summarizer.from_api_key(
                settings.summarizer_api_key, settings.claude_model
            ),
        )

    return _orchestrator


def reset_orchestrator() -> None:
    """Reset orchestrator for testing."""
    global _orchestrator
    _orchestrator = None
