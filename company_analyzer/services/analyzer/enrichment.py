"""LinkedIn enrichment providers.

Real LinkedIn scraping is out of scope: the default provider always
returns ``None``. A real integration can be injected into the
orchestrator as long as it also returns ``None`` when it has nothing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from company_analyzer.models.analysis import LinkedinData

logger = logging.getLogger(__name__)


class LinkedinEnrichmentProvider(ABC):
    """Turns a discovered LinkedIn company URL into ``LinkedinData``."""

    @abstractmethod
    async def enrich(self, linkedin_url: Optional[str]) -> Optional[LinkedinData]:
        """Return LinkedIn data, or ``None`` when unavailable."""


class NullLinkedinProvider(LinkedinEnrichmentProvider):
    """No-op provider; LinkedIn data is always absent."""

    async def enrich(self, linkedin_url: Optional[str]) -> Optional[LinkedinData]:
        if linkedin_url:
            logger.debug(f"LinkedIn enrichment skipped for {linkedin_url}")
        return None
