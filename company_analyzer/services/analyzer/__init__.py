"""Website analyzer package: fetch, extract, summarize, track jobs.

Re-exports the public API so consumers can use::

    from company_analyzer.services.analyzer import AnalysisOrchestrator, get_orchestrator
"""

from company_analyzer.services.analyzer.orchestrator import (
    AnalysisOrchestrator,
    get_orchestrator,
    reset_orchestrator,
)

__all__ = [
    "AnalysisOrchestrator",
    "get_orchestrator",
    "reset_orchestrator",
]
