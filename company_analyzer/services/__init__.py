from company_analyzer.services.analyzer import (
    AnalysisOrchestrator,
    get_orchestrator,
    reset_orchestrator,
)

__all__ = [
    # Analysis orchestrator
    "AnalysisOrchestrator",
    "get_orchestrator",
    "reset_orchestrator",
]
