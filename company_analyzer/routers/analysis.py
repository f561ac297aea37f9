"""Website analysis API router."""

from fastapi import APIRouter, Depends, HTTPException

from company_analyzer.models.analysis import AnalysisJob, AnalyzeRequest
from company_analyzer.services.analyzer import AnalysisOrchestrator, get_orchestrator
from company_analyzer.services.analyzer.errors import JobNotFoundError

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/analyze", response_model=AnalysisJob)
async def analyze(
    request: AnalyzeRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> AnalysisJob:
    """
    Submit a company website for analysis.

    Returns immediately with the job record. A previously completed
    analysis of the same URL is returned as-is; otherwise the job is
    ``pending`` and should be polled via ``GET /api/analysis/{id}``.
    """
    return await orchestrator.submit(request.url)


@router.get("/analysis/{analysis_id}", response_model=AnalysisJob)
async def get_analysis(
    analysis_id: int,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> AnalysisJob:
    """Return the current state of an analysis job."""
    try:
        return await orchestrator.get(analysis_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
