"""Company Analyzer - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from company_analyzer.config import get_settings
from company_analyzer.routers import analysis
from company_analyzer.services.analyzer import get_orchestrator, reset_orchestrator
from company_analyzer.services.analyzer.constants import SHUTDOWN_GRACE_SECONDS

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    logger.info("Starting Company Analyzer...")

    try:
        await get_orchestrator()
        logger.info("Analysis orchestrator initialized")
    except Exception as e:
        logger.warning(f"Orchestrator initialization failed: {e}")

    yield

    logger.info("Shutting down Company Analyzer...")
    try:
        orchestrator = await get_orchestrator()
        if orchestrator.in_flight:
            logger.info(f"Waiting for {orchestrator.in_flight} analyses to finish")
            if not await orchestrator.wait_idle(timeout=SHUTDOWN_GRACE_SECONDS):
                logger.warning(
                    f"{orchestrator.in_flight} analyses still running at shutdown"
                )
        await orchestrator.aclose()
    except Exception as e:
        logger.warning(f"Error closing orchestrator: {e}")
    reset_orchestrator()

    logger.info("Company Analyzer shutdown complete")


app = FastAPI(
    title="Company Analyzer",
    description="Crawls a company website and extracts structured business information",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed requests are 400s, not FastAPI's default 422."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


# Include routers
app.include_router(analysis.router)


@app.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint for monitoring.

    Reports whether page summaries are live or running in degraded mode,
    and which fetcher and job store backends are configured.
    """
    current = get_settings()
    health = {
        "status": "healthy",
        "services": {
            "summarizer": {
                "status": "healthy" if current.summarizer_api_key else "degraded",
                "model": current.claude_model,
            },
            "fetcher": {"mode": current.fetch_mode},
            "job_store": {"backend": current.job_store_backend},
        },
    }
    if not current.summarizer_api_key:
        health["status"] = "degraded"
    return health
