"""
API Endpoint for AI Visibility Analysis

FastAPI app that:
1. Accepts a URL (anonymous or authenticated)
2. Returns a recent cached report for authenticated users
3. Otherwise runs the visibility pipeline and stores the result
4. Mounts the per-user history routes
"""

import logging
import sys
from datetime import datetime
from typing import Any, Optional

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from src.auth.dependencies import get_current_user_optional
from src.database import check_db_connection, init_db
from src.integrations import ExternalAPIConfig
from src.persistence import AnalysisCache
from src.reporter import AnalysisValidationError
from src.utils.config import get_settings

from api.dependencies import error_response, get_analysis_cache, get_analyzer, prepare_url
from api.history import router as history_router

VERSION = "0.1.0"

# Configure logging to stdout
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="AI Visibility Analyzer",
    description="Generative engine visibility reports powered by Claude, Perplexity and Tracxn",
    version=VERSION,
)
app.include_router(history_router)


# ============================================================================
# LIFECYCLE - Database setup and client shutdown
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    if get_settings().STORAGE_BACKEND.lower() == "memory":
        return

    logger.info("Initializing database...")
    try:
        init_db()
        if check_db_connection():
            logger.info("Database connection verified")
        else:
            logger.warning("Database connection check failed - continuing anyway")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the shared analyzer's HTTP clients, if one was created."""
    if get_analyzer.cache_info().currsize:
        await get_analyzer().close()
        get_analyzer.cache_clear()
        logger.info("Analyzer clients closed")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze; ``url`` is checked by hand for a 400."""
    url: Optional[Any] = None


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "AI Visibility Analyzer"}


@app.get("/api/health")
async def health():
    """Detailed health check including integrations and database status."""
    settings = get_settings()
    external = ExternalAPIConfig()

    database = "disabled"
    if settings.STORAGE_BACKEND.lower() != "memory":
        database = "connected" if check_db_connection() else "disconnected"

    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": VERSION,
        "database": database,
        "integrations": {
            "claude": bool(settings.ANTHROPIC_API_KEY),
            "perplexity": external.has_perplexity,
            "tracxn": external.has_tracxn,
        },
    }


@app.post("/api/analyze")
async def analyze(
    request: AnalyzeRequest,
    user_id: Optional[str] = Depends(get_current_user_optional),
    cache: AnalysisCache = Depends(get_analysis_cache),
):
    """
    Analyze a website's AI visibility.

    Authenticated callers get a stored report when one for the same site is
    younger than the freshness window.
    """
    url = prepare_url(request.url)
    if url is None:
        return error_response(400, "URL is required")

    try:
        result, cached = await cache.get_or_analyze(url, user_id)
    except AnalysisValidationError as e:
        logger.error(f"Analysis validation failed for {url}: {e}")
        return error_response(500, "Failed to analyze website", e.details)
    except Exception as e:
        logger.exception(f"Analysis error for {url}")
        return error_response(500, "Failed to analyze website", str(e))

    if cached:
        logger.info(f"Served cached analysis for {url}")
    return result.to_dict()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.analyze:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
