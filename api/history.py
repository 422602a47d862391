"""
API Endpoints for Analysis History

Handles:
1. List the user's analyzed domains (optionally filtered by search)
2. Fetch the stored report for one history entry
3. Re-analyze a URL, reusing a report younger than the freshness window
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from src.auth.dependencies import get_current_user
from src.persistence import AnalysisCache, AnalysisStorage
from src.reporter import AnalysisValidationError

from api.dependencies import error_response, get_analysis_cache, get_storage, prepare_url

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/history",
    tags=["History"],
    dependencies=[Depends(get_current_user)],
)


class ReanalyzeRequest(BaseModel):
    url: Optional[Any] = None


@router.get("")
async def list_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user),
    storage: AnalysisStorage = Depends(get_storage),
):
    """User's analyzed domains, newest first."""
    if search:
        entries = await storage.search_domain_history(user_id, search)
    else:
        entries = await storage.get_user_domain_history(user_id, limit, offset)
    return {"domains": [e.to_dict() for e in entries]}


@router.post("/reanalyze")
async def reanalyze(
    request: ReanalyzeRequest,
    user_id: str = Depends(get_current_user),
    cache: AnalysisCache = Depends(get_analysis_cache),
):
    """Fresh analysis unless one younger than the freshness window exists."""
    url = prepare_url(request.url)
    if url is None:
        return error_response(400, "URL is required")

    try:
        result, cached = await cache.get_or_analyze(url, user_id)
    except AnalysisValidationError as e:
        logger.error(f"Reanalysis validation failed for {url}: {e}")
        return error_response(500, "Failed to re-analyze website", e.details)
    except Exception as e:
        logger.exception(f"Reanalysis error for {url}")
        return error_response(500, "Failed to re-analyze website", str(e))

    body = result.to_dict()
    body["cached"] = cached
    if cached:
        hours = int(cache.freshness.total_seconds() // 3600)
        body["message"] = f"Using recent analysis (less than {hours} hours old)"
    return body


@router.get("/{history_id}")
async def get_history_entry(
    history_id: str,
    user_id: str = Depends(get_current_user),
    storage: AnalysisStorage = Depends(get_storage),
):
    """Stored report for one of the user's history entries."""
    entry = await storage.get_history_entry(history_id)
    if entry is None:
        return error_response(404, "Analysis not found")
    if entry.user_id != user_id:
        return error_response(403, "Access denied")

    result = await storage.get_analysis_result_by_history_id(history_id)
    if result is None:
        return error_response(404, "Analysis data not found")
    return result.to_dict()
