# =============================================================================
# app/routers/analysis.py - Business Analysis Endpoint
# =============================================================================
# POST /api/analyze-business - build a draft profile from a website and
#                              store it as a new business (status "setup")
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import BusinessAnalyzerDep, BusinessStoreDep
from app.exceptions import (
    ErrorKind,
    MissingFieldsError,
    RentalPlatformException,
    UpstreamServiceError,
)
from core.models.analysis import AnalyzeBusinessRequest
from core.services.analysis_service import AnalysisError
from lib.utils import ApplicationError, generate_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze-business")
def analyze_business(
    request: AnalyzeBusinessRequest,
    analyzer: BusinessAnalyzerDep,
    store: BusinessStoreDep,
):
    """
    Analyze a business website and onboard it.

    Uses AI extraction when configured, keyword heuristics otherwise. The
    resulting profile is stored and returned with its new `id`.
    """
    if not request.website_url:
        raise MissingFieldsError("Website URL is required", fields=["websiteUrl"])

    try:
        profile = analyzer.analyze(request.website_url, logo_url=request.logo_url)
    except AnalysisError as e:
        if e.code == "INVALID_URL":
            raise RentalPlatformException(
                e.message,
                kind=ErrorKind.VALIDATION_ERROR,
                status_code=400,
            )
        raise UpstreamServiceError("Analysis failed", cause=e)

    try:
        profile["id"] = store.insert(profile)
        logger.info(f"Business stored with ID: {profile['id']}")
    except ApplicationError as e:
        # The draft is still useful to the onboarding flow without persistence
        profile["id"] = generate_id("biz")
        logger.error(f"Failed to store business, using temporary ID {profile['id']}: {e}")

    return {"success": True, "data": profile}
