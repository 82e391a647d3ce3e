"""Upstream connectivity check."""

from fastapi import APIRouter

from verdict.controllers.dependencies import AnalysisServiceDep
from verdict.views import ApiStatusResponse

router = APIRouter(tags=["status"])


@router.get("/status", response_model=ApiStatusResponse)
async def get_api_status(analysis: AnalysisServiceDep) -> ApiStatusResponse:
    """Report whether the text-generation API accepts our key and has quota."""

    result = await analysis.check_api_status()
    return ApiStatusResponse(has_access=result.has_access, message=result.message)
