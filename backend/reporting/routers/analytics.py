"""
Analytics Router
================

WHAT:
    HTTP surface of the semantic layer.

    POST /api/analytics/v1/query                Run a report
    GET  /api/analytics/v1/schema/{dataset_id}  Dataset schema for report UIs
    GET  /api/analytics/v1/datasets             Registered datasets
    GET  /api/analytics/v1/meta                 Raw Cube.js metadata

WHY:
    Routers only convert HTTP in and out. Validation, translation and
    execution live in AnalyticsService and the semantic package.

ERROR MAPPING:
    ValidationError DATASET_NOT_FOUND  -> 404
    ValidationError (any other code)   -> 400
    CubeAPIError                       -> 502
    Invalid bearer token               -> 401 (see deps.get_caller_identity)

REFERENCES:
    - reporting/services/analytics_service.py
    - reporting/semantic/errors.py
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from reporting.deps import get_analytics_service, get_caller_identity
from reporting.schemas import AnalyticsQueryRequest, AnalyticsQueryResponse, DatasetSummary
from reporting.semantic.errors import ErrorCode, ValidationError
from reporting.semantic.identity import CallerIdentity
from reporting.services.analytics_service import AnalyticsService
from reporting.services.cube_client import CubeAPIError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics/v1", tags=["analytics"])


def _validation_http_error(error: ValidationError) -> HTTPException:
    code = (
        status.HTTP_404_NOT_FOUND
        if error.code is ErrorCode.DATASET_NOT_FOUND
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=code, detail=error.to_dict())


def _cube_http_error(error: CubeAPIError) -> HTTPException:
    detail: Dict[str, Any] = {"message": str(error)}
    if error.status_code is not None:
        detail["upstream_status"] = error.status_code
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.post("/query", response_model=AnalyticsQueryResponse)
async def execute_query(
    body: AnalyticsQueryRequest,
    service: AnalyticsService = Depends(get_analytics_service),
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
):
    """
    Run a report.

    Flow: registry lookup -> validation -> translation -> Cube.js -> response shaping.
    """
    try:
        return await service.run_query(body.to_ui_request(), identity)
    except ValidationError as e:
        raise _validation_http_error(e)
    except CubeAPIError as e:
        logger.error("[ANALYTICS] Cube.js failed for dataset %s: %s", body.dataset_id, e)
        raise _cube_http_error(e)


@router.get("/schema/{dataset_id}")
def get_schema(
    dataset_id: str,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """Measures (hidden ones excluded), dimensions and filters of a dataset."""
    try:
        return service.describe(dataset_id)
    except ValidationError as e:
        raise _validation_http_error(e)


@router.get("/datasets", response_model=List[DatasetSummary])
def list_datasets(service: AnalyticsService = Depends(get_analytics_service)):
    return service.list_datasets()


@router.get("/meta")
async def get_cube_meta(service: AnalyticsService = Depends(get_analytics_service)):
    """Raw Cube.js metadata, passed through unchanged."""
    try:
        return await service.meta()
    except CubeAPIError as e:
        logger.error("[ANALYTICS] Cube.js metadata request failed: %s", e)
        raise _cube_http_error(e)
