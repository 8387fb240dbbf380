"""
Analytics Service
=================

Runs one report request end to end:

    registry lookup -> validate -> build TechnicalQuery -> Cube.js -> shape response

WHY THIS FILE EXISTS
--------------------
Routers should only translate HTTP in and out. The request flow (and the
timing measured around it) lives here so it can be tested without FastAPI.

RESPONSE SHAPE
--------------
    {
        "data": [ {<cube member>: <value>, ...}, ... ],
        "columns": [ {"name": "EventsView.count", "label": "Event Count",
                      "type": "number"}, ... ],
        "query": {"dataset": "events", "rowCount": 12,
                  "executionTimeMs": 41, "fromCache": false}
    }

RELATED FILES
-------------
- reporting/semantic/: Validation and translation
- reporting/services/cube_client.py: Query execution
- reporting/routers/analytics.py: HTTP surface
"""

import logging
import time
from typing import Any, Dict, List, Optional

from reporting.semantic.errors import ErrorCode, ValidationError
from reporting.semantic.identity import CallerIdentity
from reporting.semantic.model import DatasetDefinition
from reporting.semantic.query import UiQueryRequest
from reporting.semantic.query_builder import AnalyticsQueryBuilder
from reporting.semantic.registry import DatasetRegistry
from reporting.semantic.validator import QueryValidator
from reporting.services.cube_client import CubeClient

logger = logging.getLogger(__name__)


def extract_columns(rows: List[Dict[str, Any]], dataset: DatasetDefinition) -> List[Dict[str, str]]:
    """
    Column metadata from the keys of the first row.

    Label and type come from the measure with that cube member, then the
    dimension; unknown members fall back to (member, "string").
    """
    if not rows or not isinstance(rows[0], dict):
        return []

    columns = []
    for member in rows[0].keys():
        metadata = dataset.find_member_metadata(member)
        label, kind = metadata if metadata is not None else (member, "string")
        columns.append({"name": member, "label": label, "type": kind})
    return columns


def build_response(rows: Any, dataset: DatasetDefinition, elapsed_ms: int) -> Dict[str, Any]:
    """
    Shape Cube.js rows into the analytics API response.

    PARAMETERS:
        rows: ``data`` returned by CubeClient.load (anything but a list yields
              an empty result)
        dataset: Dataset the query ran against
        elapsed_ms: Wall time of the whole request

    RETURNS:
        {"data", "columns", "query": {"dataset", "rowCount", "executionTimeMs", "fromCache"}}
    """
    data = list(rows) if isinstance(rows, list) else []
    return {
        "data": data,
        "columns": extract_columns(data, dataset),
        "query": {
            "dataset": dataset.id,
            "rowCount": len(data),
            "executionTimeMs": elapsed_ms,
            "fromCache": False,
        },
    }


class AnalyticsService:
    """
    Request flow for analytics queries.

    USAGE:
        service = AnalyticsService(registry, cube_client)
        response = await service.run_query(request, identity)
    """

    def __init__(
        self,
        registry: DatasetRegistry,
        cube_client: CubeClient,
        validator: Optional[QueryValidator] = None,
        builder: Optional[AnalyticsQueryBuilder] = None,
    ):
        self.registry = registry
        self.cube_client = cube_client
        self.validator = validator or QueryValidator()
        self.builder = builder or AnalyticsQueryBuilder()

    def get_dataset(self, dataset_id: str) -> DatasetDefinition:
        """Registry lookup that raises DATASET_NOT_FOUND instead of returning None."""
        dataset = self.registry.get(dataset_id)
        if dataset is None:
            raise ValidationError(
                ErrorCode.DATASET_NOT_FOUND,
                f"Dataset '{dataset_id}' not found",
                field="datasetId",
            )
        return dataset

    async def run_query(
        self, request: UiQueryRequest, identity: Optional[CallerIdentity] = None
    ) -> Dict[str, Any]:
        """
        Validate, translate and execute one request.

        RAISES:
            ValidationError: Request rejected (nothing is sent to Cube.js)
            CubeAPIError: Cube.js failed
        """
        started = time.perf_counter()
        logger.info("[ANALYTICS] Query for dataset: %s", request.dataset_id)

        dataset = self.registry.get(request.dataset_id)
        self.validator.validate(request, dataset)

        query = self.builder.build(request, dataset, identity)
        rows = await self.cube_client.load(query)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response = build_response(rows, dataset, elapsed_ms)
        logger.info(
            "[ANALYTICS] Dataset %s returned %d rows in %dms",
            dataset.id, response["query"]["rowCount"], elapsed_ms,
        )
        return response

    def list_datasets(self) -> List[Dict[str, str]]:
        return [{"id": d.id, "label": d.label} for d in self.registry.list_all()]

    def describe(self, dataset_id: str) -> Dict[str, Any]:
        return self.get_dataset(dataset_id).describe()

    async def meta(self) -> Any:
        return await self.cube_client.meta()
