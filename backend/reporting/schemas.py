"""Pydantic request/response models for the analytics API.

The UI sends camelCase keys (``datasetId``, ``groupBy``, ``filterGroups``);
models accept those aliases as well as the snake_case field names and
convert to the semantic layer's dataclasses via ``to_ui_request``.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from reporting.semantic.query import (
    FilterGroup,
    UiFilter,
    UiPagination,
    UiQueryRequest,
    UiSort,
)


class UiFilterModel(BaseModel):
    """One filter condition on a business filter field."""

    field: str = Field(description="Filter id from the dataset schema", examples=["status"])
    operator: str = Field(default="equals", description="Operator token", examples=["in"])
    value: Any = Field(default=None, description="Scalar, list, or comma-separated string")

    def to_filter(self) -> UiFilter:
        return UiFilter(field=self.field, operator=self.operator, value=self.value)


class FilterGroupModel(BaseModel):
    """Filters combined with AND/OR logic."""

    logic: str = Field(default="and", description="'and' or 'or'")
    filters: List[UiFilterModel] = Field(default_factory=list)


class SortModel(BaseModel):
    by: str = Field(description="Measure or dimension id")
    direction: str = Field(default="asc", description="'asc' or 'desc'")


class PageModel(BaseModel):
    limit: int = Field(default=100, description="Rows to return (capped per dataset)")
    offset: int = Field(default=0, description="Rows to skip")


class AnalyticsQueryRequest(BaseModel):
    """Report request in business vocabulary."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "datasetId": "events",
                "kpis": ["event_count"],
                "groupBy": ["event_type"],
                "filters": [
                    {"field": "created_at", "operator": "inDateRange", "value": "2024-01-01,2024-01-31"}
                ],
                "page": {"limit": 100, "offset": 0},
            }
        },
    )

    dataset_id: str = Field(default="", alias="datasetId", description="Dataset id")
    kpis: List[str] = Field(default_factory=list, description="Measure ids")
    group_by: List[str] = Field(default_factory=list, alias="groupBy", description="Dimension ids")
    filters: List[UiFilterModel] = Field(default_factory=list)
    filter_groups: List[FilterGroupModel] = Field(default_factory=list, alias="filterGroups")
    sort: Optional[SortModel] = None
    page: PageModel = Field(default_factory=PageModel)

    def to_ui_request(self) -> UiQueryRequest:
        return UiQueryRequest(
            dataset_id=self.dataset_id,
            kpis=list(self.kpis),
            group_by=list(self.group_by),
            filters=[f.to_filter() for f in self.filters],
            filter_groups=[
                FilterGroup(logic=g.logic, filters=[f.to_filter() for f in g.filters])
                for g in self.filter_groups
            ],
            sort=UiSort(by=self.sort.by, direction=self.sort.direction) if self.sort else None,
            page=UiPagination(limit=self.page.limit, offset=self.page.offset),
        )


class ColumnMetadata(BaseModel):
    name: str
    label: str
    type: str


class QueryMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dataset: str
    row_count: int = Field(alias="rowCount")
    execution_time_ms: int = Field(alias="executionTimeMs")
    from_cache: bool = Field(default=False, alias="fromCache")


class AnalyticsQueryResponse(BaseModel):
    """Rows returned by Cube.js plus column and query metadata."""

    data: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[ColumnMetadata] = Field(default_factory=list)
    query: QueryMetadata


class DatasetSummary(BaseModel):
    id: str
    label: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status", examples=["healthy"])
    timestamp: datetime = Field(description="Server time (UTC)")
