"""
Analytics Query Contracts
=========================

**Version**: 1.0.0
**Status**: Active

The two data contracts the semantic layer sits between:

    UiQueryRequest  ->  (validator, query builder)  ->  TechnicalQuery

WHY THIS FILE EXISTS
--------------------
The UI speaks business vocabulary (``kpis=["event_count"]``,
``groupBy=["event_type"]``), Cube.js speaks technical vocabulary
(``measures=["EventsView.count"]``). Both shapes are defined here so the
validator, the strategies and the HTTP layer agree on them.

Request objects are created per request and discarded after translation.
They own no long-lived state.

UI REQUEST SHAPE
----------------
    {
        "datasetId": "events",
        "kpis": ["event_count"],
        "groupBy": ["event_type"],
        "filters": [{"field": "created_at", "operator": "inDateRange",
                     "value": "2024-01-01,2024-01-31"}],
        "filterGroups": [{"logic": "or", "filters": [...]}],
        "sort": {"by": "event_count", "direction": "desc"},
        "page": {"limit": 100, "offset": 0}
    }

TECHNICAL QUERY SHAPE
---------------------
    {
        "dataset": "events",
        "measures": ["EventsView.count"],
        "dimensions": ["EventsView.eventType"],
        "timeDimensions": [{"dimension": "EventsView.createdAt",
                            "dateRange": ["2024-01-01", "2024-01-31"],
                            "granularity": None}],
        "filters": [{"member": ..., "operator": ..., "values": [...]}
                    | {"and": [...]} | {"or": [...]}],
        "order": {"EventsView.count": "desc"} | None,
        "limit": 100,
        "offset": 0
    }

RELATED FILES
-------------
- reporting/semantic/validator.py: Validates UiQueryRequest
- reporting/semantic/query_builder.py: Produces TechnicalQuery
- reporting/services/cube_client.py: Sends TechnicalQuery to Cube.js
- reporting/schemas.py: Pydantic request body mirroring UiQueryRequest
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


# =============================================================================
# UI REQUEST (business vocabulary)
# =============================================================================

@dataclass
class UiFilter:
    """
    One simple filter condition on a business filter field.

    PARAMETERS:
        field: Filter id from the dataset (e.g. "status")
        operator: UI operator token (e.g. "equals", "in", "inDateRange")
        value: Scalar, list of scalars, or comma-separated string
    """
    field: str
    operator: str = "equals"
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UiFilter":
        return cls(
            field=data.get("field", ""),
            operator=data.get("operator") or "equals",
            value=data.get("value"),
        )


@dataclass
class FilterGroup:
    """
    Filters combined with one logic token ("and" / "or").

    The token is validated, not coerced: anything other than and/or
    (case-insensitive) is rejected by the validator.
    """
    logic: str = "and"
    filters: List[UiFilter] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"logic": self.logic, "filters": [f.to_dict() for f in self.filters]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterGroup":
        return cls(
            logic=data.get("logic", "and"),
            filters=[UiFilter.from_dict(f) for f in data.get("filters") or []],
        )


@dataclass
class UiSort:
    """Sort by a measure or dimension id."""
    by: str
    direction: str = "asc"

    def to_dict(self) -> Dict[str, Any]:
        return {"by": self.by, "direction": self.direction}


@dataclass
class UiPagination:
    """Requested page. Capped later by the dataset's security policy."""
    limit: int = 100
    offset: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"limit": self.limit, "offset": self.offset}


@dataclass
class UiQueryRequest:
    """
    A report request in business vocabulary.

    WHAT: Everything the UI sends to run a report.

    WHY: Validated against a DatasetDefinition first, then translated by the
         query builder. Unknown ids never reach Cube.js.

    EXAMPLE:
        request = UiQueryRequest(
            dataset_id="events",
            kpis=["event_count"],
            group_by=["event_type"],
            filters=[UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-31")],
        )
    """
    dataset_id: str
    kpis: List[str] = field(default_factory=list)
    group_by: List[str] = field(default_factory=list)
    filters: List[UiFilter] = field(default_factory=list)
    filter_groups: List[FilterGroup] = field(default_factory=list)
    sort: Optional[UiSort] = None
    page: UiPagination = field(default_factory=UiPagination)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the UI's camelCase keys."""
        result: Dict[str, Any] = {
            "datasetId": self.dataset_id,
            "kpis": list(self.kpis),
            "groupBy": list(self.group_by),
            "filters": [f.to_dict() for f in self.filters],
            "filterGroups": [g.to_dict() for g in self.filter_groups],
            "page": self.page.to_dict(),
        }
        if self.sort:
            result["sort"] = self.sort.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UiQueryRequest":
        """
        Build a request from a JSON-like dict.

        Accepts the UI's camelCase keys (``datasetId``, ``groupBy``,
        ``filterGroups``) and their snake_case equivalents. Missing
        collections default to empty, a missing page to limit=100/offset=0.
        """
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        sort = None
        sort_data = data.get("sort")
        if sort_data:
            sort = UiSort(by=sort_data.get("by", ""), direction=sort_data.get("direction") or "asc")

        page_data = data.get("page") or {}
        page = UiPagination(
            limit=page_data.get("limit", 100),
            offset=page_data.get("offset", 0),
        )

        return cls(
            dataset_id=pick("datasetId", "dataset_id", "") or "",
            kpis=list(data.get("kpis") or []),
            group_by=list(pick("groupBy", "group_by") or []),
            filters=[UiFilter.from_dict(f) for f in data.get("filters") or []],
            filter_groups=[FilterGroup.from_dict(g) for g in pick("filterGroups", "filter_groups") or []],
            sort=sort,
            page=page,
        )


# =============================================================================
# TECHNICAL QUERY (Cube.js vocabulary)
# =============================================================================

@dataclass
class TimeDimension:
    """
    A Cube.js time dimension entry.

    ``date_range`` is either a relative expression ("last 90 days") or a
    two-element [start, end] list. Granularity is left unset: the core never
    buckets time, it only bounds it.
    """
    dimension: str
    date_range: Any = None
    granularity: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "dateRange": self.date_range,
            "granularity": self.granularity,
        }

    def to_cube(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"dimension": self.dimension}
        if self.date_range is not None:
            payload["dateRange"] = self.date_range
        if self.granularity is not None:
            payload["granularity"] = self.granularity
        return payload


@dataclass
class CubeFilter:
    """A plain member filter: ``{member, operator, values}``."""
    member: str
    operator: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"member": self.member, "operator": self.operator, "values": list(self.values)}

    def to_cube(self) -> Dict[str, Any]:
        return self.to_dict()


@dataclass
class CompositeFilter:
    """
    A boolean group of filters: ``{"and": [...]}`` or ``{"or": [...]}``.

    ``logic`` is always the lowercase token.
    """
    logic: str
    filters: List[CubeFilter] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {self.logic: [f.to_dict() for f in self.filters]}

    def to_cube(self) -> Dict[str, Any]:
        return {self.logic: [f.to_cube() for f in self.filters]}


TechnicalFilter = Union[CubeFilter, CompositeFilter]


@dataclass
class TechnicalQuery:
    """
    The query sent to Cube.js.

    WHAT: Output of AnalyticsQueryBuilder.build().

    WHY: ``dataset`` is kept for logging and response shaping only; it is not
         part of the Cube.js payload (see ``to_cube_query``).
    """
    dataset: str
    measures: List[str] = field(default_factory=list)
    dimensions: List[str] = field(default_factory=list)
    time_dimensions: List[TimeDimension] = field(default_factory=list)
    filters: List[TechnicalFilter] = field(default_factory=list)
    order: Optional[Dict[str, str]] = None
    limit: int = 100
    offset: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Full representation, including ``dataset`` and null fields."""
        return {
            "dataset": self.dataset,
            "measures": list(self.measures),
            "dimensions": list(self.dimensions),
            "timeDimensions": [td.to_dict() for td in self.time_dimensions],
            "filters": [f.to_dict() for f in self.filters],
            "order": dict(self.order) if self.order is not None else None,
            "limit": self.limit,
            "offset": self.offset,
        }

    def to_cube_query(self) -> Dict[str, Any]:
        """
        Payload for ``/cubejs-api/v1/load``.

        RULES:
            - camelCase keys
            - no ``dataset`` key
            - null ``order`` and null ``granularity`` are omitted
        """
        payload: Dict[str, Any] = {
            "measures": list(self.measures),
            "dimensions": list(self.dimensions),
            "timeDimensions": [td.to_cube() for td in self.time_dimensions],
            "filters": [f.to_cube() for f in self.filters],
            "limit": self.limit,
            "offset": self.offset,
        }
        if self.order is not None:
            payload["order"] = dict(self.order)
        return payload
