"""
Query Validator
===============

**Version**: 1.0.0
**Status**: Active

Rejects UI requests that reference anything the target dataset does not
expose, or that break the dataset's security limits.

WHY THIS FILE EXISTS
--------------------
Translation is defensive: an unknown id slipping into the query builder is
silently dropped. That keeps translation total, but it means a typo in a
saved report would quietly produce a different report. This validator is
the one auditable place where requests are rejected with a precise reason,
before anything is translated.

CHECK ORDER (fail fast, first violation wins)
---------------------------------------------
    1. Dataset resolved              -> DATASET_NOT_FOUND
    2. KPI ids exist                 -> UNKNOWN_MEASURE
    3. Dimension ids exist           -> UNKNOWN_DIMENSION
    4. Filters: field, operator      -> UNKNOWN_FILTER_FIELD / OPERATOR_NOT_ALLOWED
       Time filters: range span      -> DATE_RANGE_EXCEEDED
    5. Filter groups: logic, then    -> INVALID_GROUP_LOGIC
       each member's field/operator  -> UNKNOWN_FILTER_FIELD / OPERATOR_NOT_ALLOWED
    6. Pagination                    -> INVALID_PAGINATION / LIMIT_EXCEEDED
    7. Sort                          -> INVALID_SORT

RELATED FILES
-------------
- reporting/semantic/errors.py: ValidationError, ErrorCode
- reporting/semantic/model.py: DatasetDefinition being validated against
- reporting/semantic/query_builder.py: Runs after validation succeeds
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple

from reporting.semantic.errors import ErrorCode, ValidationError
from reporting.semantic.model import DatasetDefinition
from reporting.semantic.query import UiFilter, UiPagination, UiQueryRequest, UiSort

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")
GROUP_LOGICS = ("and", "or")


# =============================================================================
# DATE RANGE PARSING
# =============================================================================

def _parse_date(value: Any) -> Optional[datetime]:
    """
    Parse one ISO-8601 date or datetime. Aware values become naive UTC.

    Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date_range(value: Any) -> Optional[Tuple[datetime, datetime]]:
    """
    Interpret a filter value as a bounded [start, end] range.

    ACCEPTS:
        - A list/tuple of exactly two parseable dates
        - A comma-separated string; only the first two parts are used

    RETURNS:
        (start, end), or None when the value is not a bounded range
        (relative expressions like "last 30 days", single dates, garbage).

    EXAMPLES:
        >>> parse_date_range("2024-01-01,2024-01-05")
        (datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 5, 0, 0))
        >>> parse_date_range("last 30 days") is None
        True
    """
    if isinstance(value, str):
        if "," not in value:
            return None
        parts = value.split(",")[:2]
    elif isinstance(value, (list, tuple)):
        if len(value) != 2:
            return None
        parts = list(value)
    else:
        return None

    start = _parse_date(parts[0])
    end = _parse_date(parts[1])
    if start is None or end is None:
        return None
    return start, end


# =============================================================================
# VALIDATOR
# =============================================================================

class QueryValidator:
    """
    Validates a UiQueryRequest against a DatasetDefinition.

    WHAT: Raises ValidationError on the first violated rule, returns None
          otherwise.

    WHY: One violation per call is enough for the UI to show a precise
         message; aggregating errors is not needed.

    USAGE:
        validator = QueryValidator()
        dataset = registry.get(request.dataset_id)
        validator.validate(request, dataset)   # raises ValidationError
        query = builder.build(request, dataset, identity)
    """

    def validate(self, request: UiQueryRequest, dataset: Optional[DatasetDefinition]) -> None:
        """
        Run every check in order.

        PARAMETERS:
            request: The UI request
            dataset: Result of registry.get(request.dataset_id), may be None

        RAISES:
            ValidationError: First violation found
        """
        try:
            self._validate_dataset(request.dataset_id, dataset)
            self._validate_kpis(request.kpis, dataset)
            self._validate_dimensions(request.group_by, dataset)
            self._validate_filters(request.filters, dataset)
            self._validate_filter_groups(request, dataset)
            self._validate_pagination(request.page, dataset)
            self._validate_sort(request.sort, dataset)
        except ValidationError as e:
            logger.warning(
                "[VALIDATOR] Rejected query for dataset '%s': %s %s",
                request.dataset_id, e.code.value, e.message,
            )
            raise

        logger.debug("[VALIDATOR] Query for dataset '%s' passed validation", dataset.id)

    # -------------------------------------------------------------------------
    # Individual checks
    # -------------------------------------------------------------------------

    def _validate_dataset(self, dataset_id: str, dataset: Optional[DatasetDefinition]) -> None:
        if not dataset_id or not dataset_id.strip():
            raise ValidationError(
                ErrorCode.DATASET_NOT_FOUND,
                "Dataset ID is required",
                field="datasetId",
            )
        if dataset is None:
            raise ValidationError(
                ErrorCode.DATASET_NOT_FOUND,
                f"Dataset '{dataset_id}' not found",
                field="datasetId",
                details={"dataset_id": dataset_id},
            )

    def _validate_kpis(self, kpi_ids: List[str], dataset: DatasetDefinition) -> None:
        for kpi_id in kpi_ids:
            if kpi_id not in dataset.measures:
                raise ValidationError(
                    ErrorCode.UNKNOWN_MEASURE,
                    f"KPI '{kpi_id}' is not allowed for dataset '{dataset.id}'",
                    field="kpis",
                    details={"value": kpi_id},
                )

    def _validate_dimensions(self, dimension_ids: List[str], dataset: DatasetDefinition) -> None:
        for dimension_id in dimension_ids:
            if dimension_id not in dataset.dimensions:
                raise ValidationError(
                    ErrorCode.UNKNOWN_DIMENSION,
                    f"Dimension '{dimension_id}' is not allowed for dataset '{dataset.id}'",
                    field="groupBy",
                    details={"value": dimension_id},
                )

    def _validate_filters(self, filters: List[UiFilter], dataset: DatasetDefinition) -> None:
        for ui_filter in filters:
            filter_def = self._check_filter_field(ui_filter, dataset)

            if filter_def.is_time and dataset.security is not None:
                max_days = dataset.security.max_date_range_days
                if max_days is not None:
                    self._validate_date_range(ui_filter, max_days)

    def _check_filter_field(self, ui_filter: UiFilter, dataset: DatasetDefinition):
        """Field exists and operator is allowed. Returns the FilterDefinition."""
        filter_def = dataset.filters.get(ui_filter.field)
        if filter_def is None:
            raise ValidationError(
                ErrorCode.UNKNOWN_FILTER_FIELD,
                f"Filter field '{ui_filter.field}' is not allowed for dataset '{dataset.id}'",
                field="filters",
                details={"value": ui_filter.field},
            )

        if not filter_def.allows_operator(ui_filter.operator):
            allowed = ", ".join(filter_def.allowed_operators)
            raise ValidationError(
                ErrorCode.OPERATOR_NOT_ALLOWED,
                f"Operator '{ui_filter.operator}' is not allowed for filter "
                f"'{ui_filter.field}'. Allowed operators: {allowed}",
                field=ui_filter.field,
                details={"operator": ui_filter.operator, "allowed": list(filter_def.allowed_operators)},
            )
        return filter_def

    def _validate_date_range(self, ui_filter: UiFilter, max_days: int) -> None:
        date_range = parse_date_range(ui_filter.value)
        if date_range is None:
            # Relative or open-ended value: nothing to bound.
            return

        start, end = date_range
        days = (end - start).days
        if days > max_days:
            raise ValidationError(
                ErrorCode.DATE_RANGE_EXCEEDED,
                f"Date range exceeds maximum allowed ({max_days} days). Requested: {days} days",
                field=ui_filter.field,
                details={"max_days": max_days, "requested_days": days},
            )

    def _validate_filter_groups(self, request: UiQueryRequest, dataset: DatasetDefinition) -> None:
        for group in request.filter_groups:
            if (group.logic or "").lower() not in GROUP_LOGICS:
                raise ValidationError(
                    ErrorCode.INVALID_GROUP_LOGIC,
                    f"Filter group logic must be 'and' or 'or'. Got: '{group.logic}'",
                    field="filterGroups",
                    details={"value": group.logic},
                )
            for ui_filter in group.filters:
                self._check_filter_field(ui_filter, dataset)

    def _validate_pagination(self, page: UiPagination, dataset: DatasetDefinition) -> None:
        if page.limit < 1:
            raise ValidationError(
                ErrorCode.INVALID_PAGINATION,
                "Limit must be at least 1",
                field="page.limit",
            )
        if page.offset < 0:
            raise ValidationError(
                ErrorCode.INVALID_PAGINATION,
                "Offset must be non-negative",
                field="page.offset",
            )

        max_limit = dataset.security.max_limit if dataset.security is not None else None
        if max_limit is not None and page.limit > max_limit:
            raise ValidationError(
                ErrorCode.LIMIT_EXCEEDED,
                f"Limit exceeds maximum allowed ({max_limit}). Requested: {page.limit}",
                field="page.limit",
                details={"max_limit": max_limit, "requested": page.limit},
            )

    def _validate_sort(self, sort: Optional[UiSort], dataset: DatasetDefinition) -> None:
        if sort is None:
            return

        if sort.by not in dataset.measures and sort.by not in dataset.dimensions:
            raise ValidationError(
                ErrorCode.INVALID_SORT,
                f"Sort field '{sort.by}' is not a valid measure or dimension",
                field="sort.by",
            )

        if (sort.direction or "").lower() not in SORT_DIRECTIONS:
            raise ValidationError(
                ErrorCode.INVALID_SORT,
                f"Sort direction must be 'asc' or 'desc'. Got: '{sort.direction}'",
                field="sort.direction",
            )
