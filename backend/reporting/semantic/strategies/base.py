"""
Base Translation Strategy
=========================

**Version**: 1.0.0
**Status**: Active

Shared algorithm converting business-level query pieces into Cube.js query
fragments.

WHY THIS FILE EXISTS
--------------------
Every dataset family translates the same way today: look each business id up
in the DatasetDefinition and emit its ``cube_member``. The per-family
strategies (events, suppliers, items) subclass this base so a family can
special-case a field later without touching shared code.

TRANSLATION RULES
-----------------
- Unknown ids are dropped with a WARNING, never raised. The validator is the
  rejection point; translation always produces output.
- TIME filters become time dimensions, all others become member filters.
- Security filters (tenant, user) are appended only when a caller identity
  is present and the claim resolves to a non-empty value.

OPERATOR TABLE (case-insensitive input)
---------------------------------------
    eq, equals               -> equals
    ne, notequals            -> notEquals
    gt, greaterthan          -> gt
    gte, greaterthanorequal  -> gte
    lt, lessthan             -> lt
    lte, lessthanorequal     -> lte
    contains                 -> contains
    notcontains              -> notContains
    startswith               -> startsWith
    endswith                 -> endsWith
    in                       -> equals
    notin                    -> notEquals
    anything else            -> equals

RELATED FILES
-------------
- reporting/semantic/strategies/dispatch.py: Picks a strategy per dataset
- reporting/semantic/query_builder.py: Calls these operations in order
"""

import logging
from typing import Any, Dict, List, Optional

from reporting.semantic.identity import CallerIdentity
from reporting.semantic.model import DatasetDefinition
from reporting.semantic.query import (
    CompositeFilter,
    CubeFilter,
    FilterGroup,
    TimeDimension,
    UiFilter,
    UiSort,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 1000

OPERATOR_MAP: Dict[str, str] = {
    "eq": "equals",
    "equals": "equals",
    "ne": "notEquals",
    "notequals": "notEquals",
    "gt": "gt",
    "greaterthan": "gt",
    "gte": "gte",
    "greaterthanorequal": "gte",
    "lt": "lt",
    "lessthan": "lt",
    "lte": "lte",
    "lessthanorequal": "lte",
    "contains": "contains",
    "notcontains": "notContains",
    "startswith": "startsWith",
    "endswith": "endsWith",
    "in": "equals",
    "notin": "notEquals",
}

DEFAULT_OPERATOR = "equals"

# Date-range values starting with this keyword are relative ("last 90 days").
RELATIVE_RANGE_PREFIX = "last"


def _stringify(value: Any) -> str:
    """Scalar to Cube.js filter value. Booleans lowercase, integral floats without '.0'."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class BaseTranslationStrategy:
    """
    Business-to-technical translation shared by all dataset families.

    Strategies hold no state; one instance can serve any number of
    concurrent requests.
    """

    name = "base"

    # -------------------------------------------------------------------------
    # Measures and dimensions
    # -------------------------------------------------------------------------

    def translate_measures(self, kpi_ids: List[str], dataset: DatasetDefinition) -> List[str]:
        """Map KPI ids to cube members. Unknown ids are dropped."""
        measures = []
        for kpi_id in kpi_ids:
            measure = dataset.measures.get(kpi_id)
            if measure is None:
                logger.warning("[TRANSLATION] Unknown KPI '%s' for dataset '%s'", kpi_id, dataset.id)
                continue
            measures.append(measure.cube_member)
        return measures

    def translate_dimensions(self, group_by_ids: List[str], dataset: DatasetDefinition) -> List[str]:
        """Map dimension ids to cube members. Unknown ids are dropped."""
        dimensions = []
        for dimension_id in group_by_ids:
            dimension = dataset.dimensions.get(dimension_id)
            if dimension is None:
                logger.warning(
                    "[TRANSLATION] Unknown dimension '%s' for dataset '%s'", dimension_id, dataset.id
                )
                continue
            dimensions.append(dimension.cube_member)
        return dimensions

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def is_time_filter(self, ui_filter: UiFilter, dataset: DatasetDefinition) -> bool:
        filter_def = dataset.filters.get(ui_filter.field)
        return filter_def is not None and filter_def.is_time

    def translate_time_dimensions(
        self, filters: List[UiFilter], dataset: DatasetDefinition
    ) -> List[TimeDimension]:
        """
        One time dimension per TIME-typed filter.

        EXAMPLE:
            UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-31")
            -> TimeDimension("EventsView.createdAt", ["2024-01-01", "2024-01-31"])
        """
        time_dimensions = []
        for ui_filter in filters:
            if not self.is_time_filter(ui_filter, dataset):
                continue
            filter_def = dataset.filters[ui_filter.field]
            time_dimensions.append(TimeDimension(
                dimension=filter_def.cube_member,
                date_range=self.translate_date_range(ui_filter.value),
                granularity=None,
            ))
        return time_dimensions

    def _translate_member_filters(
        self, filters: List[UiFilter], dataset: DatasetDefinition
    ) -> List[CubeFilter]:
        """Non-time filters to member filters. Unknown fields are dropped."""
        translated = []
        for ui_filter in filters:
            filter_def = dataset.filters.get(ui_filter.field)
            if filter_def is None:
                logger.warning(
                    "[TRANSLATION] Unknown filter field '%s' for dataset '%s'",
                    ui_filter.field, dataset.id,
                )
                continue
            if filter_def.is_time:
                continue
            translated.append(CubeFilter(
                member=filter_def.cube_member,
                operator=self.translate_operator(ui_filter.operator),
                values=self.normalize_values(ui_filter.value),
            ))
        return translated

    def translate_filters(
        self,
        filters: List[UiFilter],
        dataset: DatasetDefinition,
        identity: Optional[CallerIdentity] = None,
    ) -> List[CubeFilter]:
        """
        Translate top-level non-time filters, then append security filters.

        PARAMETERS:
            filters: Top-level UI filters
            dataset: Target dataset
            identity: Caller identity; None skips security injection
        """
        translated = self._translate_member_filters(filters, dataset)

        if dataset.security is not None and identity is not None:
            translated.extend(self.security_filters(dataset, identity))

        return translated

    def security_filters(self, dataset: DatasetDefinition, identity: CallerIdentity) -> List[CubeFilter]:
        """
        Tenant and user equality filters required by the dataset's policy.

        A member left empty in the policy, or a claim resolving to "", skips
        that filter.
        """
        security = dataset.security
        injected = []
        if security is None:
            return injected

        if security.tenant_filter_member:
            tenant_id = identity.tenant_id()
            if tenant_id:
                injected.append(CubeFilter(
                    member=security.tenant_filter_member,
                    operator="equals",
                    values=[tenant_id],
                ))
                logger.debug(
                    "[TRANSLATION] Injected tenant filter on %s for dataset '%s'",
                    security.tenant_filter_member, dataset.id,
                )

        if security.user_filter_member:
            user_id = identity.user_id()
            if user_id:
                injected.append(CubeFilter(
                    member=security.user_filter_member,
                    operator="equals",
                    values=[user_id],
                ))
                logger.debug(
                    "[TRANSLATION] Injected user filter on %s for dataset '%s'",
                    security.user_filter_member, dataset.id,
                )

        return injected

    def translate_filter_groups(
        self, groups: List[FilterGroup], dataset: DatasetDefinition
    ) -> List[CompositeFilter]:
        """
        Each group becomes one ``{"and": [...]}`` / ``{"or": [...]}`` filter.

        Time filters inside groups are dropped (groups never produce time
        dimensions). Groups left empty are omitted.
        """
        composites = []
        for group in groups:
            members = self._translate_member_filters(group.filters, dataset)
            if not members:
                continue
            logic = "or" if (group.logic or "").lower() == "or" else "and"
            composites.append(CompositeFilter(logic=logic, filters=members))
        return composites

    # -------------------------------------------------------------------------
    # Order and paging
    # -------------------------------------------------------------------------

    def translate_order(self, sort: Optional[UiSort], dataset: DatasetDefinition) -> Optional[Dict[str, str]]:
        """``{cube_member: direction}`` for a measure or dimension id, else None."""
        if sort is None:
            return None

        field_def = dataset.measures.get(sort.by) or dataset.dimensions.get(sort.by)
        if field_def is None:
            logger.warning("[TRANSLATION] Unknown sort field '%s' for dataset '%s'", sort.by, dataset.id)
            return None

        return {field_def.cube_member: (sort.direction or "asc").lower()}

    def apply_limit_policy(self, requested_limit: int, dataset: DatasetDefinition) -> int:
        """
        Cap the requested limit.

        EXAMPLES:
            apply_limit_policy(1500, dataset_with_max_1000) -> 1000
            apply_limit_policy(50, dataset_with_max_1000)   -> 50
        """
        if dataset.security is None:
            max_limit = DEFAULT_MAX_LIMIT
        else:
            max_limit = dataset.security.max_limit
        if max_limit is None:
            return requested_limit
        return min(requested_limit, max_limit)

    # -------------------------------------------------------------------------
    # Value helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def translate_operator(ui_operator: Optional[str]) -> str:
        """Canonical Cube.js operator. Unmapped tokens become 'equals'."""
        return OPERATOR_MAP.get((ui_operator or "").lower(), DEFAULT_OPERATOR)

    @staticmethod
    def normalize_values(value: Any) -> List[str]:
        """
        Coerce a UI filter value to a list of strings.

        RULES:
            list/tuple -> each element stringified, empty results dropped
            str        -> split on commas (trimmed) if it has any, else [value]
            bool       -> ["true"] / ["false"]
            int/float  -> [str(value)], integral floats without decimals
            other      -> []
        """
        if isinstance(value, (list, tuple)):
            values = [_stringify(item) for item in value]
            return [v for v in values if v]
        if isinstance(value, str):
            if "," in value:
                return [part.strip() for part in value.split(",") if part.strip()]
            return [value]
        if isinstance(value, (bool, int, float)):
            return [_stringify(value)]
        return []

    @staticmethod
    def translate_date_range(value: Any) -> Any:
        """
        Normalize a time filter value into a Cube.js ``dateRange``.

        RULES:
            "last 90 days"           -> unchanged (relative range)
            "2024-01-01,2024-01-31"  -> ["2024-01-01", "2024-01-31"]
            "a,b,c"                  -> ["a", "b"] (first two parts only)
            anything else            -> unchanged (tuples become lists)
        """
        if isinstance(value, str):
            if value.lower().startswith(RELATIVE_RANGE_PREFIX):
                return value
            if "," in value:
                return [part.strip() for part in value.split(",")[:2]]
            return value
        if isinstance(value, tuple):
            return list(value)
        return value
