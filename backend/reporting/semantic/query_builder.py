"""
Analytics Query Builder
=======================

**Version**: 1.0.0
**Status**: Active

Orchestrates translation of a validated UiQueryRequest into a TechnicalQuery.

WHY THIS FILE EXISTS
--------------------
Strategies know how to translate each piece; this file fixes the order the
pieces are translated in and assembles the result:

    1. filters (top-level, with security injection) + filter groups
    2. measures
    3. dimensions
    4. time dimensions
    5. order
    6. limit (capped by policy)
    7. offset (passthrough)

No validation happens here. Call QueryValidator.validate() first.

RELATED FILES
-------------
- reporting/semantic/strategies/: Translation algorithms
- reporting/semantic/validator.py: Must run before build()
- reporting/services/analytics_service.py: Caller in the request flow
"""

import logging
from typing import Optional

from reporting.semantic.identity import CallerIdentity
from reporting.semantic.model import DatasetDefinition
from reporting.semantic.query import TechnicalQuery, UiQueryRequest
from reporting.semantic.strategies.dispatch import StrategyResolver

logger = logging.getLogger(__name__)


class AnalyticsQueryBuilder:
    """
    Composes strategy operations into a TechnicalQuery.

    USAGE:
        builder = AnalyticsQueryBuilder()
        query = builder.build(request, registry.get("events"), identity)
        query.measures      # ["EventsView.count"]
    """

    def __init__(self, resolver: Optional[StrategyResolver] = None):
        self.resolver = resolver or StrategyResolver()

    def build(
        self,
        request: UiQueryRequest,
        dataset: DatasetDefinition,
        identity: Optional[CallerIdentity] = None,
    ) -> TechnicalQuery:
        """
        Translate a request for one dataset.

        PARAMETERS:
            request: Validated UI request
            dataset: Dataset the request targets
            identity: Caller identity for security filters, or None

        RETURNS:
            TechnicalQuery ready for the Cube.js client
        """
        logger.debug("[QUERY_BUILDER] Building Cube.js query for dataset %s", dataset.id)

        strategy = self.resolver.resolve(dataset.id)

        filters = list(strategy.translate_filters(request.filters, dataset, identity))
        filters.extend(strategy.translate_filter_groups(request.filter_groups, dataset))

        query = TechnicalQuery(
            dataset=dataset.id,
            measures=strategy.translate_measures(request.kpis, dataset),
            dimensions=strategy.translate_dimensions(request.group_by, dataset),
            time_dimensions=strategy.translate_time_dimensions(request.filters, dataset),
            filters=filters,
            order=strategy.translate_order(request.sort, dataset),
            limit=strategy.apply_limit_policy(request.page.limit, dataset),
            offset=request.page.offset,
        )

        logger.debug(
            "[QUERY_BUILDER] Built query for %s using %s strategy: %d measures, %d dimensions, %d filters",
            dataset.id, strategy.name, len(query.measures), len(query.dimensions), len(query.filters),
        )
        return query
