"""
Semantic Layer for Cube.js Reporting
====================================

**Version**: 1.0.0
**Status**: Active

Translates report requests written in business vocabulary into Cube.js
queries, enforcing per-dataset security and limits on the way.

WHY THIS EXISTS
---------------
Report UIs and saved reports should never know Cube.js member names. They
ask for ``event_count`` grouped by ``event_type``; this package knows that
means ``EventsView.count`` by ``EventsView.eventType``, restricted to the
caller's tenant, capped at 1000 rows.

ARCHITECTURE OVERVIEW
---------------------
```
UiQueryRequest (semantic/query.py)
    |
    v
DatasetRegistry.get(datasetId) (semantic/registry.py)
    |
    v
QueryValidator (semantic/validator.py)      -> ValidationError, fail fast
    |
    v
AnalyticsQueryBuilder (semantic/query_builder.py)
    |   strategy = StrategyResolver.resolve(dataset.id)
    |   filters + groups, measures, dimensions, time dimensions,
    |   order, limit (policy), offset
    v
TechnicalQuery (semantic/query.py)
    |
    v
CubeClient.load (services/cube_client.py)
```

SECURITY MODEL
--------------
- Only ids present in the dataset definition pass validation
- Tenant/user equality filters are appended during translation when a
  caller identity is present (semantic/identity.py)
- Row count and date-range span are capped per dataset (SecurityPolicy)

COMPONENTS
----------
- model.py: Dataset, measure, dimension, filter, security definitions
- definitions/: Field-definition factories per cube
- builders.py: One pure builder per dataset family
- registry.py: Read-only dataset catalog
- query.py: UI request and technical query contracts
- identity.py: Caller identity claims
- errors.py: ValidationError and ErrorCode
- validator.py: Request validation
- strategies/: Translation algorithm and per-family dispatch
- query_builder.py: Translation orchestrator

USAGE
-----
```python
from reporting.semantic import (
    AnalyticsQueryBuilder,
    QueryValidator,
    UiQueryRequest,
    build_default_registry,
)

registry = build_default_registry()
request = UiQueryRequest.from_dict(payload)
dataset = registry.get(request.dataset_id)

QueryValidator().validate(request, dataset)          # raises ValidationError
query = AnalyticsQueryBuilder().build(request, dataset, identity)
rows = await cube_client.load(query)
```
"""

# Re-export main components for clean imports

from reporting.semantic.model import (
    DatasetDefinition,
    DimensionDefinition,
    DimensionType,
    EventType,
    FieldDefinition,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    MeasureType,
    SecurityPolicy,
)

from reporting.semantic.builders import (
    build_events_dataset,
    build_item_dataset,
    build_supplier_dataset,
)

from reporting.semantic.registry import (
    DatasetRegistry,
    build_default_registry,
    build_registry,
)

from reporting.semantic.query import (
    CompositeFilter,
    CubeFilter,
    FilterGroup,
    TechnicalQuery,
    TimeDimension,
    UiFilter,
    UiPagination,
    UiQueryRequest,
    UiSort,
)

from reporting.semantic.identity import CallerIdentity

from reporting.semantic.errors import (
    ErrorCode,
    ValidationError,
)

from reporting.semantic.validator import QueryValidator

from reporting.semantic.strategies import (
    BaseTranslationStrategy,
    DatasetFamily,
    StrategyResolver,
)

from reporting.semantic.query_builder import AnalyticsQueryBuilder

__all__ = [
    # Definitions (model.py)
    "DatasetDefinition",
    "DimensionDefinition",
    "DimensionType",
    "EventType",
    "FieldDefinition",
    "FilterDefinition",
    "FilterType",
    "MeasureDefinition",
    "MeasureType",
    "SecurityPolicy",
    # Builders and registry
    "build_events_dataset",
    "build_item_dataset",
    "build_supplier_dataset",
    "DatasetRegistry",
    "build_default_registry",
    "build_registry",
    # Query contracts (query.py)
    "CompositeFilter",
    "CubeFilter",
    "FilterGroup",
    "TechnicalQuery",
    "TimeDimension",
    "UiFilter",
    "UiPagination",
    "UiQueryRequest",
    "UiSort",
    # Identity and errors
    "CallerIdentity",
    "ErrorCode",
    "ValidationError",
    # Pipeline
    "QueryValidator",
    "BaseTranslationStrategy",
    "DatasetFamily",
    "StrategyResolver",
    "AnalyticsQueryBuilder",
]
