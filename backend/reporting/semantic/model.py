"""
Dataset Definition Model
========================

**Version**: 1.0.0
**Status**: Active

Describes what a reportable "dataset" exposes to report builders: its
measures (KPIs), dimensions, filter fields and security policy.
This model defines WHAT can be queried, not HOW it is translated.

WHY THIS FILE EXISTS
--------------------
Business identifiers (``event_count``, ``created_at``) are the long-lived
public contract with the UI: saved reports reference them by id. The
technical field behind each identifier (the Cube.js member, e.g.
``EventsView.count``) may change between deploys, the business id may not.

This file holds the single definition of that mapping:
- Which measures, dimensions and filters a dataset exposes
- Which Cube.js member each business id resolves to
- Which operators a filter field accepts
- Which tenant/user scoping and limits apply

DESIGN PRINCIPLES
-----------------
1. **Immutable**: Every definition is a frozen dataclass, field mappings are
   read-only ``MappingProxyType`` views. Datasets are built once at startup.
2. **Declarative**: Definitions hold properties, no translation logic.
3. **Shared shape**: Measures, dimensions and filters share one base class
   carrying ``applicable_event_types``, so applicability is checked the same
   way for all three kinds.

RELATED FILES
-------------
- reporting/semantic/definitions/: Field-definition factories
- reporting/semantic/builders.py: Assembles DatasetDefinitions per family
- reporting/semantic/registry.py: Read-only catalog of datasets
- reporting/semantic/validator.py: Validates requests against these definitions
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple


# =============================================================================
# ENUMS: Type-safe classifications
# =============================================================================

class FilterType(Enum):
    """
    Value kind of a filter field.

    WHAT: Decides how a filter is translated.

    WHY: TIME filters become Cube.js time dimensions (with a date range),
    every other kind becomes a plain member filter.
    """
    STRING = "string"
    NUMBER = "number"
    TIME = "time"
    BOOLEAN = "boolean"


class EventType(Enum):
    """
    Sourcing event types a field can be restricted to.

    ALL is the unified view: it exposes every field regardless of tags.
    """
    ALL = "All"
    RFQ = "RFQ"
    RFI = "RFI"

    @property
    def label(self) -> str:
        """Human-readable name used in dataset labels."""
        return _EVENT_TYPE_LABELS[self]


_EVENT_TYPE_LABELS = {
    EventType.ALL: "All Events",
    EventType.RFQ: "Request for Quotation",
    EventType.RFI: "Request for Information",
}


class MeasureType(Enum):
    """
    Semantic category of a measure.

    WHAT: Supplies the default value type and display format so field
    factories don't repeat them.

    EXAMPLES:
        >>> MeasureType.FINANCIAL.default_format
        'currency'
        >>> MeasureType.RATE.default_format
        'percent'
    """
    COUNT = "count"
    FINANCIAL = "financial"
    TIME_BASED = "time_based"
    RATE = "rate"
    AVERAGE = "average"
    AGGREGATE = "aggregate"

    @property
    def default_format(self) -> str:
        if self is MeasureType.FINANCIAL:
            return "currency"
        if self is MeasureType.RATE:
            return "percent"
        return "number"

    @property
    def default_type(self) -> str:
        # Every measure is numeric; the category only changes formatting.
        return "number"


class DimensionType(Enum):
    """
    Semantic category of a dimension.

    WHAT: Supplies the default value type of a dimension and whether fields of
    this category are meant to be filterable.
    """
    EVENT_IDENTIFICATION = "event_identification"
    PEOPLE = "people"
    ORGANIZATION = "organization"
    TIME = "time"
    STATUS = "status"
    ATTRIBUTE = "attribute"
    FLAG = "flag"

    @property
    def default_type(self) -> str:
        if self is DimensionType.TIME:
            return "time"
        if self is DimensionType.FLAG:
            return "boolean"
        return "string"

    @property
    def is_filterable(self) -> bool:
        return self is not DimensionType.FLAG


# =============================================================================
# DATA CLASSES: Field definitions
# =============================================================================

@dataclass(frozen=True)
class FieldDefinition:
    """
    Shape shared by measures, dimensions and filters.

    WHAT: The technical member a business id maps to, plus the event types
    the field applies to.

    WHY: Builders filter all three kinds by event type through
    ``is_applicable`` instead of inspecting each kind separately.

    PARAMETERS:
        cube_member: Technical field reference understood by Cube.js
        label: Display name
        applicable_event_types: Event types this field is restricted to.
            Empty means the field always applies.
    """
    cube_member: str
    label: str = ""
    applicable_event_types: FrozenSet[EventType] = field(default_factory=frozenset)

    def is_applicable(self, event_type: EventType) -> bool:
        """
        Check whether this field is exposed for an event type.

        RULES:
            - No restriction: always applicable
            - EventType.ALL: always applicable (unified view)
            - Otherwise: the event type must be listed

        EXAMPLES:
            >>> f = FieldDefinition("EventsView.companyCode",
            ...                     applicable_event_types=frozenset({EventType.RFQ}))
            >>> f.is_applicable(EventType.RFI)
            False
            >>> f.is_applicable(EventType.ALL)
            True
        """
        if not self.applicable_event_types:
            return True
        if event_type is EventType.ALL:
            return True
        return event_type in self.applicable_event_types


@dataclass(frozen=True)
class MeasureDefinition(FieldDefinition):
    """
    A business KPI (count, sum, rate, average).

    PARAMETERS:
        type: Value kind ("number", "string", ...)
        format: Display hint ("number", "currency", "percent")
        hidden: Excluded from schema listings but still queryable
    """
    type: str = "number"
    format: str = "number"
    hidden: bool = False


@dataclass(frozen=True)
class DimensionDefinition(FieldDefinition):
    """A business grouping attribute."""
    type: str = "string"


@dataclass(frozen=True)
class FilterDefinition(FieldDefinition):
    """
    A filterable business field.

    PARAMETERS:
        type: FilterType, TIME filters become time dimensions
        allowed_operators: Ordered operator tokens valid for this field
            (compared case-insensitively). Empty accepts any operator.
        allowed_values: Optional closed value set for UI pickers
    """
    type: FilterType = FilterType.STRING
    allowed_operators: Tuple[str, ...] = ()
    allowed_values: Optional[Tuple[str, ...]] = None

    @property
    def is_time(self) -> bool:
        return self.type is FilterType.TIME

    def allows_operator(self, operator: str) -> bool:
        """Case-insensitive operator membership check."""
        if not self.allowed_operators:
            return True
        wanted = (operator or "").lower()
        return any(op.lower() == wanted for op in self.allowed_operators)


@dataclass(frozen=True)
class SecurityPolicy:
    """
    Per-dataset scoping rules and hard caps.

    PARAMETERS:
        tenant_filter_member: Member bound to the caller's tenant id.
            Empty disables tenant scoping.
        user_filter_member: Member bound to the caller's user id.
            Empty disables user scoping.
        max_limit: Hard cap on returned rows
        max_date_range_days: Hard cap on any time-range filter span
    """
    tenant_filter_member: str = ""
    user_filter_member: str = ""
    max_limit: Optional[int] = 1000
    max_date_range_days: Optional[int] = 365


# =============================================================================
# DATASET DEFINITION
# =============================================================================

@dataclass(frozen=True)
class DatasetDefinition:
    """
    One reportable subject area.

    WHAT: Maps business ids to measure, dimension and filter definitions.

    WHY: Validation and translation both resolve every requested id through
    this object, so it is the only place that knows the Cube.js vocabulary.

    INVARIANT: Keys are unique within each mapping and stable across deploys.
    The mappings are wrapped read-only on construction.

    EXAMPLES:
        >>> events = registry.get("events")
        >>> events.measures["event_count"].cube_member
        'EventsView.count'
    """
    id: str
    label: str
    measures: Mapping[str, MeasureDefinition] = field(default_factory=dict)
    dimensions: Mapping[str, DimensionDefinition] = field(default_factory=dict)
    filters: Mapping[str, FilterDefinition] = field(default_factory=dict)
    security: Optional[SecurityPolicy] = None

    def __post_init__(self) -> None:
        # Copy then freeze so later changes to the builder's dicts can't leak in.
        for name in ("measures", "dimensions", "filters"):
            value = getattr(self, name)
            object.__setattr__(self, name, MappingProxyType(dict(value)))

    def find_member_metadata(self, cube_member: str) -> Optional[Tuple[str, str]]:
        """
        Reverse lookup: (label, type) of the measure or dimension behind a
        Cube.js member. Measures are searched first.
        """
        for measure in self.measures.values():
            if measure.cube_member == cube_member:
                return measure.label, measure.type
        for dimension in self.dimensions.values():
            if dimension.cube_member == cube_member:
                return dimension.label, dimension.type
        return None

    def describe(self) -> Dict[str, Any]:
        """
        Schema of this dataset for building report UIs.

        Hidden measures are left out; they remain queryable by id.

        RETURNS:
            {"id", "label", "measures": [...], "dimensions": [...], "filters": [...]}
        """
        measures: List[Dict[str, Any]] = [
            {"id": key, "label": m.label, "type": m.type, "format": m.format}
            for key, m in self.measures.items()
            if not m.hidden
        ]
        dimensions = [
            {"id": key, "label": d.label, "type": d.type}
            for key, d in self.dimensions.items()
        ]
        filters = []
        for key, f in self.filters.items():
            entry: Dict[str, Any] = {
                "id": key,
                "label": f.label,
                "type": f.type.value,
                "operators": list(f.allowed_operators),
            }
            if f.allowed_values is not None:
                entry["allowedValues"] = list(f.allowed_values)
            filters.append(entry)

        return {
            "id": self.id,
            "label": self.label,
            "measures": measures,
            "dimensions": dimensions,
            "filters": filters,
        }
