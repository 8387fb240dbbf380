"""
Strategy Dispatch
=================

Maps a dataset id to its translation strategy.

The mapping is two explicit steps, both statically checkable:

    dataset id --(prefix)--> DatasetFamily --(table)--> strategy

    "events", "events-rfq"  -> EVENTS    -> EventTranslationStrategy
    "supplier_reports"      -> SUPPLIERS -> SupplierTranslationStrategy
    "item_reports"          -> ITEMS     -> ItemTranslationStrategy
    anything else           -> EVENTS    (fallback, never raises)

The fallback is deliberate: dispatch runs after validation, so the dataset
is known to exist.
"""

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from reporting.semantic.strategies.base import BaseTranslationStrategy
from reporting.semantic.strategies.events import EventTranslationStrategy
from reporting.semantic.strategies.items import ItemTranslationStrategy
from reporting.semantic.strategies.suppliers import SupplierTranslationStrategy


class DatasetFamily(Enum):
    """Dataset families with their own translation strategy."""
    EVENTS = "events"
    SUPPLIERS = "suppliers"
    ITEMS = "items"


# Checked in order; first matching prefix wins.
FAMILY_PREFIXES: Tuple[Tuple[str, DatasetFamily], ...] = (
    ("events", DatasetFamily.EVENTS),
    ("supplier", DatasetFamily.SUPPLIERS),
    ("item", DatasetFamily.ITEMS),
)

DEFAULT_FAMILY = DatasetFamily.EVENTS


def family_for(dataset_id: Optional[str]) -> DatasetFamily:
    """
    Resolve the family of a dataset id by prefix (case-insensitive).

    EXAMPLES:
        >>> family_for("supplier_reports")
        <DatasetFamily.SUPPLIERS: 'suppliers'>
        >>> family_for("unknown")
        <DatasetFamily.EVENTS: 'events'>
    """
    normalized = (dataset_id or "").lower()
    for prefix, family in FAMILY_PREFIXES:
        if normalized.startswith(prefix):
            return family
    return DEFAULT_FAMILY


def default_strategies() -> Dict[DatasetFamily, BaseTranslationStrategy]:
    return {
        DatasetFamily.EVENTS: EventTranslationStrategy(),
        DatasetFamily.SUPPLIERS: SupplierTranslationStrategy(),
        DatasetFamily.ITEMS: ItemTranslationStrategy(),
    }


class StrategyResolver:
    """
    Family -> strategy table.

    USAGE:
        resolver = StrategyResolver()
        strategy = resolver.resolve("item_reports")   # ItemTranslationStrategy
    """

    def __init__(self, strategies: Optional[Mapping[DatasetFamily, BaseTranslationStrategy]] = None):
        table = default_strategies()
        if strategies:
            table.update(strategies)
        self._strategies = table

    def for_family(self, family: DatasetFamily) -> BaseTranslationStrategy:
        return self._strategies[family]

    def resolve(self, dataset_id: Optional[str]) -> BaseTranslationStrategy:
        return self.for_family(family_for(dataset_id))
