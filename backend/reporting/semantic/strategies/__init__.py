"""Translation strategies: shared base algorithm, per-family subclasses and dispatch."""

from reporting.semantic.strategies.base import BaseTranslationStrategy
from reporting.semantic.strategies.dispatch import (
    DatasetFamily,
    StrategyResolver,
    family_for,
)
from reporting.semantic.strategies.events import EventTranslationStrategy
from reporting.semantic.strategies.items import ItemTranslationStrategy
from reporting.semantic.strategies.suppliers import SupplierTranslationStrategy

__all__ = [
    "BaseTranslationStrategy",
    "DatasetFamily",
    "EventTranslationStrategy",
    "ItemTranslationStrategy",
    "StrategyResolver",
    "SupplierTranslationStrategy",
    "family_for",
]
