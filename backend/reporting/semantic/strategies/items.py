"""Translation strategy for item/material datasets (item_reports)."""

from reporting.semantic.strategies.base import BaseTranslationStrategy


class ItemTranslationStrategy(BaseTranslationStrategy):
    name = "items"
