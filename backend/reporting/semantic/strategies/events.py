"""Translation strategy for the sourcing events datasets (events, events-rfq, events-rfi)."""

from reporting.semantic.strategies.base import BaseTranslationStrategy


class EventTranslationStrategy(BaseTranslationStrategy):
    """Events use the shared algorithm unchanged. Also the fallback strategy."""

    name = "events"
