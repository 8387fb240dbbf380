"""Translation strategy for supplier participation datasets (supplier_reports)."""

from reporting.semantic.strategies.base import BaseTranslationStrategy


class SupplierTranslationStrategy(BaseTranslationStrategy):
    """
    Supplier datasets.

    Behaves like the base algorithm. Supplier-specific field handling (e.g.
    status code mapping) belongs here, not in the base class.
    """

    name = "suppliers"
