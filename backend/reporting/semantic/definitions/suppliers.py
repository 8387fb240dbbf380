"""Field-definition factories for the supplier participation cube (``RfqSuppliers``)."""

from reporting.semantic.model import (
    DimensionDefinition,
    DimensionType,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    MeasureType,
)
from reporting.semantic.definitions.events import CODE_OPERATORS, STRING_OPERATORS, TIME_OPERATORS

CUBE = "RfqSuppliers"


def _measure(name: str, label: str, kind: MeasureType) -> MeasureDefinition:
    return MeasureDefinition(
        cube_member=f"{CUBE}.{name}",
        label=label,
        type=kind.default_type,
        format=kind.default_format,
    )


def _dimension(name: str, label: str, kind: DimensionType) -> DimensionDefinition:
    return DimensionDefinition(cube_member=f"{CUBE}.{name}", label=label, type=kind.default_type)


# Measures
def total_events():
    return _measure("totalEvents", "Number of All Events", MeasureType.COUNT)


def rfq_count():
    return _measure("rfqCount", "Number of RFQs", MeasureType.COUNT)


def rfi_count():
    return _measure("rfiCount", "Number of RFIs", MeasureType.COUNT)


def rfp_count():
    return _measure("rfpCount", "Number of RFPs", MeasureType.COUNT)


def auction_count():
    return _measure("auctionCount", "Number of eAuctions", MeasureType.COUNT)


def order_volume():
    return _measure("orderVolume", "Order Volume", MeasureType.FINANCIAL)


def total_quotation_amount():
    return _measure("totalQuotationAmount", "Total Quotation Amount", MeasureType.FINANCIAL)


def quotation_rate():
    return _measure("quotationRate", "Quotation Rate (%)", MeasureType.RATE)


def quot_to_win():
    return _measure("quotToWin", "Quote-to-Win Rate (%)", MeasureType.RATE)


def rating_average():
    return _measure("ratingAverage", "Rating Average", MeasureType.AVERAGE)


def score_average():
    return _measure("scoreAverage", "Score Average", MeasureType.AVERAGE)


# Dimensions
def supplier_id_dimension():
    return _dimension("supplierId", "Supplier ID", DimensionType.EVENT_IDENTIFICATION)


def supplier_name_dimension():
    return _dimension("supplierName", "Supplier Name", DimensionType.EVENT_IDENTIFICATION)


def supplier_status_dimension():
    return _dimension("status", "Processing Status", DimensionType.STATUS)


def created_at_dimension():
    return _dimension("createdAt", "Created At (in Supplier Portal)", DimensionType.TIME)


# Filters
def supplier_name_filter():
    return FilterDefinition(
        cube_member=f"{CUBE}.supplierName",
        label="Supplier Name",
        type=FilterType.STRING,
        allowed_operators=STRING_OPERATORS,
    )


def supplier_status_filter():
    return FilterDefinition(
        cube_member=f"{CUBE}.status",
        label="Supplier Status",
        type=FilterType.STRING,
        allowed_operators=CODE_OPERATORS,
    )


def created_at_filter():
    return FilterDefinition(
        cube_member=f"{CUBE}.createdAt",
        label="Created At",
        type=FilterType.TIME,
        allowed_operators=TIME_OPERATORS,
    )
