"""Field-definition factories for the item/material cube (``Items``)."""

from reporting.semantic.model import (
    DimensionDefinition,
    DimensionType,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    MeasureType,
)
from reporting.semantic.definitions.events import CODE_OPERATORS, STRING_OPERATORS

CUBE = "Items"


def _measure(name: str, label: str, kind: MeasureType) -> MeasureDefinition:
    return MeasureDefinition(
        cube_member=f"{CUBE}.{name}",
        label=label,
        type=kind.default_type,
        format=kind.default_format,
    )


def _dimension(name: str, label: str, kind: DimensionType) -> DimensionDefinition:
    return DimensionDefinition(cube_member=f"{CUBE}.{name}", label=label, type=kind.default_type)


def order_total():
    return _measure("orderTotal", "Order Total", MeasureType.FINANCIAL)


def order_quantity():
    return _measure("orderQuantity", "Order Quantity", MeasureType.COUNT)


def lowest_price():
    return _measure("lowestPrice", "Lowest Price (Unit)", MeasureType.FINANCIAL)


def unit_price_avg():
    # Average of currency values, shown as currency rather than a plain number.
    return MeasureDefinition(
        cube_member=f"{CUBE}.unitPriceAvg",
        label="Average Unit Price",
        type=MeasureType.AVERAGE.default_type,
        format=MeasureType.FINANCIAL.default_format,
    )


def material_no_dimension():
    return _dimension("materialNo", "Material No.", DimensionType.EVENT_IDENTIFICATION)


def material_group_dimension():
    return _dimension("materialGroup", "Material Group", DimensionType.ATTRIBUTE)


def supplier_name_dimension():
    return _dimension("supplierName", "Supplier (Lowest Price)", DimensionType.PEOPLE)


def unit_dimension():
    return _dimension("unit", "Unit", DimensionType.ATTRIBUTE)


def material_no_filter():
    return FilterDefinition(
        cube_member=f"{CUBE}.materialNo",
        label="Material Number",
        type=FilterType.STRING,
        allowed_operators=STRING_OPERATORS,
    )


def material_group_filter():
    return FilterDefinition(
        cube_member=f"{CUBE}.materialGroup",
        label="Material Group",
        type=FilterType.STRING,
        allowed_operators=CODE_OPERATORS,
    )
