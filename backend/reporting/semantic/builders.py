"""
Dataset Builders
================

One pure builder per dataset family (events, suppliers, items). Each builder
assembles a DatasetDefinition from the field factories in
``reporting/semantic/definitions`` and returns a new, equal object on every
call.

The events builder can narrow its output to one event type: fields tagged
with ``applicable_event_types`` are kept only when they apply. The check is
``FieldDefinition.is_applicable``, shared by measures, dimensions and filters.
"""

from typing import Callable, Dict, Iterable, Tuple, TypeVar

from reporting.semantic.definitions import events as ev
from reporting.semantic.definitions import items as it
from reporting.semantic.definitions import suppliers as su
from reporting.semantic.model import (
    DatasetDefinition,
    EventType,
    FieldDefinition,
    SecurityPolicy,
)

F = TypeVar("F", bound=FieldDefinition)

EVENTS_DATASET_ID = "events"
SUPPLIER_DATASET_ID = "supplier_reports"
ITEM_DATASET_ID = "item_reports"

_EVENT_DATASET_IDS = {
    EventType.ALL: EVENTS_DATASET_ID,
    EventType.RFQ: "events-rfq",
    EventType.RFI: "events-rfi",
}


def _select(fields: Iterable[Tuple[str, F]], event_type: EventType) -> Dict[str, F]:
    """Keep the (key, definition) pairs applicable to ``event_type``, in order."""
    return {key: definition for key, definition in fields if definition.is_applicable(event_type)}


def event_dataset_id(event_type: EventType) -> str:
    return _EVENT_DATASET_IDS[event_type]


def build_events_dataset(event_type: EventType = EventType.ALL) -> DatasetDefinition:
    """
    Build the sourcing events dataset (RFQ, RFI).

    PARAMETERS:
        event_type: ALL for the unified dataset; RFQ/RFI drop fields tagged
            for the other type.

    RETURNS:
        DatasetDefinition with id "events", "events-rfq" or "events-rfi"
    """
    measures = _select([
        ("event_count", ev.event_count()),
        ("invited_suppliers_count", ev.invited_suppliers_count()),
        ("viewed_suppliers_count", ev.viewed_suppliers_count()),
        ("offered_suppliers_count", ev.offered_suppliers_count()),
        ("rejected_suppliers_count", ev.rejected_suppliers_count()),
        ("quotation_total_best", ev.quotation_total_best()),
        ("quotation_total_avg", ev.quotation_total_avg()),
        ("quotation_total", ev.quotation_total()),
        ("offer_period_days", ev.offer_period_days()),
        ("avg_offer_period_days", ev.avg_offer_period_days()),
        ("cycle_time_days", ev.cycle_time_days()),
        ("avg_cycle_time_days", ev.avg_cycle_time_days()),
        ("quotation_rate", ev.quotation_rate()),
        ("response_rate", ev.response_rate()),
        ("reject_rate", ev.reject_rate()),
        ("best_quotation_total", ev.best_quotation_total()),
        ("opened_quotations_count", ev.opened_quotations_count()),
        ("last_round_number", ev.last_round_number()),
        ("suppliers_in_process_count", ev.suppliers_in_process_count()),
        ("suppliers_rejected_count", ev.suppliers_rejected_count()),
        ("suppliers_submitted_count", ev.suppliers_submitted_count()),
    ], event_type)

    dimensions = _select([
        ("event_id", ev.event_id_dimension()),
        ("event_number", ev.event_number_dimension()),
        ("event_name", ev.event_name_dimension()),
        ("event_type", ev.event_type_dimension()),
        ("status", ev.status_dimension()),
        ("state_name", ev.state_name_dimension()),
        ("created_by", ev.created_by_dimension()),
        ("creator_id", ev.creator_id_dimension()),
        ("creator_department", ev.creator_department_dimension()),
        ("technical_contact", ev.technical_contact_dimension()),
        ("commercial_contact", ev.commercial_contact_dimension()),
        ("purchase_organisation", ev.purchase_organisation_dimension()),
        ("company_code", ev.company_code_dimension()),
        ("purchase_group", ev.purchase_group_dimension()),
        ("created_at", ev.created_at_dimension()),
        ("started_at", ev.started_at_dimension()),
        ("deadline", ev.deadline_dimension()),
        ("submission_deadline", ev.submission_deadline_dimension()),
        ("awarded_at", ev.awarded_at_dimension()),
        ("number_of_rounds", ev.number_of_rounds_dimension()),
    ], event_type)

    filters = _select([
        ("event_type", ev.event_type_filter()),
        ("created_by", ev.created_by_filter()),
        ("creator_id", ev.creator_id_filter()),
        ("technical_contact", ev.technical_contact_filter()),
        ("commercial_contact", ev.commercial_contact_filter()),
        ("purchase_organisation", ev.purchase_organisation_filter()),
        ("company_code", ev.company_code_filter()),
        ("purchase_group", ev.purchase_group_filter()),
        ("creator_department", ev.creator_department_filter()),
        ("status", ev.status_filter()),
        ("state_name", ev.state_name_filter()),
        ("created_at", ev.created_at_filter()),
        ("started_at", ev.started_at_filter()),
        ("deadline", ev.deadline_filter()),
        ("submission_deadline", ev.submission_deadline_filter()),
    ], event_type)

    label = (
        "Event Reports (RFQ, RFI)"
        if event_type is EventType.ALL
        else f"{event_type.label} Reports"
    )

    return DatasetDefinition(
        id=event_dataset_id(event_type),
        label=label,
        measures=measures,
        dimensions=dimensions,
        filters=filters,
        security=SecurityPolicy(
            tenant_filter_member=f"{ev.CUBE}.tenantId",
            user_filter_member="",
            max_limit=1000,
            max_date_range_days=365,
        ),
    )


def build_supplier_dataset() -> DatasetDefinition:
    """Build the supplier participation dataset."""
    return DatasetDefinition(
        id=SUPPLIER_DATASET_ID,
        label="Supplier Reports",
        measures={
            "total_events": su.total_events(),
            "rfq_count": su.rfq_count(),
            "rfi_count": su.rfi_count(),
            "rfp_count": su.rfp_count(),
            "auction_count": su.auction_count(),
            "order_volume": su.order_volume(),
            "total_quotation_amount": su.total_quotation_amount(),
            "quotation_rate": su.quotation_rate(),
            "quot_to_win": su.quot_to_win(),
            "rating_average": su.rating_average(),
            "score_average": su.score_average(),
        },
        dimensions={
            "supplier_id": su.supplier_id_dimension(),
            "supplier_name": su.supplier_name_dimension(),
            "supplier_status": su.supplier_status_dimension(),
            "created_at": su.created_at_dimension(),
        },
        filters={
            "supplier_name": su.supplier_name_filter(),
            "supplier_status": su.supplier_status_filter(),
            "created_at": su.created_at_filter(),
        },
        security=SecurityPolicy(
            tenant_filter_member=f"{su.CUBE}.tenantId",
            max_limit=1000,
            max_date_range_days=730,
        ),
    )


def build_item_dataset() -> DatasetDefinition:
    """Build the item/material dataset."""
    return DatasetDefinition(
        id=ITEM_DATASET_ID,
        label="Item/Material Reports",
        measures={
            "order_total": it.order_total(),
            "order_quantity": it.order_quantity(),
            "lowest_price": it.lowest_price(),
            "unit_price_avg": it.unit_price_avg(),
        },
        dimensions={
            "material_no": it.material_no_dimension(),
            "material_group": it.material_group_dimension(),
            "supplier_name": it.supplier_name_dimension(),
            "unit": it.unit_dimension(),
        },
        filters={
            "material_no": it.material_no_filter(),
            "material_group": it.material_group_filter(),
        },
        security=SecurityPolicy(
            tenant_filter_member=f"{it.CUBE}.tenantId",
            max_limit=1000,
            max_date_range_days=365,
        ),
    )


# Builders registered at startup, one per family.
DEFAULT_BUILDERS: Tuple[Callable[[], DatasetDefinition], ...] = (
    build_events_dataset,
    build_supplier_dataset,
    build_item_dataset,
)
