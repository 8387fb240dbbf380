"""Field-definition factories for the sourcing events cube (``EventsView``).

One function per logical field. Builders call these instead of repeating
member names, so a field such as ``created_at`` is defined once and reused
as a dimension and as a filter.
"""

from typing import Iterable, Optional

from reporting.semantic.model import (
    DimensionDefinition,
    DimensionType,
    EventType,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    MeasureType,
)

CUBE = "EventsView"

STRING_OPERATORS = ("equals", "contains", "in")
CODE_OPERATORS = ("equals", "in")
STATUS_OPERATORS = ("equals", "notEquals", "in")
TIME_OPERATORS = ("inDateRange", "afterDate", "beforeDate")

STATE_NAMES = ("InPreparation", "Running", "Closed", "Completed", "Canceled")

_RFQ = frozenset({EventType.RFQ})
_RFI = frozenset({EventType.RFI})


def _member(name: str) -> str:
    return f"{CUBE}.{name}"


def _measure(name: str, label: str, kind: MeasureType, only=frozenset()) -> MeasureDefinition:
    return MeasureDefinition(
        cube_member=_member(name),
        label=label,
        type=kind.default_type,
        format=kind.default_format,
        applicable_event_types=only,
    )


def _dimension(name: str, label: str, kind: DimensionType, only=frozenset(),
               value_type: Optional[str] = None) -> DimensionDefinition:
    return DimensionDefinition(
        cube_member=_member(name),
        label=label,
        type=value_type or kind.default_type,
        applicable_event_types=only,
    )


def _filter(name: str, label: str, kind: FilterType, operators: Iterable[str],
            only=frozenset(), values: Optional[Iterable[str]] = None) -> FilterDefinition:
    return FilterDefinition(
        cube_member=_member(name),
        label=label,
        type=kind,
        allowed_operators=tuple(operators),
        allowed_values=tuple(values) if values is not None else None,
        applicable_event_types=only,
    )


# =============================================================================
# MEASURES
# =============================================================================

# Counts
def event_count():
    return _measure("count", "Event Count", MeasureType.COUNT)


def invited_suppliers_count():
    return _measure("invitedSuppliersCount", "Number of Invited Suppliers", MeasureType.COUNT)


def viewed_suppliers_count():
    return _measure("viewedSuppliersCount", "Number of Suppliers (Viewed)", MeasureType.COUNT)


def offered_suppliers_count():
    return _measure("offeredSuppliersCount", "Number of Suppliers (Offered)", MeasureType.COUNT)


def rejected_suppliers_count():
    return _measure("rejectedSuppliersCount", "Number of Suppliers (Rejected)", MeasureType.COUNT)


def opened_quotations_count():
    return _measure("openedQuotationsCount", "Opened Quotations Count", MeasureType.COUNT)


def last_round_number():
    return _measure("lastRoundNumber", "Last Round Number", MeasureType.AGGREGATE)


def suppliers_in_process_count():
    return _measure("suppliersInProcessCount", "Suppliers In Process", MeasureType.COUNT)


def suppliers_rejected_count():
    return _measure("suppliersRejectedCount", "Suppliers Rejected", MeasureType.COUNT)


def suppliers_submitted_count():
    return _measure("suppliersSubmittedCount", "Suppliers Submitted (Reply)", MeasureType.COUNT)


# Financials (RFQ only)
def quotation_total_best():
    return _measure("quotationTotalBest", "Quotation Total (Best)", MeasureType.FINANCIAL, _RFQ)


def quotation_total_avg():
    return _measure("quotationTotalAvg", "Quotation Total (Average)", MeasureType.FINANCIAL, _RFQ)


def quotation_total():
    return _measure("quotationTotal", "Quotation Total", MeasureType.FINANCIAL, _RFQ)


def best_quotation_total():
    return _measure("bestQuotationTotal", "Best Quotation Total", MeasureType.FINANCIAL, _RFQ)


# Time based
def offer_period_days():
    return _measure("offerPeriodDays", "Offer Period (Days)", MeasureType.TIME_BASED)


def avg_offer_period_days():
    return _measure("avgOfferPeriodDays", "Average Offer Period (Days)", MeasureType.AVERAGE)


def cycle_time_days():
    return _measure("cycleTimeDays", "Cycle Time (Days)", MeasureType.TIME_BASED)


def avg_cycle_time_days():
    return _measure("avgCycleTimeDays", "Average Cycle Time (Days)", MeasureType.AVERAGE)


# Rates
def quotation_rate():
    return _measure("quotationRate", "Quotation Rate (%)", MeasureType.RATE)


def response_rate():
    return _measure("responseRate", "Response Rate (%)", MeasureType.RATE)


def reject_rate():
    return _measure("rejectRate", "Reject Rate (%)", MeasureType.RATE)


# =============================================================================
# DIMENSIONS
# =============================================================================

def event_id_dimension():
    return _dimension("id", "Event ID", DimensionType.EVENT_IDENTIFICATION)


def event_number_dimension():
    return _dimension("rfqNo", "Event No. (RFQ No, RFI No, etc.)", DimensionType.EVENT_IDENTIFICATION)


def event_name_dimension():
    return _dimension("rfqName", "Event Name", DimensionType.EVENT_IDENTIFICATION)


def event_type_dimension():
    return _dimension("eventType", "Event Type", DimensionType.EVENT_IDENTIFICATION)


def status_dimension():
    return _dimension("status", "Status ID", DimensionType.STATUS)


def state_name_dimension():
    return _dimension("stateName", "Status Name", DimensionType.STATUS)


def created_by_dimension():
    return _dimension("creatorName", "Created By", DimensionType.PEOPLE)


def creator_id_dimension():
    return _dimension("creatorId", "Creator ID", DimensionType.PEOPLE)


def creator_department_dimension():
    return _dimension("creatorDepartment", "Department (Creator)", DimensionType.PEOPLE)


def technical_contact_dimension():
    return _dimension("technicalContact", "Technical Contact", DimensionType.PEOPLE, _RFI)


def commercial_contact_dimension():
    return _dimension("commercialContact", "Commercial Contact", DimensionType.PEOPLE)


def purchase_organisation_dimension():
    return _dimension("purchaseOrganisation", "Purchase Organisation", DimensionType.ORGANIZATION, _RFQ)


def company_code_dimension():
    return _dimension("companyCode", "Company Code", DimensionType.ORGANIZATION, _RFQ)


def purchase_group_dimension():
    return _dimension("purchaseGroup", "Purchase Group", DimensionType.ORGANIZATION, _RFQ)


def created_at_dimension():
    return _dimension("createdAt", "Created At", DimensionType.TIME)


def started_at_dimension():
    return _dimension("startedAt", "Started/Published At", DimensionType.TIME)


def deadline_dimension():
    return _dimension("submissionDeadline", "Deadline", DimensionType.TIME)


def submission_deadline_dimension():
    return _dimension("submissionDeadline", "Submission Deadline", DimensionType.TIME)


def awarded_at_dimension():
    return _dimension("awardedAt", "Award Decision Date", DimensionType.TIME)


def number_of_rounds_dimension():
    return _dimension("numberOfRounds", "Number of Rounds", DimensionType.ATTRIBUTE, value_type="number")


# =============================================================================
# FILTERS
# =============================================================================

def event_type_filter():
    return _filter("eventType", "Event Type", FilterType.STRING, STATUS_OPERATORS)


def created_by_filter():
    return _filter("creatorName", "Created By", FilterType.STRING, STRING_OPERATORS)


def creator_id_filter():
    return _filter("creatorId", "Creator ID", FilterType.STRING, CODE_OPERATORS)


def technical_contact_filter():
    return _filter("technicalContact", "Technical Contact", FilterType.STRING, STRING_OPERATORS, _RFI)


def commercial_contact_filter():
    return _filter("commercialContact", "Commercial Contact", FilterType.STRING, STRING_OPERATORS)


def purchase_organisation_filter():
    return _filter("purchaseOrganisation", "Purchase Organisation", FilterType.STRING, CODE_OPERATORS, _RFQ)


def company_code_filter():
    return _filter("companyCode", "Company Code", FilterType.STRING, CODE_OPERATORS, _RFQ)


def purchase_group_filter():
    return _filter("purchaseGroup", "Purchase Group", FilterType.STRING, CODE_OPERATORS, _RFQ)


def creator_department_filter():
    return _filter("creatorDepartment", "Creator Department", FilterType.STRING, ("equals", "in", "contains"))


def status_filter():
    return _filter("status", "Status ID", FilterType.STRING, STATUS_OPERATORS)


def state_name_filter():
    return _filter(
        "stateName", "Status Name", FilterType.STRING,
        ("equals", "notEquals", "in", "contains"),
        values=STATE_NAMES,
    )


def created_at_filter():
    return _filter("createdAt", "Created At", FilterType.TIME, TIME_OPERATORS)


def started_at_filter():
    return _filter("startedAt", "Started At", FilterType.TIME, TIME_OPERATORS)


def deadline_filter():
    return _filter("submissionDeadline", "Deadline", FilterType.TIME, TIME_OPERATORS)


def submission_deadline_filter():
    return _filter("submissionDeadline", "Submission Deadline", FilterType.TIME, TIME_OPERATORS)
