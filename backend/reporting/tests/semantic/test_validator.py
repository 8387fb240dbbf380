"""Tests for the query validator.

WHAT: Every rejection rule, the fixed check order, and accepted requests
WHY: The validator is the only place user-facing rejections come from

REFERENCES:
  - reporting/semantic/validator.py
  - reporting/semantic/errors.py
"""

import logging

import pytest

from reporting.semantic.errors import ErrorCode, ValidationError
from reporting.semantic.query import FilterGroup, UiFilter, UiPagination, UiQueryRequest, UiSort
from reporting.semantic.validator import QueryValidator, parse_date_range


@pytest.fixture
def validator():
    return QueryValidator()


def _request(**kwargs):
    kwargs.setdefault("dataset_id", "events_test")
    return UiQueryRequest(**kwargs)


def _code(validator, request, dataset):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(request, dataset)
    return exc_info.value.code


class TestAcceptedRequests:
    def test_known_ids_validate(self, validator, test_dataset):
        request = _request(
            kpis=["event_count", "secret_total"],
            group_by=["event_type", "created_at"],
            filters=[
                UiFilter("status", "in", ["open", "closed"]),
                UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-20"),
            ],
            filter_groups=[FilterGroup("OR", [UiFilter("rounds", "gt", 2)])],
            sort=UiSort("event_count", "DESC"),
            page=UiPagination(limit=1000, offset=0),
        )
        assert validator.validate(request, test_dataset) is None

    def test_end_to_end_events_request(self, validator, events_dataset):
        request = UiQueryRequest(
            dataset_id="events",
            kpis=["event_count"],
            group_by=["event_type"],
            filters=[UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-31")],
            page=UiPagination(limit=100, offset=0),
        )
        validator.validate(request, events_dataset)

    def test_empty_operator_list_accepts_any_operator(self, validator, test_dataset):
        request = _request(filters=[UiFilter("company", "startsWith", "DE")])
        validator.validate(request, test_dataset)


class TestDataset:
    def test_missing_dataset(self, validator):
        assert _code(validator, _request(), None) == ErrorCode.DATASET_NOT_FOUND

    def test_blank_dataset_id(self, validator, test_dataset):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(_request(dataset_id="  "), test_dataset)
        assert exc_info.value.code == ErrorCode.DATASET_NOT_FOUND
        assert exc_info.value.reason == "Dataset ID is required"


class TestFields:
    def test_unknown_measure(self, validator, test_dataset):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(_request(kpis=["event_count", "roi"]), test_dataset)
        error = exc_info.value
        assert error.code == ErrorCode.UNKNOWN_MEASURE
        assert "roi" in error.message
        assert error.to_dict()["code"] == "UNKNOWN_MEASURE"

    def test_unknown_dimension(self, validator, test_dataset):
        request = _request(group_by=["nope"])
        assert _code(validator, request, test_dataset) == ErrorCode.UNKNOWN_DIMENSION

    def test_unknown_filter_field(self, validator, test_dataset):
        request = _request(filters=[UiFilter("nope", "equals", "x")])
        assert _code(validator, request, test_dataset) == ErrorCode.UNKNOWN_FILTER_FIELD

    def test_operator_not_allowed(self, validator, test_dataset):
        request = _request(filters=[UiFilter("status", "contains", "x")])
        assert _code(validator, request, test_dataset) == ErrorCode.OPERATOR_NOT_ALLOWED

    def test_operator_compare_is_case_insensitive(self, validator, test_dataset):
        request = _request(filters=[UiFilter("status", "NOTEQUALS", "x")])
        validator.validate(request, test_dataset)


class TestDateRange:
    def test_range_over_cap_rejected(self, validator, dataset_factory):
        from reporting.semantic.model import SecurityPolicy

        dataset = dataset_factory(security=SecurityPolicy(max_date_range_days=3))
        request = _request(filters=[UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-05")])
        assert _code(validator, request, dataset) == ErrorCode.DATE_RANGE_EXCEEDED

    def test_range_within_cap_passes(self, validator, dataset_factory):
        from reporting.semantic.model import SecurityPolicy

        dataset = dataset_factory(security=SecurityPolicy(max_date_range_days=30))
        request = _request(filters=[UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-05")])
        validator.validate(request, dataset)

    def test_list_value(self, validator, test_dataset):
        request = _request(filters=[UiFilter("created_at", "inDateRange", ["2024-01-01", "2024-03-01"])])
        assert _code(validator, request, test_dataset) == ErrorCode.DATE_RANGE_EXCEEDED

    @pytest.mark.parametrize("value", [
        "last 365 days",
        "2024-01-01",
        "not-a-date,2030-01-01",
        ["2024-01-01"],
        None,
        42,
    ])
    def test_unparseable_ranges_are_not_checked(self, validator, test_dataset, value):
        request = _request(filters=[UiFilter("created_at", "inDateRange", value)])
        validator.validate(request, test_dataset)

    def test_no_security_policy_skips_check(self, validator, dataset_factory):
        dataset = dataset_factory(security=None)
        request = _request(filters=[UiFilter("created_at", "inDateRange", "2000-01-01,2030-01-01")])
        validator.validate(request, dataset)

    def test_parse_uses_first_two_parts(self):
        start, end = parse_date_range("2024-01-01,2024-01-05,2029-01-01")
        assert (end - start).days == 4

    def test_parse_normalises_aware_datetimes(self):
        start, end = parse_date_range(["2024-01-01T23:00:00-02:00", "2024-01-03T00:00:00Z"])
        assert start.tzinfo is None
        assert start.isoformat() == "2024-01-02T01:00:00"
        assert (end - start).days == 0


class TestFilterGroups:
    def test_invalid_logic(self, validator, test_dataset):
        request = _request(filter_groups=[FilterGroup("xor", [UiFilter("status", "equals", "a")])])
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_GROUP_LOGIC

    def test_logic_checked_before_members(self, validator, test_dataset):
        request = _request(filter_groups=[FilterGroup("nand", [UiFilter("nope", "equals", "a")])])
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_GROUP_LOGIC

    def test_member_field_checked(self, validator, test_dataset):
        request = _request(filter_groups=[FilterGroup("and", [UiFilter("nope", "equals", "a")])])
        assert _code(validator, request, test_dataset) == ErrorCode.UNKNOWN_FILTER_FIELD

    def test_member_operator_checked(self, validator, test_dataset):
        request = _request(filter_groups=[FilterGroup("Or", [UiFilter("rounds", "contains", "a")])])
        assert _code(validator, request, test_dataset) == ErrorCode.OPERATOR_NOT_ALLOWED


class TestPagination:
    @pytest.mark.parametrize("limit,offset", [(0, 0), (-5, 0), (10, -1)])
    def test_invalid_pagination(self, validator, test_dataset, limit, offset):
        request = _request(page=UiPagination(limit=limit, offset=offset))
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_PAGINATION

    def test_limit_exceeded(self, validator, test_dataset):
        request = _request(page=UiPagination(limit=1001))
        assert _code(validator, request, test_dataset) == ErrorCode.LIMIT_EXCEEDED

    def test_no_security_policy_no_cap(self, validator, dataset_factory):
        request = _request(page=UiPagination(limit=50000))
        validator.validate(request, dataset_factory(security=None))


class TestSort:
    def test_unknown_sort_field(self, validator, test_dataset):
        request = _request(sort=UiSort("nope", "asc"))
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_SORT

    def test_invalid_direction(self, validator, test_dataset):
        request = _request(sort=UiSort("event_type", "sideways"))
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_SORT

    def test_dimension_sort_allowed(self, validator, test_dataset):
        validator.validate(_request(sort=UiSort("event_type", "Asc")), test_dataset)


class TestCheckOrder:
    """First violation in the fixed order wins."""

    def test_measure_before_dimension(self, validator, test_dataset):
        request = _request(kpis=["bad"], group_by=["bad"])
        assert _code(validator, request, test_dataset) == ErrorCode.UNKNOWN_MEASURE

    def test_dimension_before_filter(self, validator, test_dataset):
        request = _request(group_by=["bad"], filters=[UiFilter("bad", "equals", "x")])
        assert _code(validator, request, test_dataset) == ErrorCode.UNKNOWN_DIMENSION

    def test_filters_before_groups(self, validator, test_dataset):
        request = _request(
            filters=[UiFilter("status", "contains", "x")],
            filter_groups=[FilterGroup("xor", [])],
        )
        assert _code(validator, request, test_dataset) == ErrorCode.OPERATOR_NOT_ALLOWED

    def test_groups_before_pagination(self, validator, test_dataset):
        request = _request(filter_groups=[FilterGroup("xor", [])], page=UiPagination(limit=0))
        assert _code(validator, request, test_dataset) == ErrorCode.INVALID_GROUP_LOGIC

    def test_pagination_before_sort(self, validator, test_dataset):
        request = _request(page=UiPagination(limit=5000), sort=UiSort("bad"))
        assert _code(validator, request, test_dataset) == ErrorCode.LIMIT_EXCEEDED


class TestLogging:
    def test_rejection_logged_as_warning(self, validator, test_dataset, caplog):
        with caplog.at_level(logging.WARNING, logger="reporting.semantic.validator"):
            with pytest.raises(ValidationError):
                validator.validate(_request(kpis=["roi"]), test_dataset)
        assert "UNKNOWN_MEASURE" in caplog.text
