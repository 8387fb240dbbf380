"""Tests for the analytics query builder.

WHAT: End-to-end translation of UI requests into Cube.js queries
WHY: The builder fixes the order and composition of strategy output

REFERENCES:
  - reporting/semantic/query_builder.py
  - reporting/semantic/query.py
"""

import pytest

from reporting.semantic.query import FilterGroup, UiFilter, UiPagination, UiQueryRequest, UiSort
from reporting.semantic.query_builder import AnalyticsQueryBuilder
from reporting.semantic.strategies import DatasetFamily, EventTranslationStrategy, StrategyResolver


@pytest.fixture
def builder():
    return AnalyticsQueryBuilder()


class TestEndToEnd:
    def test_events_scenario(self, builder, events_dataset):
        request = UiQueryRequest(
            dataset_id="events",
            kpis=["event_count"],
            group_by=["event_type"],
            filters=[UiFilter("created_at", "inDateRange", "2024-01-01,2024-01-31")],
            page=UiPagination(limit=100, offset=0),
        )

        query = builder.build(request, events_dataset)

        assert query.dataset == "events"
        assert query.measures == ["EventsView.count"]
        assert query.dimensions == ["EventsView.eventType"]
        assert [td.to_dict() for td in query.time_dimensions] == [
            {"dimension": "EventsView.createdAt", "dateRange": ["2024-01-01", "2024-01-31"], "granularity": None}
        ]
        assert query.filters == []
        assert query.order is None
        assert query.limit == 100
        assert query.offset == 0

    def test_identity_adds_tenant_filter(self, builder, events_dataset, identity):
        request = UiQueryRequest(dataset_id="events", kpis=["event_count"])
        query = builder.build(request, events_dataset, identity)
        assert [f.to_dict() for f in query.filters] == [
            {"member": "EventsView.tenantId", "operator": "equals", "values": ["T1"]}
        ]

    def test_filter_order_plain_security_then_groups(self, builder, test_dataset, identity):
        request = UiQueryRequest(
            dataset_id=test_dataset.id,
            kpis=["event_count"],
            filters=[UiFilter("status", "equals", "open")],
            filter_groups=[FilterGroup("or", [UiFilter("rounds", "gt", 1), UiFilter("rounds", "lt", 5)])],
            sort=UiSort("event_count", "DESC"),
            page=UiPagination(limit=5000, offset=20),
        )

        query = builder.build(request, test_dataset, identity)
        filters = [f.to_dict() for f in query.filters]

        assert filters[0]["member"] == "EventsView.status"
        assert filters[1] == {"member": "EventsView.tenant", "operator": "equals", "values": ["T1"]}
        assert list(filters[2].keys()) == ["or"]
        assert query.order == {"EventsView.count": "desc"}
        assert query.limit == 1000
        assert query.offset == 20

    def test_supplier_dataset(self, builder, supplier_dataset):
        request = UiQueryRequest(
            dataset_id="supplier_reports",
            kpis=["order_volume"],
            group_by=["supplier_name"],
            filters=[UiFilter("supplier_status", "in", ["active", "blocked"])],
        )
        query = builder.build(request, supplier_dataset)
        assert query.measures == ["RfqSuppliers.orderVolume"]
        assert query.dimensions == ["RfqSuppliers.supplierName"]
        assert query.filters[0].to_dict() == {
            "member": "RfqSuppliers.status", "operator": "equals", "values": ["active", "blocked"],
        }

    def test_uses_resolved_strategy(self, events_dataset):
        calls = []

        class RecordingStrategy(EventTranslationStrategy):
            def translate_measures(self, kpi_ids, dataset):
                calls.append(dataset.id)
                return super().translate_measures(kpi_ids, dataset)

        builder = AnalyticsQueryBuilder(StrategyResolver({DatasetFamily.EVENTS: RecordingStrategy()}))
        builder.build(UiQueryRequest(dataset_id="events", kpis=["event_count"]), events_dataset)
        assert calls == ["events"]


class TestCubePayload:
    def test_payload_drops_dataset_and_nulls(self, builder, test_dataset):
        request = UiQueryRequest(
            dataset_id=test_dataset.id,
            kpis=["event_count"],
            filters=[UiFilter("created_at", "inDateRange", "last 30 days")],
        )
        payload = builder.build(request, test_dataset).to_cube_query()

        assert "dataset" not in payload
        assert "order" not in payload
        assert payload["timeDimensions"] == [{"dimension": "EventsView.createdAt", "dateRange": "last 30 days"}]
        assert payload["measures"] == ["EventsView.count"]
        assert payload["limit"] == 100
        assert payload["offset"] == 0

    def test_payload_keeps_order_and_composites(self, builder, test_dataset):
        request = UiQueryRequest(
            dataset_id=test_dataset.id,
            kpis=["event_count"],
            filter_groups=[FilterGroup("and", [UiFilter("status", "equals", "x")])],
            sort=UiSort("event_type", "asc"),
        )
        payload = builder.build(request, test_dataset).to_cube_query()
        assert payload["order"] == {"EventsView.eventType": "asc"}
        assert payload["filters"] == [
            {"and": [{"member": "EventsView.status", "operator": "equals", "values": ["x"]}]}
        ]

    def test_to_dict_keeps_dataset(self, builder, test_dataset):
        query = builder.build(UiQueryRequest(dataset_id=test_dataset.id), test_dataset)
        assert query.to_dict()["dataset"] == test_dataset.id
        assert query.to_dict()["order"] is None
