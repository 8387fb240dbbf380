"""Tests for the dataset definition model.

WHAT: Applicability, operator checks, schema description, immutability
WHY: Every other component resolves ids through these definitions

REFERENCES:
  - reporting/semantic/model.py
"""

import dataclasses

import pytest

from reporting.semantic.model import (
    DatasetDefinition,
    DimensionDefinition,
    DimensionType,
    EventType,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    MeasureType,
)


class TestApplicability:
    """is_applicable is shared by measures, dimensions and filters."""

    @pytest.mark.parametrize("definition", [
        MeasureDefinition("EventsView.quotationTotal", applicable_event_types=frozenset({EventType.RFQ})),
        DimensionDefinition("EventsView.companyCode", applicable_event_types=frozenset({EventType.RFQ})),
        FilterDefinition("EventsView.companyCode", applicable_event_types=frozenset({EventType.RFQ})),
    ])
    def test_restricted_field(self, definition):
        assert definition.is_applicable(EventType.RFQ) is True
        assert definition.is_applicable(EventType.RFI) is False
        assert definition.is_applicable(EventType.ALL) is True

    def test_unrestricted_field_always_applies(self):
        measure = MeasureDefinition("EventsView.count")
        assert all(measure.is_applicable(t) for t in EventType)


class TestFilterDefinition:
    def test_operator_check_is_case_insensitive(self):
        f = FilterDefinition("X.status", allowed_operators=("equals", "notEquals"))
        assert f.allows_operator("EQUALS")
        assert f.allows_operator("notequals")
        assert not f.allows_operator("contains")

    def test_empty_operator_list_allows_anything(self):
        f = FilterDefinition("X.code", allowed_operators=())
        assert f.allows_operator("whatever")

    def test_is_time(self):
        assert FilterDefinition("X.createdAt", type=FilterType.TIME).is_time
        assert not FilterDefinition("X.status").is_time


class TestSemanticTypeDefaults:
    def test_measure_formats(self):
        assert MeasureType.FINANCIAL.default_format == "currency"
        assert MeasureType.RATE.default_format == "percent"
        assert MeasureType.COUNT.default_format == "number"
        assert all(t.default_type == "number" for t in MeasureType)

    def test_dimension_types(self):
        assert DimensionType.TIME.default_type == "time"
        assert DimensionType.FLAG.default_type == "boolean"
        assert DimensionType.PEOPLE.default_type == "string"
        assert DimensionType.FLAG.is_filterable is False
        assert DimensionType.STATUS.is_filterable is True


class TestDatasetDefinition:
    def test_mappings_are_read_only(self, test_dataset):
        with pytest.raises(TypeError):
            test_dataset.measures["new"] = MeasureDefinition("X.new")

    def test_dataset_is_frozen(self, test_dataset):
        with pytest.raises(dataclasses.FrozenInstanceError):
            test_dataset.id = "other"

    def test_builder_dict_changes_do_not_leak(self):
        measures = {"a": MeasureDefinition("X.a")}
        dataset = DatasetDefinition(id="d", label="D", measures=measures)
        measures["b"] = MeasureDefinition("X.b")
        assert "b" not in dataset.measures

    def test_find_member_metadata_prefers_measures(self):
        dataset = DatasetDefinition(
            id="d",
            label="D",
            measures={"m": MeasureDefinition("X.shared", label="Measure", type="number")},
            dimensions={"d": DimensionDefinition("X.shared", label="Dimension", type="string")},
        )
        assert dataset.find_member_metadata("X.shared") == ("Measure", "number")
        assert dataset.find_member_metadata("X.unknown") is None

    def test_describe_excludes_hidden_measures(self, test_dataset):
        schema = test_dataset.describe()
        measure_ids = [m["id"] for m in schema["measures"]]
        assert "event_count" in measure_ids
        assert "secret_total" not in measure_ids
        # Hidden measures remain part of the definition
        assert "secret_total" in test_dataset.measures

    def test_describe_filter_shape(self, events_dataset):
        schema = events_dataset.describe()
        filters = {f["id"]: f for f in schema["filters"]}

        assert filters["created_at"]["type"] == "time"
        assert filters["created_at"]["operators"] == ["inDateRange", "afterDate", "beforeDate"]
        assert "allowedValues" not in filters["created_at"]
        assert "Running" in filters["state_name"]["allowedValues"]
        assert schema["id"] == "events"
        assert schema["label"] == "Event Reports (RFQ, RFI)"
