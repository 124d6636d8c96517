"""Tests for alias labels and first-interaction ordering."""

from datetime import datetime, timezone

import pytest

from app.modules.messaging.aliases import (
    alias_label, alias_index, free_labels, order_by_first_interaction,
    parse_timestamp, plan_alias_assignments, sort_key,
)


class TestAliasLabels:
    @pytest.mark.parametrize("index,label", [
        (0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA"),
    ])
    def test_label_sequence(self, index, label):
        assert alias_label(index) == label
        assert alias_index(label) == index

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            alias_label(-1)

    @pytest.mark.parametrize("label", ["", "a", "A1", "Ä"])
    def test_invalid_label_rejected(self, label):
        with pytest.raises(ValueError):
            alias_index(label)

    def test_free_labels_fills_gaps_first(self):
        labels = free_labels(["A", "C"])
        assert [next(labels) for _ in range(3)] == ["B", "D", "E"]

    def test_free_labels_ignores_foreign_labels(self):
        labels = free_labels(["1", "A"])
        assert next(labels) == "B"

    def test_free_labels_continue_past_z(self):
        used = [alias_label(i) for i in range(26)]
        assert next(free_labels(used)) == "AA"


class TestFirstInteractionOrdering:
    def test_orders_by_earliest_timestamp(self):
        interactions = [
            ("b", "2024-01-03T00:00:00+00:00"),
            ("a", "2024-01-02T00:00:00+00:00"),
            ("b", "2024-01-01T00:00:00+00:00"),
        ]
        assert order_by_first_interaction(interactions) == ["b", "a"]

    def test_ties_broken_by_id(self):
        ts = "2024-01-01T00:00:00Z"
        assert order_by_first_interaction([("z", ts), ("m", ts)]) == ["m", "z"]

    def test_unparseable_timestamps_sort_last(self):
        interactions = [("late", None), ("early", "2024-05-01T00:00:00")]
        assert order_by_first_interaction(interactions) == ["early", "late"]

    def test_empty_ids_skipped(self):
        assert order_by_first_interaction([(None, "2024-01-01T00:00:00Z"), ("", None)]) == []

    def test_trimmed_fractions_compare_correctly(self):
        interactions = [
            ("a", "2024-01-01T12:00:01.500000+00:00"),
            ("b", "2024-01-01T12:00:00.12345+00:00"),
        ]
        assert order_by_first_interaction(interactions) == ["b", "a"]


class TestParseTimestamp:
    @pytest.mark.parametrize("value, micros", [
        ("2024-01-01T12:00:00.12345+00:00", 123450),
        ("2024-01-01T12:00:00.5+00:00", 500000),
        ("2024-01-01T12:00:00.1234567+00:00", 123456),
    ])
    def test_any_fraction_length(self, value, micros):
        assert parse_timestamp(value).microsecond == micros

    def test_short_offset_and_space_separator(self):
        parsed = parse_timestamp("2024-01-01 12:00:00.12+00")
        assert parsed == datetime(2024, 1, 1, 12, 0, 0, 120000, tzinfo=timezone.utc)

    def test_naive_values_are_utc(self):
        assert parse_timestamp("2024-01-01T12:00:00").tzinfo == timezone.utc

    def test_date_only(self):
        assert parse_timestamp("2024-05-01") == datetime(2024, 5, 1, tzinfo=timezone.utc)


class TestPlanAliasAssignments:
    def test_new_contractors_get_labels_in_order(self):
        assert plan_alias_assignments({}, ["x", "y"]) == [("x", "A"), ("y", "B")]

    def test_existing_aliases_are_kept(self):
        planned = plan_alias_assignments({"y": "A"}, ["x", "y", "z"])
        assert planned == [("x", "B"), ("z", "C")]

    def test_nothing_to_assign(self):
        assert plan_alias_assignments({"x": "A"}, ["x"]) == []

    def test_sort_key_orders_labels_naturally(self):
        labels = ["AA", None, "B", "A", "Z"]
        assert sorted(labels, key=sort_key) == ["A", "B", "Z", "AA", None]
