"""Tests for unflagged cheat-meal and retention detection."""

from __future__ import annotations

from datetime import date

from bodytrack.tracking.anomalies import detect_anomalies
from bodytrack.tracking.models import WeightEntry


class TestDetectAnomalies:
    """Tests for detect_anomalies."""

    def test_too_few_entries(self, make_entries) -> None:
        assert detect_anomalies(make_entries([70.0, 72.0])).is_empty

    def test_cheat_meal_spike(self, make_entries) -> None:
        """A 1.0 kg rise that falls back 0.8 kg is a cheat meal, not retention."""
        entries = make_entries([70.0, 71.0, 70.2])
        report = detect_anomalies(entries)
        assert report.possible_cheat_meals == [entries[1].id]
        assert report.possible_retentions == []

    def test_retention_without_fall(self, make_entries) -> None:
        entries = make_entries([70.0, 71.2, 71.3])
        report = detect_anomalies(entries)
        assert report.possible_cheat_meals == []
        assert report.possible_retentions == [entries[1].id]

    def test_both_flags(self, make_entries) -> None:
        entries = make_entries([70.0, 71.5, 70.5])
        report = detect_anomalies(entries)
        assert report.possible_cheat_meals == [entries[1].id]
        assert report.possible_retentions == [entries[1].id]

    def test_already_flagged_skipped(self) -> None:
        entries = [
            WeightEntry(date=date(2025, 1, 1), weight=70.0),
            WeightEntry(date=date(2025, 1, 2), weight=72.0, is_cheat_meal=True),
            WeightEntry(date=date(2025, 1, 3), weight=70.0),
        ]
        assert detect_anomalies(entries).is_empty

    def test_endpoints_never_flagged(self, make_entries) -> None:
        entries = make_entries([75.0, 70.0, 70.1, 73.0])
        assert detect_anomalies(entries).is_empty

    def test_unsorted_input(self, make_entries) -> None:
        entries = make_entries([70.0, 71.0, 70.2])
        report = detect_anomalies([entries[2], entries[0], entries[1]])
        assert report.possible_cheat_meals == [entries[1].id]

    def test_entries_not_modified(self, make_entries) -> None:
        entries = make_entries([70.0, 72.0, 70.0])
        detect_anomalies(entries)
        assert not any(e.is_cheat_meal or e.is_retention for e in entries)
