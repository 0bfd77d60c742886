"""Tests for CSV import and export of weight entries."""

from __future__ import annotations

from datetime import date

import pytest

from bodytrack.data.csv_import import (
    export_csv,
    parse_csv,
    parse_date,
    parse_flag,
    parse_weight,
    read_csv_file,
)
from bodytrack.errors import ImportFormatError
from bodytrack.tracking.models import WeightEntry

HEADER = "Date,Weight (kg),Cheat Meal,Retention,Notes\n"


class TestFieldParsers:
    def test_dates(self) -> None:
        assert parse_date("2025-01-15") == date(2025, 1, 15)
        assert parse_date(" 16/01/2025 ") == date(2025, 1, 16)
        with pytest.raises(ValueError):
            parse_date("01-16-2025")

    def test_weights(self) -> None:
        assert parse_weight("80.4") == 80.4
        assert parse_weight("80,9") == 80.9
        assert parse_weight("500") == 500.0
        for bad in ("0", "-3", "500.1", "heavy"):
            with pytest.raises(ValueError):
                parse_weight(bad)

    @pytest.mark.parametrize("value", ["Sí", "si", "YES", "true", "1", " yes "])
    def test_true_flags(self, value: str) -> None:
        assert parse_flag(value) is True

    @pytest.mark.parametrize("value", ["No", "false", "0", "", "maybe"])
    def test_false_flags(self, value: str) -> None:
        assert parse_flag(value) is False


class TestParseCsv:
    """Tests for parse_csv."""

    def test_comma_file(self) -> None:
        text = HEADER + '2025-01-15,80.4,No,No,\n16/01/2025,"80,9",Yes,No,Pizza night\n'
        result = parse_csv(text)

        assert result.errors == []
        assert len(result.entries) == 2
        first, second = result.entries
        assert (first.date, first.weight, first.is_cheat_meal, first.notes) == (
            date(2025, 1, 15), 80.4, False, None,
        )
        assert (second.date, second.weight, second.is_cheat_meal, second.notes) == (
            date(2025, 1, 16), 80.9, True, "Pizza night",
        )

    def test_semicolon_file(self) -> None:
        text = "Fecha;Peso;Cheat;Retención;Notas\n2025-01-15;80,4;No;Sí;\n"
        result = parse_csv(text)
        assert result.entries[0].weight == 80.4
        assert result.entries[0].is_retention is True

    def test_bad_rows_skipped_with_line_numbers(self) -> None:
        text = (
            HEADER
            + "2025-01-15,80.4,No,No,\n"
            + "not-a-date,80.0,No,No,\n"
            + "2025-01-17,600,No,No,\n"
            + "2025-01-18,,No,No,\n"
            + "2025-01-19,79.9,No,No,\n"
        )
        result = parse_csv(text)

        assert [e.date.day for e in result.entries] == [15, 19]
        assert result.errors == [
            "Line 3: Invalid date 'not-a-date'",
            "Line 4: Invalid weight '600'",
            "Line 5: invalid format",
        ]

    def test_line_numbers_count_blank_lines(self) -> None:
        text = "Date,Weight\n2025-01-01,80\n\n2025-01-03,abc\n\n   \n2025-01-05,81\n"
        result = parse_csv(text)
        assert result.errors == ["Line 4: Invalid weight 'abc'"]
        assert [e.weight for e in result.entries] == [80.0, 81.0]

    def test_short_row_is_invalid_format(self) -> None:
        result = parse_csv(HEADER + "2025-01-15\n2025-01-16,80.0\n")
        assert result.errors == ["Line 2: invalid format"]
        assert len(result.entries) == 1

    def test_byte_order_mark(self) -> None:
        result = parse_csv("\ufeff" + HEADER + "2025-01-15,80.4,No,No,\n")
        assert len(result.entries) == 1

    @pytest.mark.parametrize("text", ["", "   \n", HEADER])
    def test_no_data_rows(self, text: str) -> None:
        with pytest.raises(ImportFormatError):
            parse_csv(text)

    def test_nothing_valid(self) -> None:
        with pytest.raises(ImportFormatError) as exc_info:
            parse_csv(HEADER + "yesterday,80,No,No,\n")
        assert exc_info.value.errors == ["Line 2: Invalid date 'yesterday'"]

    def test_read_file(self, tmp_path) -> None:
        path = tmp_path / "weights.csv"
        path.write_text(HEADER + "2025-01-15,80.4,No,No,\n", encoding="utf-8")
        assert read_csv_file(path).entries[0].weight == 80.4


class TestExportCsv:
    """Tests for export_csv."""

    def test_format(self) -> None:
        entries = [
            WeightEntry(date=date(2025, 1, 16), weight=80.9, is_cheat_meal=True, notes="Pizza, beer"),
            WeightEntry(date=date(2025, 1, 15), weight=80.4),
        ]
        assert export_csv(entries).splitlines() == [
            "Date,Weight (kg),Cheat Meal,Retention,Notes",
            "2025-01-15,80.4,No,No,",
            '2025-01-16,80.9,Yes,No,"Pizza, beer"',
        ]

    def test_exported_file_reimports(self) -> None:
        entries = [
            WeightEntry(date=date(2025, 1, 15), weight=80.4, is_retention=True, notes="Salty dinner"),
            WeightEntry(date=date(2025, 1, 16), weight=80.1),
        ]
        result = parse_csv(export_csv(entries))
        assert [(e.date, e.weight, e.is_retention, e.notes) for e in result.entries] == [
            (date(2025, 1, 15), 80.4, True, "Salty dinner"),
            (date(2025, 1, 16), 80.1, False, None),
        ]
