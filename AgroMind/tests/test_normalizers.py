from datetime import date, datetime, timezone

import pytest

from utils.datetime_utils import (
    get_week_start,
    parse_date_any,
    parse_date_only,
    prev_month_key,
    start_of_next_month,
)
from utils.normalizers import clean_name, clean_optional, keyword_category, normalize_text, parse_amount


class TestText:
    def test_clean_name(self):
        assert clean_name("  Finca  ", "X") == "Finca"
        assert clean_name("   ", "Punto") == "Punto"
        assert clean_name(None, "Zona") == "Zona"
        assert clean_name("a" * 100, "X") == "a" * 80

    def test_clean_optional(self):
        assert clean_optional("  ", 10) is None
        assert clean_optional(12, 10) is None
        assert clean_optional(" abcdef ", 3) == "abc"

    def test_normalize_text(self):
        assert normalize_text("  Fertilización ÁREA ") == "fertilizacion area"
        assert normalize_text(None) == ""


class TestAmounts:
    @pytest.mark.parametrize("value,expected", [
        (10, 10.0),
        (0, 0.0),
        ("1,250.50", 1250.5),
        (" 7 ", 7.0),
    ])
    def test_valid(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [-1, "", "abc", True, None, float("nan"), float("inf"), [1]])
    def test_invalid(self, value):
        assert parse_amount(value) is None


class TestKeywordCategory:
    @pytest.mark.parametrize("concept,category,expected", [
        ("Compra de UREA", None, "Fertilizantes"),
        ("Saco de concentrado", "General", "Alimentación"),
        ("Diésel", "", "Transporte"),
        ("Vacuna aftosa", None, "Sanidad"),
        ("Aspersor nuevo", None, "Riego"),
        ("Repuesto motosierra", None, "Mantenimiento"),
        ("Varios", None, "General"),
        ("Urea", "Insumos", "Insumos"),
    ])
    def test_mapping(self, concept, category, expected):
        assert keyword_category(concept, category) == expected


class TestDates:
    def test_parse_date_only_is_strict(self):
        assert parse_date_only("2030-02-28") == date(2030, 2, 28)
        assert parse_date_only("2030-02-30") is None
        assert parse_date_only("2030-2-3") is None
        assert parse_date_only(date(2030, 1, 1)) is None

    def test_parse_date_any(self):
        assert parse_date_any("2030-04-10T15:30:00") == date(2030, 4, 10)
        assert parse_date_any(datetime(2030, 4, 10, 23, 0, tzinfo=timezone.utc)) == date(2030, 4, 10)
        assert parse_date_any(date(2030, 4, 10)) == date(2030, 4, 10)
        assert parse_date_any("ayer") is None
        assert parse_date_any("") is None

    def test_month_helpers(self):
        assert prev_month_key("2030-01") == "2029-12"
        assert prev_month_key("2030-07") == "2030-06"
        assert prev_month_key("julio") == ""
        assert start_of_next_month(date(2030, 12, 15)) == date(2031, 1, 1)

    def test_week_starts_on_monday(self):
        assert get_week_start(date(2030, 5, 22)) == date(2030, 5, 20)
        assert get_week_start(date(2030, 5, 20)) == date(2030, 5, 20)
