"""Tests for date display formatting."""

import pytest

from vtexalert.domain.dates import format_date_if_valid, is_date_like


class TestFormatDateIfValid:
    def test_iso_utc_timestamp(self):
        assert format_date_if_valid("2024-03-05T00:00:00Z") == "05/03/2024"

    def test_not_a_date_unchanged(self):
        assert format_date_if_valid("not-a-date") == "not-a-date"

    def test_plain_iso_date(self):
        assert format_date_if_valid("2024-12-31") == "31/12/2024"

    def test_vtex_seven_fraction_digits(self):
        assert format_date_if_valid("2024-03-05T13:45:00.1234567+00:00") == "05/03/2024"

    def test_offset_converted_to_utc(self):
        # 22:30 at -03:00 is already the next day in UTC
        assert format_date_if_valid("2024-03-05T22:30:00-03:00") == "06/03/2024"

    def test_brazilian_date_kept_day_first(self):
        assert format_date_if_valid("05/03/2024") == "05/03/2024"

    @pytest.mark.parametrize("value", ["2024-02-30", "2023-13-01", "31/02/2024"])
    def test_impossible_dates_unchanged(self, value):
        assert format_date_if_valid(value) == value

    def test_date_inside_free_text_unchanged(self):
        value = "pedido feito em 2024-03-05"
        assert format_date_if_valid(value) == value

    def test_empty_string(self):
        assert format_date_if_valid("") == ""


class TestIsDateLike:
    def test_iso_substring(self):
        assert is_date_like("x 2024-03-05 y")

    def test_slash_substring(self):
        assert is_date_like("05/03/2024")

    def test_short_year_is_not_date_like(self):
        assert not is_date_like("05/03/24")
