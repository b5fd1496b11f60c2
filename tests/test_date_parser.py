from datetime import date

import pytest

from profile_autofill.utils.date_parser import (
    find_single_date,
    months_between,
    newest_first_key,
    normalize_date,
    parse_date_range,
)


class TestNormalizeDate:
    """Single date tokens to YYYY-MM / YYYY"""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("Jan 2020", "2020-01"),
            ("September 2019", "2019-09"),
            ("Sept. 2019", "2019-09"),
            ("03/2020", "2020-03"),
            ("2020-03", "2020-03"),
            ("2020", "2020"),
        ],
    )
    def test_recognized_formats(self, token, expected):
        assert normalize_date(token) == expected

    def test_invalid_month(self):
        assert normalize_date("13/2020") is None

    def test_not_a_date(self):
        assert normalize_date("Summer 2019") is None


class TestParseDateRange:
    """Date ranges as written in CVs"""

    def test_month_year_to_present(self):
        result = parse_date_range("Jan 2020 – Present")
        assert (result.start, result.end, result.current, result.parsed) == ("2020-01", None, True, True)

    def test_year_range(self):
        result = parse_date_range("2020-2022")
        assert (result.start, result.end, result.current) == ("2020", "2022", False)

    def test_numeric_month_ranges(self):
        assert parse_date_range("03/2020-03/2022")[:2] == ("2020-03", "2022-03")
        assert parse_date_range("2020-03 to 2022-05")[:2] == ("2020-03", "2022-05")

    def test_month_names(self):
        assert parse_date_range("March 2019 - June 2021")[:2] == ("2019-03", "2021-06")

    def test_current_variants(self):
        for word in ("current", "Now", "today"):
            assert parse_date_range(f"2019 - {word}").current is True

    def test_loose_range_kept_raw(self):
        result = parse_date_range("Summer 2019 - Fall 2020")
        assert result.parsed is False
        assert result.current is False
        assert (result.start, result.end) == ("Summer 2019", "Fall 2020")

    def test_no_range(self):
        assert parse_date_range("Software Engineer at Acme") is None


class TestOrdering:
    def test_newest_first_key(self):
        entries = [("2021", False), (None, False), ("2023", False), (None, True), ("2023-06", False)]
        ordered = sorted(entries, key=lambda e: newest_first_key(*e))
        assert ordered == [(None, True), (None, False), ("2023-06", False), ("2023", False), ("2021", False)]

    def test_find_single_date_takes_last(self):
        assert find_single_date("Enrolled 2014, graduated May 2018") == "2018-05"

    def test_months_between(self):
        assert months_between("2020-01", "2022-07") == 30
        assert months_between("2021-01", None, as_of=date(2023, 1, 15)) == 24
        assert months_between(None, "2022") == 0
