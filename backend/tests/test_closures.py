"""Tests for the business closure calendar."""

from datetime import date

from scheduler.integrations.closures import (
    ClosureDate,
    StaticClosureCalendar,
    parse_closure_dates,
)


class TestStaticClosureCalendar:
    def test_recurring_closures_apply_every_year(self, closures):
        for year in (2025, 2026, 2030):
            assert closures.is_closure_date(date(year, 12, 25))
            assert closures.is_closure_date(date(year, 1, 26))

    def test_christmas_period_runs_to_the_thirtieth(self, closures):
        assert closures.is_closure_date(date(2026, 12, 30))
        assert not closures.is_closure_date(date(2026, 12, 31))
        assert not closures.is_closure_date(date(2026, 12, 24))

    def test_closure_info_names_the_closure(self, closures):
        info = closures.closure_info(date(2026, 12, 26))
        assert info is not None
        assert info.name == "Boxing Day"
        assert closures.closure_info(date(2026, 6, 3)) is None

    def test_specific_closures_match_only_their_date(self):
        calendar = StaticClosureCalendar(
            specific=[ClosureDate("Facility Maintenance", specific_date=date(2026, 7, 15))]
        )
        assert calendar.is_closure_date(date(2026, 7, 15))
        assert not calendar.is_closure_date(date(2027, 7, 15))

    def test_recurring_closure_wins_over_specific_on_same_day(self):
        calendar = StaticClosureCalendar(
            specific=[ClosureDate("Stocktake", specific_date=date(2026, 12, 25))]
        )
        assert calendar.closure_info(date(2026, 12, 25)).name == "Christmas Day"

    def test_closure_dates_for_year(self, closures):
        dates = closures.closure_dates_for_year(2026)
        assert dates[0] == date(2026, 1, 1)
        assert date(2026, 1, 26) in dates
        assert len(dates) == 8

    def test_closure_dates_in_range_is_inclusive(self, closures):
        assert closures.closure_dates_in_range(date(2026, 12, 24), date(2026, 12, 26)) == [
            date(2026, 12, 25),
            date(2026, 12, 26),
        ]

    def test_booking_availability(self, closures):
        today = date(2026, 6, 1)
        assert closures.is_date_available_for_booking(date(2026, 6, 3), today=today)
        assert not closures.is_date_available_for_booking(date(2026, 5, 29), today=today)  # past
        assert not closures.is_date_available_for_booking(date(2026, 6, 6), today=today)  # Saturday
        assert not closures.is_date_available_for_booking(date(2027, 1, 26), today=today)

    def test_next_available_date_skips_closures_and_weekends(self, closures):
        # 25 Dec 2026 is a Friday; the Christmas block runs to Wednesday the 30th
        assert closures.next_available_date(date(2026, 12, 25)) == date(2026, 12, 31)


class TestParseClosureDates:
    def test_parses_named_entries(self):
        parsed = parse_closure_dates("2026-07-15=Facility Maintenance; 2026-09-01=Staff Day")
        assert [c.specific_date for c in parsed] == [date(2026, 7, 15), date(2026, 9, 1)]
        assert parsed[0].name == "Facility Maintenance"
        assert not parsed[0].recurring

    def test_skips_malformed_entries(self):
        parsed = parse_closure_dates("not-a-date=Oops;2026-07-15;;")
        assert len(parsed) == 1
        assert parsed[0].name == "Business closure"

    def test_empty_value(self):
        assert parse_closure_dates("") == []
