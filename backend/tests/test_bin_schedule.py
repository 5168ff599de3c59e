"""Tests for fortnightly bin parity and bin labels."""

from datetime import datetime, timedelta

import pytest

from app.services.bin_schedule import (
    REFERENCE_START,
    WEEK,
    format_bin_label,
    get_bin_schedule,
    is_bin_scheduled_this_week,
    normalise_bin_list,
    weeks_since_reference,
)

EVEN_WEEK = REFERENCE_START + timedelta(days=2)   # weeks == 0
ODD_WEEK = REFERENCE_START + WEEK + timedelta(days=2)  # weeks == 1


class TestWeeksSinceReference:

    def test_reference_instant_is_week_zero(self):
        assert weeks_since_reference(REFERENCE_START) == 0

    def test_just_before_reference_floors_to_minus_one(self):
        assert weeks_since_reference(REFERENCE_START - timedelta(seconds=1)) == -1

    def test_boundary_is_exact_week(self):
        assert weeks_since_reference(REFERENCE_START + WEEK) == 1
        assert weeks_since_reference(REFERENCE_START + WEEK - timedelta(seconds=1)) == 0

    def test_naive_datetime_is_utc(self):
        assert weeks_since_reference(datetime(2024, 8, 11, 6, 0)) == 1


class TestIsBinScheduledThisWeek:

    @pytest.mark.parametrize("now", [EVEN_WEEK, ODD_WEEK])
    def test_weekly_always(self, now):
        assert is_bin_scheduled_this_week("Weekly", "No", now)
        assert is_bin_scheduled_this_week("  weekly ", None, now)

    def test_fortnightly_without_flip_runs_on_odd_weeks(self):
        assert is_bin_scheduled_this_week("Fortnightly", "No", ODD_WEEK)
        assert not is_bin_scheduled_this_week("Fortnightly", "No", EVEN_WEEK)

    def test_fortnightly_flipped_runs_on_even_weeks(self):
        assert is_bin_scheduled_this_week("Fortnightly", "Yes", EVEN_WEEK)
        assert is_bin_scheduled_this_week("fortnightly", "YES", EVEN_WEEK)
        assert not is_bin_scheduled_this_week("Fortnightly", "yes", ODD_WEEK)

    @pytest.mark.parametrize("offset", range(-4, 6))
    def test_parity_alternates(self, offset):
        now = REFERENCE_START + offset * WEEK + timedelta(hours=1)
        odd = weeks_since_reference(now) % 2 == 1
        assert is_bin_scheduled_this_week("Fortnightly", None, now) is odd
        assert is_bin_scheduled_this_week("Fortnightly", "Yes", now) is not odd

    @pytest.mark.parametrize("frequency", [None, "", "   ", "Monthly", "never"])
    def test_other_frequencies_never(self, frequency):
        assert not is_bin_scheduled_this_week(frequency, "Yes", EVEN_WEEK)
        assert not is_bin_scheduled_this_week(frequency, "No", ODD_WEEK)


class TestGetBinSchedule:

    def test_active_colors_in_fixed_order(self):
        selection = {
            "green_freq": "Weekly",
            "red_freq": "Weekly",
            "yellow_freq": "Fortnightly",
            "yellow_flip": "Yes",
        }
        schedule = get_bin_schedule(selection, EVEN_WEEK)
        assert schedule.active_colors == ["Red", "Yellow", "Green"]
        assert schedule.status == {"red": True, "yellow": True, "green": True}

    def test_off_week(self):
        selection = {"red_freq": "Weekly", "yellow_freq": "Fortnightly", "yellow_flip": "Yes"}
        schedule = get_bin_schedule(selection, ODD_WEEK)
        assert schedule.active_colors == ["Red"]
        assert schedule.status["yellow"] is False
        assert schedule.status["green"] is False

    def test_empty_selection(self):
        assert get_bin_schedule({}, EVEN_WEEK).active_colors == []


class TestBinLabels:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Red", "Garbage"),
            ("general waste", "Garbage"),
            ("Yellow", "Recycling"),
            ("co-mingled", "Recycling"),
            ("Green", "Compost"),
            ("FOOD organics", "Compost"),
            ("glass only", "Glass Only"),
        ],
    )
    def test_format_bin_label(self, raw, expected):
        assert format_bin_label(raw) == expected

    def test_blank_and_non_strings(self):
        assert format_bin_label("  ") is None
        assert format_bin_label(None) is None
        assert format_bin_label(3) is None

    def test_normalise_bin_list_deduplicates_in_order(self):
        assert normalise_bin_list("Red, Yellow, red, Green") == ["Garbage", "Recycling", "Compost"]
        assert normalise_bin_list(["Yellow", "Red"]) == ["Recycling", "Garbage"]

    def test_normalise_bin_list_empty(self):
        assert normalise_bin_list(None) == []
        assert normalise_bin_list("") == []
        assert normalise_bin_list(5) == []
