from datetime import date, datetime

from fasttrack.services.challenge_templates import (
    CHALLENGE_TEMPLATES,
    generate_weekly_challenge,
    iso_week_number,
    iso_week_of,
    template_for_week,
    week_window,
)


def test_template_rotation_wraps():
    assert template_for_week(0) is CHALLENGE_TEMPLATES[0]
    assert template_for_week(len(CHALLENGE_TEMPLATES) + 3) is CHALLENGE_TEMPLATES[3]


def test_iso_week_belongs_to_previous_year_in_early_january():
    assert iso_week_of(date(2021, 1, 1)) == (2020, 53)
    assert iso_week_number(datetime(2024, 1, 1, 12)) == 1


def test_week_window_is_monday_to_sunday():
    start, end = week_window(2024, 1, "UTC")
    assert start.date() == date(2024, 1, 1)
    assert (start.hour, start.minute) == (0, 0)
    assert end.date() == date(2024, 1, 7)
    assert (end.hour, end.minute, end.second, end.microsecond) == (23, 59, 59, 999000)


def test_week_window_is_local_to_timezone():
    start, _ = week_window(2024, 10, "America/New_York")
    assert start.utcoffset().total_seconds() == -5 * 3600


def test_generate_weekly_challenge():
    challenge = generate_weekly_challenge(2024, 1, "UTC")
    template = CHALLENGE_TEMPLATES[1]
    assert challenge["name"] == template.name
    assert challenge["type"] == template.type.value
    assert challenge["target_value"] == template.target_value
    assert challenge["week_number"] == 1
    assert challenge["year"] == 2024
    assert challenge["start_date"] < challenge["end_date"]
