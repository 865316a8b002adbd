"""
Rotating templates for the community weekly challenge.

One challenge exists per ISO week; its template is picked by week number so
every server generates the same challenge for the same week.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from fasttrack.services.challenge_progress import ChallengeType
from fasttrack.services.records import TimezoneLike, resolve_tz


@dataclass(frozen=True)
class ChallengeTemplate:
    name: str
    type: ChallengeType
    target_value: int
    description: str
    badge_id: Optional[str] = None


CHALLENGE_TEMPLATES: tuple[ChallengeTemplate, ...] = (
    ChallengeTemplate("Fast Five", ChallengeType.COMPLETE_FASTS, 5,
                      "Complete 5 fasts this week to build consistency"),
    ChallengeTemplate("Hour Hunter", ChallengeType.TOTAL_HOURS, 80,
                      "Accumulate 80 hours of fasting this week"),
    ChallengeTemplate("Marathon Fast", ChallengeType.LONGEST_FAST, 24,
                      "Complete a 24-hour fast this week"),
    ChallengeTemplate("Streak Seeker", ChallengeType.STREAK, 7,
                      "Maintain a 7-day fasting streak"),
    ChallengeTemplate("The Daily Faster", ChallengeType.COMPLETE_FASTS, 7,
                      "Fast every day this week"),
    ChallengeTemplate("Century Club", ChallengeType.TOTAL_HOURS, 100,
                      "Fast for 100 total hours this week"),
    ChallengeTemplate("Extended Challenge", ChallengeType.LONGEST_FAST, 36,
                      "Complete a 36-hour extended fast"),
    ChallengeTemplate("Triple Threat", ChallengeType.COMPLETE_FASTS, 3,
                      "Complete at least 3 fasts this week"),
)


def iso_week_number(day: date) -> int:
    if isinstance(day, datetime):
        day = day.date()
    return day.isocalendar()[1]


def iso_week_of(day: date) -> tuple[int, int]:
    """(ISO year, ISO week) for ``day``; early January can belong to the previous year."""
    if isinstance(day, datetime):
        day = day.date()
    iso = day.isocalendar()
    return iso[0], iso[1]


def template_for_week(week_number: int) -> ChallengeTemplate:
    return CHALLENGE_TEMPLATES[week_number % len(CHALLENGE_TEMPLATES)]


def week_window(year: int, week_number: int, tz: TimezoneLike = None) -> tuple[datetime, datetime]:
    """Monday 00:00:00.000 to Sunday 23:59:59.999 of an ISO week, in local time."""
    monday = date.fromisocalendar(year, week_number, 1)
    sunday = monday + timedelta(days=6)
    zone = resolve_tz(tz)
    start = datetime.combine(monday, time.min)
    end = datetime.combine(sunday, time(23, 59, 59, 999000))
    if hasattr(zone, "localize"):
        return zone.localize(start), zone.localize(end)
    return start.replace(tzinfo=zone), end.replace(tzinfo=zone)


def generate_weekly_challenge(year: int, week_number: int, tz: TimezoneLike = None) -> dict[str, Any]:
    template = template_for_week(week_number)
    start, end = week_window(year, week_number, tz)
    return {
        "week_number": week_number,
        "year": year,
        "name": template.name,
        "description": template.description,
        "type": template.type.value,
        "target_value": template.target_value,
        "start_date": start,
        "end_date": end,
        "reward_badge_id": template.badge_id,
    }
