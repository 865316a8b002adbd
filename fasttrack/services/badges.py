"""
Badge catalog and unlock evaluation.

Each badge category maps to a predicate in ``PREDICATES``; lifestyle badges
dispatch again on their ``kind`` through ``LIFESTYLE_PREDICATES``. Adding a
badge kind means registering a predicate, not editing ``evaluate_badges``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from fasttrack.services import durations
from fasttrack.services.records import (
    Timestamp,
    TimezoneLike,
    completed_fasts,
    field,
    finite_ms,
    is_completed,
    local_datetime,
)
from fasttrack.services.streaks import current_streak
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

EARLY_BIRD_BEFORE_HOUR = 20
NIGHT_OWL_FROM_HOUR = 22
PERFECT_WEEK_DAYS = 7


class BadgeCategory(str, enum.Enum):
    STREAK = "streak"
    HOURS = "hours"
    MILESTONE = "milestone"
    LIFESTYLE = "lifestyle"


class LifestyleKind(str, enum.Enum):
    EARLY_BIRD = "early_bird"
    NIGHT_OWL = "night_owl"
    WEEKEND = "weekend"
    PERFECT_WEEK = "perfect_week"


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    category: BadgeCategory
    requirement: float
    icon: str
    color: str
    kind: Optional[LifestyleKind] = None


def _streak(req: int, name: str, icon: str, color: str) -> Badge:
    return Badge(f"streak_{req}", name, f"Reach a {req}-day fasting streak", BadgeCategory.STREAK, req, icon, color)


def _fasts(req: int, name: str, description: str, icon: str, color: str) -> Badge:
    return Badge(f"fasts_{req}", name, description, BadgeCategory.MILESTONE, req, icon, color)


def _duration(req: int, name: str, description: str, icon: str, color: str) -> Badge:
    return Badge(f"duration_{req}", name, description, BadgeCategory.HOURS, req, icon, color)


BADGES: tuple[Badge, ...] = (
    _streak(3, "Consistency Is Key", "zap", "#FBBF24"),
    _streak(7, "Unstoppable", "trending-up", "#F472B6"),
    _streak(14, "Habit Master", "award", "#A78BFA"),
    _streak(21, "Habit Formed", "check-circle", "#8B5CF6"),
    _streak(30, "Month of Zen", "star", "#60A5FA"),
    _streak(60, "Iron Will", "shield", "#EF4444"),
    _streak(90, "Quarter Century", "anchor", "#10B981"),
    _streak(180, "Half Year Hero", "sun", "#F59E0B"),
    _streak(365, "Year of Focus", "globe", "#6366F1"),

    _fasts(1, "First Step", "Complete your first fast", "flag", "#34D399"),
    _fasts(5, "High Five", "Complete 5 fasts", "heart", "#EC4899"),
    _fasts(10, "Dedicated", "Complete 10 fasts", "check-circle", "#10B981"),
    _fasts(25, "Quarter Century", "Complete 25 fasts", "award", "#8B5CF6"),
    _fasts(50, "Seasoned", "Complete 50 fasts", "star", "#F59E0B"),
    _fasts(100, "Club 100", "Complete 100 fasts", "crown", "#FCD34D"),
    _fasts(250, "Elite Faster", "Complete 250 fasts", "target", "#EF4444"),
    _fasts(500, "Master Faster", "Complete 500 fasts", "zap", "#6366F1"),
    _fasts(1000, "Legendary", "Complete 1000 fasts", "award", "#A78BFA"),

    _duration(12, "Beginner", "Complete a fast of 12 hours", "clock", "#9CA3AF"),
    _duration(14, "Getting Serious", "Complete a fast of 14 hours", "watch", "#60A5FA"),
    _duration(16, "16:8 Warrior", "Complete a fast of 16 hours", "clock", "#60A5FA"),
    _duration(18, "Pushing Limits", "Complete a fast of 18 hours", "activity", "#8B5CF6"),
    _duration(20, "Warrior Mode", "Complete a fast of 20 hours", "target", "#818CF8"),
    _duration(24, "OMAD Legend", "Complete a fast of 24 hours", "sun", "#F472B6"),
    _duration(36, "Monk Mode", "Complete a fast of 36 hours", "moon", "#8B5CF6"),
    _duration(48, "2 Day Deep", "Complete a fast of 48 hours", "layers", "#EF4444"),
    _duration(72, "Autophagy King", "Complete a fast of 72 hours", "hexagon", "#10B981"),
    _duration(100, "Centurion", "Complete a fast of 100 hours", "shield", "#F59E0B"),
    _duration(168, "Week Warrior", "Complete a full 1 week fast", "calendar", "#6366F1"),

    Badge("lifestyle_early_bird", "Early Bird", "Start a fast before 8 PM", BadgeCategory.LIFESTYLE, 0,
          "sunrise", "#F59E0B", LifestyleKind.EARLY_BIRD),
    Badge("lifestyle_night_owl", "Night Owl", "Start a fast after 10 PM", BadgeCategory.LIFESTYLE, 0,
          "moon", "#6366F1", LifestyleKind.NIGHT_OWL),
    Badge("lifestyle_weekend", "Weekend Warrior", "Fast on Saturday and Sunday", BadgeCategory.LIFESTYLE, 0,
          "calendar", "#EC4899", LifestyleKind.WEEKEND),
    Badge("lifestyle_perfect_week", "Perfect Week", "Fast every day for 7 days", BadgeCategory.LIFESTYLE,
          PERFECT_WEEK_DAYS, "check-square", "#10B981", LifestyleKind.PERFECT_WEEK),
)

_BY_ID = {badge.id: badge for badge in BADGES}


@dataclass(frozen=True)
class BadgeContext:
    history: list
    triggering: Any
    as_of: Timestamp
    tz: TimezoneLike
    streak: int


Predicate = Callable[[Badge, BadgeContext], bool]


def _start_hour(fast: Any, tz: TimezoneLike) -> Optional[int]:
    dt = local_datetime(field(fast, "start_time"), tz)
    return dt.hour if dt else None


def _milestone(badge: Badge, ctx: BadgeContext) -> bool:
    return len(completed_fasts(ctx.history)) >= badge.requirement


def _streak_reached(badge: Badge, ctx: BadgeContext) -> bool:
    return ctx.streak >= badge.requirement


def _single_fast_hours(badge: Badge, ctx: BadgeContext) -> bool:
    if ctx.triggering is None:
        return False
    hours = durations.fast_duration_hours(ctx.triggering)
    return hours is not None and hours >= badge.requirement


def _early_bird(badge: Badge, ctx: BadgeContext) -> bool:
    if ctx.triggering is None:
        return False
    hour = _start_hour(ctx.triggering, ctx.tz)
    return hour is not None and hour < EARLY_BIRD_BEFORE_HOUR


def _night_owl(badge: Badge, ctx: BadgeContext) -> bool:
    if ctx.triggering is None:
        return False
    hour = _start_hour(ctx.triggering, ctx.tz)
    return hour is not None and hour >= NIGHT_OWL_FROM_HOUR


def _weekend(badge: Badge, ctx: BadgeContext) -> bool:
    for fast in ctx.history:
        if not field(fast, "completed"):
            continue
        end = field(fast, "end_time")
        moment = end if finite_ms(end) is not None else field(fast, "start_time")
        dt = local_datetime(moment, ctx.tz)
        # Saturday=5, Sunday=6
        if dt is not None and dt.weekday() >= 5:
            return True
    return False


def _perfect_week(badge: Badge, ctx: BadgeContext) -> bool:
    return ctx.streak >= PERFECT_WEEK_DAYS


LIFESTYLE_PREDICATES: dict[LifestyleKind, Predicate] = {
    LifestyleKind.EARLY_BIRD: _early_bird,
    LifestyleKind.NIGHT_OWL: _night_owl,
    LifestyleKind.WEEKEND: _weekend,
    LifestyleKind.PERFECT_WEEK: _perfect_week,
}


def _lifestyle(badge: Badge, ctx: BadgeContext) -> bool:
    predicate = LIFESTYLE_PREDICATES.get(badge.kind)
    return predicate(badge, ctx) if predicate else False


PREDICATES: dict[BadgeCategory, Predicate] = {
    BadgeCategory.MILESTONE: _milestone,
    BadgeCategory.STREAK: _streak_reached,
    BadgeCategory.HOURS: _single_fast_hours,
    BadgeCategory.LIFESTYLE: _lifestyle,
}


def evaluate_badges(
    history: Iterable,
    unlocked_ids: Iterable[str],
    *,
    as_of: Timestamp,
    triggering: Any = None,
    tz: TimezoneLike = None,
    catalog: Iterable[Badge] = BADGES,
) -> list[str]:
    """
    Ids of badges newly earned by ``history``.

    Badges already in ``unlocked_ids`` are skipped; unlocks are never revoked.
    ``triggering`` is the fast that was just completed, which single-fast
    badges (duration, early bird, night owl) key off. A trigger that is still
    in progress is ignored.
    """
    history = list(history or [])
    if triggering is not None and not is_completed(triggering):
        triggering = None
    unlocked = set(unlocked_ids or [])
    ctx = BadgeContext(
        history=history,
        triggering=triggering,
        as_of=as_of,
        tz=tz,
        streak=current_streak(history, as_of, tz),
    )

    newly_unlocked = []
    for badge in catalog:
        if badge.id in unlocked:
            continue
        predicate = PREDICATES.get(badge.category)
        if predicate is None:
            continue
        try:
            earned = predicate(badge, ctx)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping badge {badge.id}: malformed fast data ({e})")
            earned = False
        if earned:
            newly_unlocked.append(badge.id)
    return newly_unlocked


def get_badge(badge_id: str) -> Optional[Badge]:
    return _BY_ID.get(badge_id)


def badges_by_category(category: BadgeCategory) -> list[Badge]:
    return [b for b in BADGES if b.category == category]
