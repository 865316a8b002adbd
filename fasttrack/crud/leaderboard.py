"""
Global leaderboards ranked with the statistics engine.

Streaks can't be aggregated in SQL, so completed fasts for every visible
user are loaded once and reduced per user in Python.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
import calendar

import pytz
from sqlalchemy.orm import Session

from fasttrack.crud.fast import get_fasts_for_users
from fasttrack.crud.profile import profile_timezone
from fasttrack.models import Profile, User
from fasttrack.services import durations, streaks
from fasttrack.services.records import to_millis

LEADERBOARD_TYPES = ("streak", "hours", "fasts")
LEADERBOARD_PERIODS = ("week", "month", "all")


def one_month_before(dt: datetime) -> datetime:
    """Same day-of-month one month earlier, clamped to the month's length."""
    year, month = (dt.year, dt.month - 1) if dt.month > 1 else (dt.year - 1, 12)
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> Optional[datetime]:
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return one_month_before(now)
    return None


def _score(board_type: str, fasts: list, as_of_ms: int, tz: str) -> float:
    if board_type == "streak":
        return streaks.current_streak(fasts, as_of_ms, tz)
    if board_type == "hours":
        return round(durations.total_hours(fasts), 1)
    return durations.completed_count(fasts)


def global_leaderboard(db: Session, board_type: str, period: str, now: datetime,
                       current_user_id: str, limit: int) -> Tuple[List[dict], Optional[int]]:
    """
    Ranked entries for users who opted in, top ``limit`` only.

    Returns ``(entries, user_rank)``; ``user_rank`` is set when the current
    user is ranked but outside the top ``limit``.
    """
    now = now.astimezone(pytz.UTC) if now.tzinfo else pytz.UTC.localize(now)
    rows = db.query(User, Profile).join(Profile, Profile.user_id == User.id).filter(
        Profile.show_on_leaderboard.is_(True)
    ).all()
    if not rows:
        return [], None

    since = period_start(period, now)
    since_ms = to_millis(since) if since else None
    fasts_by_user: Dict[str, list] = defaultdict(list)
    for fast in get_fasts_for_users(db, [u.id for u, _ in rows], ended_since_ms=since_ms):
        fasts_by_user[fast.user_id].append(fast)

    as_of_ms = to_millis(now)
    scored = []
    for user, profile in rows:
        value = _score(board_type, fasts_by_user.get(user.id, []), as_of_ms, profile_timezone(profile))
        if value > 0:
            scored.append((value, user, profile))
    scored.sort(key=lambda item: (-item[0], item[1].username or "", item[1].id))

    entries = []
    user_rank = None
    for rank, (value, user, profile) in enumerate(scored, start=1):
        if rank <= limit:
            entries.append({
                "rank": rank,
                "user_id": user.id,
                "username": user.username,
                "display_name": profile.display_name,
                "avatar_id": profile.avatar_id or 0,
                "value": value,
                "is_current_user": user.id == current_user_id,
            })
        elif user.id == current_user_id:
            user_rank = rank
            break
    return entries, user_rank
