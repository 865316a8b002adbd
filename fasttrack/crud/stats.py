"""
Glue between stored fasts and the statistics engine.

Everything here reads a user's history, hands it to ``fasttrack.services``
with the user's profile timezone and an explicit ``as_of``, and (for badges)
writes the result back.
"""
from datetime import datetime
from typing import Any, List, Optional

import pytz
from sqlalchemy.orm import Session

from fasttrack.crud.fast import get_fasts
from fasttrack.crud.profile import add_unlocked_badges, get_or_create_profile, profile_timezone
from fasttrack.services import durations, streaks
from fasttrack.services.badges import evaluate_badges
from fasttrack.services.records import FastRecord, to_millis
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)


def now_ms() -> int:
    return to_millis(datetime.now(pytz.UTC))


def load_history(db: Session, user_id: str) -> List[FastRecord]:
    return [FastRecord.from_model(f) for f in get_fasts(db, user_id)]


def user_stats(db: Session, user_id: str, as_of: Optional[int] = None) -> dict:
    profile = get_or_create_profile(db, user_id)
    tz = profile_timezone(profile)
    history = load_history(db, user_id)
    as_of = as_of if as_of is not None else now_ms()

    totals = durations.summarize(history)
    summary = streaks.streak_summary(history, as_of, tz)
    return {
        "total_fasts": totals.count,
        "total_hours": round(totals.total_hours, 1),
        "average_duration": round(totals.average_hours, 1),
        "longest_fast_hours": round(totals.longest_hours, 1),
        "current_streak": summary.current,
        "longest_streak": summary.longest,
        "timezone": tz,
    }


def evaluate_and_store_badges(db: Session, user_id: str, triggering: Any = None, as_of: Optional[int] = None) -> List[str]:
    """Run the badge evaluator on the full history and persist new unlocks."""
    profile = get_or_create_profile(db, user_id)
    history = load_history(db, user_id)
    trigger = FastRecord.from_model(triggering) if triggering is not None else None
    newly = evaluate_badges(
        history,
        profile.unlocked_badges or [],
        triggering=trigger,
        as_of=as_of if as_of is not None else now_ms(),
        tz=profile_timezone(profile),
    )
    if newly:
        add_unlocked_badges(db, profile, newly)
        logger.info(f"User {user_id} unlocked badges: {', '.join(newly)}")
    return newly
