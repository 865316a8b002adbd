from datetime import datetime
from typing import List, Optional, Tuple

import pytz
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fasttrack.config import settings
from fasttrack.crud.challenge import refresh_participant, to_utc
from fasttrack.models import Profile, User, WeeklyChallenge, WeeklyChallengeParticipant
from fasttrack.services.challenge_templates import generate_weekly_challenge, iso_week_of
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)


def get_weekly_challenge(db: Session, challenge_id: str) -> Optional[WeeklyChallenge]:
    return db.query(WeeklyChallenge).filter(WeeklyChallenge.id == challenge_id).first()


def get_or_create_current(db: Session, as_of: datetime) -> WeeklyChallenge:
    """This ISO week's challenge, generated from the template rotation on first access."""
    local_now = to_utc(as_of).astimezone(pytz.timezone(settings.DEFAULT_TIMEZONE))
    year, week = iso_week_of(local_now.date())

    challenge = db.query(WeeklyChallenge).filter(
        WeeklyChallenge.year == year, WeeklyChallenge.week_number == week
    ).first()
    if challenge:
        return challenge

    values = generate_weekly_challenge(year, week, settings.DEFAULT_TIMEZONE)
    values["start_date"] = to_utc(values["start_date"])
    values["end_date"] = to_utc(values["end_date"])
    challenge = WeeklyChallenge(**values)
    db.add(challenge)
    try:
        db.commit()
    except IntegrityError:
        # Another request created it first
        db.rollback()
        return db.query(WeeklyChallenge).filter(
            WeeklyChallenge.year == year, WeeklyChallenge.week_number == week
        ).one()
    db.refresh(challenge)
    logger.info(f"Created weekly challenge '{challenge.name}' for {year}-W{week:02d}")
    return challenge


def list_active(db: Session, as_of: datetime) -> List[WeeklyChallenge]:
    return db.query(WeeklyChallenge).filter(
        WeeklyChallenge.end_date >= to_utc(as_of)
    ).order_by(WeeklyChallenge.start_date.desc()).all()


def get_participant(db: Session, challenge_id: str, user_id: str) -> Optional[WeeklyChallengeParticipant]:
    return db.query(WeeklyChallengeParticipant).filter(
        WeeklyChallengeParticipant.weekly_challenge_id == challenge_id,
        WeeklyChallengeParticipant.user_id == user_id,
    ).first()


def participant_count(db: Session, challenge_id: str) -> int:
    return db.query(func.count(WeeklyChallengeParticipant.id)).filter(
        WeeklyChallengeParticipant.weekly_challenge_id == challenge_id
    ).scalar() or 0


def join(db: Session, challenge: WeeklyChallenge, user_id: str, as_of: datetime) -> Optional[WeeklyChallengeParticipant]:
    """Enrol the user and compute initial progress; None if already joined."""
    if get_participant(db, challenge.id, user_id):
        return None
    participant = WeeklyChallengeParticipant(weekly_challenge_id=challenge.id, user_id=user_id, progress=0, completed=False)
    db.add(participant)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None
    db.refresh(participant)
    refresh_participant(db, challenge, participant, as_of)
    return participant


def leave(db: Session, challenge_id: str, user_id: str) -> bool:
    participant = get_participant(db, challenge_id, user_id)
    if not participant:
        return False
    db.delete(participant)
    db.commit()
    return True


def leaderboard(db: Session, challenge_id: str, limit: int) -> List[Tuple[int, WeeklyChallengeParticipant, User, Optional[Profile]]]:
    rows = db.query(WeeklyChallengeParticipant, User, Profile).join(
        User, User.id == WeeklyChallengeParticipant.user_id
    ).outerjoin(
        Profile, Profile.user_id == WeeklyChallengeParticipant.user_id
    ).filter(
        WeeklyChallengeParticipant.weekly_challenge_id == challenge_id
    ).order_by(
        WeeklyChallengeParticipant.progress.desc(),
        WeeklyChallengeParticipant.joined_at.asc(),
    ).limit(limit).all()
    return [(index + 1, p, u, prof) for index, (p, u, prof) in enumerate(rows)]
