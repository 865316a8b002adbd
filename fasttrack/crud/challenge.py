"""
User-created challenges and the progress step shared with weekly challenges.
"""
from datetime import datetime
from typing import List, Optional, Tuple, Union
import secrets
import string

import pytz
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fasttrack.crud.fast import get_fasts
from fasttrack.crud.profile import get_profile, profile_timezone
from fasttrack.models import (
    Challenge,
    ChallengeParticipant,
    Profile,
    User,
    WeeklyChallenge,
    WeeklyChallengeParticipant,
)
from fasttrack.services.challenge_progress import (
    ChallengeWindow,
    ProgressResult,
    compute_progress,
    persist_if_completed,
)
from fasttrack.services.records import FastRecord, to_millis
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6
INVITE_CODE_ATTEMPTS = 5

AnyChallenge = Union[Challenge, WeeklyChallenge]
AnyParticipant = Union[ChallengeParticipant, WeeklyChallengeParticipant]


def to_utc(dt: datetime) -> datetime:
    """Aware UTC datetime; naive input is taken as UTC."""
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def generate_invite_code() -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def compute_user_progress(db: Session, challenge: AnyChallenge, user_id: str, as_of: datetime) -> ProgressResult:
    """Pure step: the user's progress on ``challenge`` as of ``as_of``."""
    window = ChallengeWindow(start=to_utc(challenge.start_date), end=to_utc(challenge.end_date))
    fasts = [
        FastRecord.from_model(f)
        for f in get_fasts(db, user_id, ended_since_ms=window.start_ms)
    ]
    return compute_progress(
        challenge.type,
        challenge.target_value,
        fasts,
        window,
        as_of=to_millis(as_of),
        tz=profile_timezone(get_profile(db, user_id)),
    )


def refresh_participant(db: Session, challenge: AnyChallenge, participant: AnyParticipant, as_of: datetime) -> bool:
    """Recompute and persist one participant's progress. True if it just completed."""
    result = compute_user_progress(db, challenge, participant.user_id, as_of)
    just_completed = persist_if_completed(participant, result, now=to_utc(as_of).replace(tzinfo=None))
    db.commit()
    if just_completed:
        logger.info(f"User {participant.user_id} completed challenge {challenge.id} with progress {result.progress}")
    return just_completed


def get_challenge(db: Session, challenge_id: str) -> Optional[Challenge]:
    return db.query(Challenge).filter(Challenge.id == challenge_id).first()


def get_challenge_by_invite_code(db: Session, invite_code: str) -> Optional[Challenge]:
    return db.query(Challenge).filter(Challenge.invite_code == invite_code.strip().upper()).first()


def get_participant(db: Session, challenge_id: str, user_id: str) -> Optional[ChallengeParticipant]:
    return db.query(ChallengeParticipant).filter(
        ChallengeParticipant.challenge_id == challenge_id,
        ChallengeParticipant.user_id == user_id,
    ).first()


def participant_count(db: Session, challenge_id: str) -> int:
    return db.query(func.count(ChallengeParticipant.id)).filter(
        ChallengeParticipant.challenge_id == challenge_id
    ).scalar() or 0


def create_challenge(db: Session, creator_id: str, data, as_of: datetime) -> Challenge:
    """Create a challenge with a fresh invite code and enrol its creator."""
    for attempt in range(INVITE_CODE_ATTEMPTS):
        challenge = Challenge(
            creator_id=creator_id,
            name=data.name,
            description=data.description,
            type=data.type,
            target_value=data.target_value,
            start_date=to_utc(data.start_date),
            end_date=to_utc(data.end_date),
            is_public=data.is_public,
            max_participants=data.max_participants,
            invite_code=generate_invite_code(),
        )
        db.add(challenge)
        try:
            db.flush()
            break
        except IntegrityError:
            db.rollback()
            logger.warning(f"Invite code collision on attempt {attempt + 1}, retrying")
    else:
        raise RuntimeError("Could not allocate a unique invite code")

    participant = ChallengeParticipant(challenge_id=challenge.id, user_id=creator_id, progress=0, completed=False)
    db.add(participant)
    db.commit()
    db.refresh(challenge)
    refresh_participant(db, challenge, participant, as_of)
    return challenge


def list_challenges(db: Session, user_id: str, list_type: str, as_of: datetime) -> List[Challenge]:
    """
    ``mine``: challenges the user has joined. ``public``: public challenges
    that haven't ended. ``active``: joined challenges currently running.
    """
    now = to_utc(as_of)
    joined_ids = db.query(ChallengeParticipant.challenge_id).filter(ChallengeParticipant.user_id == user_id)
    query = db.query(Challenge)
    if list_type == "public":
        query = query.filter(Challenge.is_public.is_(True), Challenge.end_date >= now)
    elif list_type == "active":
        query = query.filter(
            Challenge.id.in_(joined_ids),
            Challenge.start_date <= now,
            Challenge.end_date >= now,
        )
    else:
        query = query.filter(Challenge.id.in_(joined_ids))
    return query.order_by(Challenge.start_date.desc()).all()


def join_challenge(db: Session, challenge: Challenge, user_id: str, as_of: datetime) -> Tuple[Optional[ChallengeParticipant], str]:
    """Returns ``(participant, "")`` or ``(None, reason)`` when the join is refused."""
    if get_participant(db, challenge.id, user_id):
        return None, "Already joined this challenge"
    if challenge.max_participants and participant_count(db, challenge.id) >= challenge.max_participants:
        return None, "Challenge is full"

    participant = ChallengeParticipant(challenge_id=challenge.id, user_id=user_id, progress=0, completed=False)
    db.add(participant)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None, "Already joined this challenge"
    db.refresh(participant)
    refresh_participant(db, challenge, participant, as_of)
    return participant, ""


def leave_challenge(db: Session, challenge_id: str, user_id: str) -> bool:
    participant = get_participant(db, challenge_id, user_id)
    if not participant:
        return False
    db.delete(participant)
    db.commit()
    return True


def ranked_participants(db: Session, challenge_id: str, limit: Optional[int] = None) -> List[Tuple[int, ChallengeParticipant, User, Optional[Profile]]]:
    """Participants ordered by progress, earliest completion first on ties."""
    query = db.query(ChallengeParticipant, User, Profile).join(
        User, User.id == ChallengeParticipant.user_id
    ).outerjoin(
        Profile, Profile.user_id == ChallengeParticipant.user_id
    ).filter(
        ChallengeParticipant.challenge_id == challenge_id
    ).order_by(
        ChallengeParticipant.progress.desc(),
        ChallengeParticipant.completed_at.is_(None),
        ChallengeParticipant.completed_at.asc(),
        ChallengeParticipant.joined_at.asc(),
    )
    if limit:
        query = query.limit(limit)
    return [(index + 1, p, u, prof) for index, (p, u, prof) in enumerate(query.all())]
