from datetime import datetime

import pytz
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.config import settings
from fasttrack.crud import weekly_challenge as weekly_crud
from fasttrack.crud.challenge import refresh_participant, to_utc
from fasttrack.database import get_db
from fasttrack.models import User, WeeklyChallenge
from fasttrack.schemas.challenge import (
    JoinResponse, WeeklyChallengeEnvelope, WeeklyChallengeListResponse, WeeklyChallengeResponse
)
from fasttrack.schemas.notification import StatusResponse
from fasttrack.schemas.social import LeaderboardEntry, LeaderboardResponse
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/weekly-challenges", tags=["weekly-challenges"])


def _weekly_response(db: Session, challenge: WeeklyChallenge, user_id: str, now: datetime = None) -> WeeklyChallengeResponse:
    participant = weekly_crud.get_participant(db, challenge.id, user_id)
    response = WeeklyChallengeResponse(
        id=challenge.id,
        week_number=challenge.week_number,
        year=challenge.year,
        name=challenge.name,
        description=challenge.description,
        type=challenge.type,
        target_value=challenge.target_value,
        start_date=challenge.start_date,
        end_date=challenge.end_date,
        reward_badge_id=challenge.reward_badge_id,
        participant_count=weekly_crud.participant_count(db, challenge.id),
        is_joined=participant is not None,
        user_progress=participant.progress if participant else 0,
        completed=bool(participant and participant.completed),
    )
    if now is not None:
        remaining = to_utc(challenge.end_date) - to_utc(now)
        hours_left = max(0, int(remaining.total_seconds() // 3600))
        response.days_left = hours_left // 24
        response.hours_left = hours_left % 24
    return response


@router.get("/current", response_model=WeeklyChallengeEnvelope)
async def get_current_weekly_challenge(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """This week's challenge, created from the template rotation if needed."""
    try:
        now = datetime.now(pytz.UTC)
        challenge = weekly_crud.get_or_create_current(db, now)
        participant = weekly_crud.get_participant(db, challenge.id, current_user.id)
        if participant is not None:
            refresh_participant(db, challenge, participant, now)
        return WeeklyChallengeEnvelope(challenge=_weekly_response(db, challenge, current_user.id, now))
    except Exception as e:
        logger.exception(f"Error getting current weekly challenge: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=WeeklyChallengeListResponse)
async def list_active_weekly_challenges(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        now = datetime.now(pytz.UTC)
        return WeeklyChallengeListResponse(challenges=[
            _weekly_response(db, c, current_user.id, now) for c in weekly_crud.list_active(db, now)
        ])
    except Exception as e:
        logger.exception(f"Error listing weekly challenges: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{challenge_id}/leaderboard", response_model=LeaderboardResponse)
async def get_weekly_leaderboard(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        challenge = weekly_crud.get_weekly_challenge(db, challenge_id)
        if not challenge:
            raise HTTPException(status_code=404, detail="Weekly challenge not found")
        rows = weekly_crud.leaderboard(db, challenge_id, settings.LEADERBOARD_LIMIT)
        return LeaderboardResponse(
            type=challenge.type,
            challenge_id=challenge_id,
            leaderboard=[
                LeaderboardEntry(
                    rank=rank,
                    user_id=user.id,
                    username=user.username,
                    display_name=profile.display_name if profile else None,
                    avatar_id=profile.avatar_id if profile else 0,
                    value=p.progress,
                    completed=p.completed,
                    is_current_user=user.id == current_user.id,
                )
                for rank, p, user, profile in rows
            ],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error getting weekly leaderboard {challenge_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{challenge_id}/join", response_model=JoinResponse)
async def join_weekly_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join and compute initial progress from fasts already in the window."""
    try:
        challenge = weekly_crud.get_weekly_challenge(db, challenge_id)
        if not challenge:
            raise HTTPException(status_code=404, detail="Weekly challenge not found")
        participant = weekly_crud.join(db, challenge, current_user.id, datetime.now(pytz.UTC))
        if participant is None:
            raise HTTPException(status_code=400, detail="Already joined")
        return JoinResponse(challenge_id=challenge.id, progress=participant.progress, completed=participant.completed)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error joining weekly challenge {challenge_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{challenge_id}/membership", response_model=StatusResponse)
async def leave_weekly_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not weekly_crud.leave(db, challenge_id, current_user.id):
            raise HTTPException(status_code=404, detail="Not a participant of this challenge")
        return StatusResponse(message="Left weekly challenge")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error leaving weekly challenge {challenge_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
