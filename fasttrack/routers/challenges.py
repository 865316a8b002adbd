from datetime import datetime

import pytz
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.crud import challenge as challenge_crud
from fasttrack.database import get_db
from fasttrack.models import Challenge, User
from fasttrack.schemas.challenge import (
    ChallengeCreate, ChallengeDetailResponse, ChallengeJoinRequest, ChallengeListResponse,
    ChallengeResponse, JoinResponse, ParticipantResponse
)
from fasttrack.schemas.notification import StatusResponse
from fasttrack.services.challenge_progress import CHALLENGE_TYPES
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social/challenges", tags=["challenges"])


def _utcnow() -> datetime:
    return datetime.now(pytz.UTC)


def _challenge_response(db: Session, challenge: Challenge, user_id: str) -> ChallengeResponse:
    participant = challenge_crud.get_participant(db, challenge.id, user_id)
    return ChallengeResponse(
        id=challenge.id,
        creator_id=challenge.creator_id,
        name=challenge.name,
        description=challenge.description,
        type=challenge.type,
        target_value=challenge.target_value,
        start_date=challenge.start_date,
        end_date=challenge.end_date,
        is_public=challenge.is_public,
        # Only members see the invite code
        invite_code=challenge.invite_code if participant else None,
        max_participants=challenge.max_participants,
        participant_count=challenge_crud.participant_count(db, challenge.id),
        is_joined=participant is not None,
        user_progress=participant.progress if participant else 0,
        completed=bool(participant and participant.completed),
    )


@router.get("", response_model=ChallengeListResponse)
async def list_challenges(
    type: str = Query("mine", description="mine | public | active"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if type not in ("mine", "public", "active"):
            raise HTTPException(status_code=400, detail="type must be one of mine, public, active")
        challenges = challenge_crud.list_challenges(db, current_user.id, type, _utcnow())
        return ChallengeListResponse(
            challenges=[_challenge_response(db, c, current_user.id) for c in challenges]
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error listing challenges: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    payload: ChallengeCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a challenge; the creator joins it automatically."""
    try:
        if payload.type not in CHALLENGE_TYPES:
            raise HTTPException(status_code=400, detail=f"type must be one of {', '.join(CHALLENGE_TYPES)}")
        if payload.target_value <= 0:
            raise HTTPException(status_code=400, detail="target_value must be positive")
        if challenge_crud.to_utc(payload.start_date) >= challenge_crud.to_utc(payload.end_date):
            raise HTTPException(status_code=400, detail="start_date must be before end_date")

        challenge = challenge_crud.create_challenge(db, current_user.id, payload, _utcnow())
        logger.info(f"User {current_user.id} created challenge {challenge.id}")
        return _challenge_response(db, challenge, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error creating challenge: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/join", response_model=JoinResponse)
async def join_challenge(
    payload: ChallengeJoinRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join by challenge id or by invite code."""
    try:
        if payload.challenge_id:
            challenge = challenge_crud.get_challenge(db, payload.challenge_id)
        elif payload.invite_code:
            challenge = challenge_crud.get_challenge_by_invite_code(db, payload.invite_code)
        else:
            raise HTTPException(status_code=400, detail="challenge_id or invite_code is required")
        if not challenge:
            raise HTTPException(status_code=404, detail="Challenge not found")
        if not challenge.is_public and not payload.invite_code:
            raise HTTPException(status_code=404, detail="Challenge not found")

        participant, reason = challenge_crud.join_challenge(db, challenge, current_user.id, _utcnow())
        if participant is None:
            raise HTTPException(status_code=400, detail=reason)

        return JoinResponse(
            challenge_id=challenge.id,
            progress=participant.progress,
            completed=participant.completed,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error joining challenge: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{challenge_id}/membership", response_model=StatusResponse)
async def leave_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not challenge_crud.leave_challenge(db, challenge_id, current_user.id):
            raise HTTPException(status_code=404, detail="Not a participant of this challenge")
        return StatusResponse(message="Left challenge")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error leaving challenge: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{challenge_id}", response_model=ChallengeDetailResponse)
async def get_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Challenge status. The caller's progress is recomputed from their fasts
    and persisted before the standings are read.
    """
    try:
        challenge = challenge_crud.get_challenge(db, challenge_id)
        if not challenge:
            raise HTTPException(status_code=404, detail="Challenge not found")

        participant = challenge_crud.get_participant(db, challenge.id, current_user.id)
        if not challenge.is_public and participant is None:
            raise HTTPException(status_code=404, detail="Challenge not found")

        just_completed = False
        if participant is not None:
            just_completed = challenge_crud.refresh_participant(db, challenge, participant, _utcnow())

        return ChallengeDetailResponse(
            challenge=_challenge_response(db, challenge, current_user.id),
            participants=[
                ParticipantResponse(
                    rank=rank,
                    user_id=user.id,
                    username=user.username,
                    display_name=profile.display_name if profile else None,
                    progress=p.progress,
                    completed=p.completed,
                    completed_at=p.completed_at,
                )
                for rank, p, user, profile in challenge_crud.ranked_participants(db, challenge.id)
            ],
            just_completed=just_completed,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error getting challenge {challenge_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
