from datetime import datetime
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.config import settings
from fasttrack.crud import challenge as challenge_crud
from fasttrack.crud.leaderboard import LEADERBOARD_PERIODS, LEADERBOARD_TYPES, global_leaderboard
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.social import LeaderboardEntry, LeaderboardResponse
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    type: str = Query("streak", description="streak | hours | fasts"),
    period: str = Query("all", description="week | month | all"),
    challenge_id: Optional[str] = Query(None, description="Rank the participants of one challenge"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Global ranking of opted-in users, or the standings of a single challenge."""
    try:
        if challenge_id:
            challenge = challenge_crud.get_challenge(db, challenge_id)
            if not challenge:
                raise HTTPException(status_code=404, detail="Challenge not found")
            rows = challenge_crud.ranked_participants(db, challenge_id, limit=settings.LEADERBOARD_LIMIT)
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
                        value=participant.progress,
                        completed=participant.completed,
                        is_current_user=user.id == current_user.id,
                    )
                    for rank, participant, user, profile in rows
                ],
            )

        if type not in LEADERBOARD_TYPES:
            raise HTTPException(status_code=400, detail=f"type must be one of {', '.join(LEADERBOARD_TYPES)}")
        if period not in LEADERBOARD_PERIODS:
            raise HTTPException(status_code=400, detail=f"period must be one of {', '.join(LEADERBOARD_PERIODS)}")

        entries, user_rank = global_leaderboard(
            db, type, period, datetime.now(pytz.UTC), current_user.id, settings.LEADERBOARD_LIMIT
        )
        return LeaderboardResponse(
            type=type,
            period=period,
            leaderboard=[LeaderboardEntry(**entry) for entry in entries],
            user_rank=user_rank,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error building leaderboard: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
