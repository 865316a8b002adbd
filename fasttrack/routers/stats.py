from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.stats import (
    BadgeEvaluateResponse, BadgeListResponse, BadgeResponse, StatsResponse
)
from fasttrack.services.badges import BADGES
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/me", response_model=StatsResponse)
async def get_my_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Totals and streaks, bucketed by the user's profile timezone."""
    try:
        return StatsResponse(**crud.user_stats(db, current_user.id))
    except Exception as e:
        logger.exception(f"Error computing stats: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/badges", response_model=BadgeListResponse)
async def list_badges(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        profile = crud.get_or_create_profile(db, current_user.id)
        unlocked = set(profile.unlocked_badges or [])
        badges = [
            BadgeResponse(
                id=b.id,
                name=b.name,
                description=b.description,
                category=b.category.value,
                requirement=b.requirement,
                icon=b.icon,
                color=b.color,
                kind=b.kind.value if b.kind else None,
                unlocked=b.id in unlocked,
            )
            for b in BADGES
        ]
        return BadgeListResponse(
            badges=badges,
            unlocked_count=sum(1 for b in badges if b.unlocked),
            total_count=len(badges),
        )
    except Exception as e:
        logger.exception(f"Error listing badges: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/badges/evaluate", response_model=BadgeEvaluateResponse)
async def evaluate_badges(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Re-run badge evaluation over the full history and store new unlocks."""
    try:
        newly_unlocked = crud.evaluate_and_store_badges(db, current_user.id)
        profile = crud.get_or_create_profile(db, current_user.id)
        return BadgeEvaluateResponse(
            newly_unlocked_badges=newly_unlocked,
            unlocked_badges=list(profile.unlocked_badges or []),
        )
    except Exception as e:
        logger.exception(f"Error evaluating badges: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
