from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.crud.friends import FriendsCRUD
from fasttrack.crud.stats import load_history, now_ms
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.social import (
    SocialProfileResponse, SocialProfileUpdate, UserSearchResponse, UserSearchResult
)
from fasttrack.services import durations, streaks
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social", tags=["social"])


def _build_profile(db: Session, user: User, relationship: str = None) -> SocialProfileResponse:
    profile = crud.get_or_create_profile(db, user.id)
    history = load_history(db, user.id)
    summary = streaks.streak_summary(history, now_ms(), crud.profile_timezone(profile))
    return SocialProfileResponse(
        user_id=user.id,
        username=user.username,
        display_name=profile.display_name,
        avatar_id=profile.avatar_id or 0,
        bio=profile.bio,
        is_public=profile.is_public,
        show_on_leaderboard=profile.show_on_leaderboard,
        current_streak=summary.current,
        longest_streak=summary.longest,
        total_fasts=durations.completed_count(history),
        total_hours=round(durations.total_hours(history), 1),
        unlocked_badges=list(profile.unlocked_badges or []),
        relationship=relationship,
    )


@router.get("/profile", response_model=SocialProfileResponse)
async def get_own_social_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return _build_profile(db, current_user)
    except Exception as e:
        logger.exception(f"Error getting social profile: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/profile", response_model=SocialProfileResponse)
async def update_social_profile(
    payload: SocialProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Set username, bio and visibility flags."""
    try:
        if payload.username is not None:
            username = crud.clean_username(payload.username)
            if not crud.is_valid_username(username):
                raise HTTPException(
                    status_code=400,
                    detail="Username must be 3-20 characters of letters, numbers or underscores"
                )
            if not crud.is_username_available(db, username, exclude_user_id=current_user.id):
                raise HTTPException(status_code=400, detail="Username is already taken")
            crud.set_username(db, current_user, username)

        profile = crud.get_or_create_profile(db, current_user.id)
        if payload.bio is not None:
            profile.bio = payload.bio
        if payload.is_public is not None:
            profile.is_public = payload.is_public
        if payload.show_on_leaderboard is not None:
            profile.show_on_leaderboard = payload.show_on_leaderboard
        db.commit()

        return _build_profile(db, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error updating social profile: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/profile/{user_id}", response_model=SocialProfileResponse)
async def get_social_profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Another user's profile; private profiles are only visible to their owner."""
    try:
        user = crud.get_user(db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="Profile not found")
        if user.id != current_user.id:
            profile = crud.get_profile(db, user.id)
            if profile is None or not profile.is_public:
                raise HTTPException(status_code=404, detail="Profile not found")
        relationship = FriendsCRUD.get_relationship_status_map(db, current_user.id, [user.id]).get(user.id)
        return _build_profile(db, user, relationship)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error getting social profile {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    q: str = Query(..., min_length=1, max_length=20, description="Username fragment"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        rows = crud.search_users_by_username(db, crud.clean_username(q), exclude_user_id=current_user.id)
        status_map = FriendsCRUD.get_relationship_status_map(db, current_user.id, [u.id for u, _ in rows])
        return UserSearchResponse(users=[
            UserSearchResult(
                user_id=user.id,
                username=user.username,
                display_name=profile.display_name,
                avatar_id=profile.avatar_id or 0,
                relationship=status_map.get(user.id, "none"),
            )
            for user, profile in rows
        ])
    except Exception as e:
        logger.exception(f"Error searching users: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
