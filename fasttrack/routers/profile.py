from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.profile import ProfileResponse, ProfileUpdate
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The user's profile; a default one is created on first read."""
    try:
        return ProfileResponse.from_orm(crud.get_or_create_profile(db, current_user.id))
    except Exception as e:
        logger.exception(f"Error getting profile: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        profile = crud.get_or_create_profile(db, current_user.id)
        profile = crud.update_profile(db, profile, payload.dict(exclude_unset=True))
        return ProfileResponse.from_orm(profile)
    except Exception as e:
        logger.exception(f"Error updating profile: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
