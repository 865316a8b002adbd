from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.crud.stats import now_ms
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.fast import (
    ActiveFastResponse, FastListResponse, FastResponse, FastSaveResponse, FastUpsert
)
from fasttrack.schemas.notification import StatusResponse
from fasttrack.services.durations import elapsed_hours
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/fasts", tags=["fasts"])


@router.get("", response_model=FastListResponse)
async def list_fasts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All of the user's fasts, most recent start first."""
    try:
        fasts = crud.get_fasts(db, current_user.id)
        return FastListResponse(
            fasts=[FastResponse.from_orm(f) for f in fasts],
            total_count=len(fasts),
        )
    except Exception as e:
        logger.exception(f"Error listing fasts: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/active", response_model=ActiveFastResponse)
async def get_active_fast(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        fast = crud.get_active_fast(db, current_user.id)
        if not fast:
            return ActiveFastResponse(fast=None, elapsed_hours=0.0)
        return ActiveFastResponse(
            fast=FastResponse.from_orm(fast),
            elapsed_hours=round(elapsed_hours(fast, now_ms()), 2),
        )
    except Exception as e:
        logger.exception(f"Error getting active fast: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=FastSaveResponse, status_code=status.HTTP_201_CREATED)
async def save_fast(
    payload: FastUpsert,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create or update a fast by its client id.

    Returns 201 on create and 200 on update. Badges are evaluated with the
    saved fast as the trigger and any new unlocks are returned.
    """
    try:
        error = crud.validate_fast(payload)
        if error:
            raise HTTPException(status_code=400, detail=error)

        if payload.end_time is None and crud.get_active_fast(db, current_user.id, exclude_id=payload.id):
            raise HTTPException(status_code=400, detail="Another fast is already in progress")

        fast, created = crud.upsert_fast(db, current_user.id, payload)
        if fast is None:
            raise HTTPException(status_code=404, detail="Fast not found")

        newly_unlocked = crud.evaluate_and_store_badges(
            db, current_user.id, triggering=fast if fast.completed else None
        )

        if not created:
            response.status_code = status.HTTP_200_OK
        return FastSaveResponse(
            fast=FastResponse.from_orm(fast),
            created=created,
            newly_unlocked_badges=newly_unlocked,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error saving fast: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{fast_id}", response_model=StatusResponse)
async def delete_fast(
    fast_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not crud.delete_fast(db, current_user.id, fast_id):
            raise HTTPException(status_code=404, detail="Fast not found")
        return StatusResponse(message="Fast deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting fast: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
