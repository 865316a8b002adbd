from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.crud.fast import get_fast_by_id
from fasttrack.database import get_db
from fasttrack.middleware.rate_limit import rate_limit_sync
from fasttrack.models import User
from fasttrack.schemas.fast import FastResponse, FastUpsert
from fasttrack.schemas.profile import ProfileResponse, ProfileUpdate
from fasttrack.schemas.sync import SyncCounts, SyncData, SyncRequest, SyncResponse, SyncResults
from fasttrack.schemas.weight import WeightResponse, WeightUpsert
from fasttrack.services.sync import should_replace_fast
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


def _sync_fasts(db: Session, user_id: str, items: list) -> SyncCounts:
    counts = SyncCounts()
    for item in items:
        try:
            data = FastUpsert(**item)
            if crud.validate_fast(data):
                counts.errors += 1
                continue
            if data.end_time is None and crud.get_active_fast(db, user_id, exclude_id=data.id):
                counts.errors += 1
                continue
            stored = get_fast_by_id(db, data.id)
            if stored is not None and stored.user_id == user_id and not should_replace_fast(stored, data):
                counts.skipped += 1
                continue
            fast, _ = crud.upsert_fast(db, user_id, data)
            if fast is None:
                counts.errors += 1
            else:
                counts.synced += 1
        except ValidationError as e:
            logger.warning(f"Skipping invalid fast in sync for user {user_id}: {e.errors()}")
            counts.errors += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error syncing fast for user {user_id}: {e}")
            counts.errors += 1
    return counts


def _sync_weights(db: Session, user_id: str, items: list) -> SyncCounts:
    counts = SyncCounts()
    for item in items:
        try:
            weight, _ = crud.upsert_weight(db, user_id, WeightUpsert(**item))
            if weight is None:
                counts.errors += 1
            else:
                counts.synced += 1
        except ValidationError as e:
            logger.warning(f"Skipping invalid weight in sync for user {user_id}: {e.errors()}")
            counts.errors += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error syncing weight for user {user_id}: {e}")
            counts.errors += 1
    return counts


@router.post("", response_model=SyncResponse)
@rate_limit_sync
async def sync(
    request: Request,
    payload: SyncRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Upload offline changes and return the full cloud state.

    Fasts are last-write-wins by ``end_time or start_time``; weights are
    overwritten; badge lists are merged as a set union. A bad item is
    counted as an error and does not fail the request.
    """
    try:
        results = SyncResults()
        if payload.fasts:
            results.fasts = _sync_fasts(db, current_user.id, payload.fasts)
        if payload.weights:
            results.weights = _sync_weights(db, current_user.id, payload.weights)
        if results.fasts.synced:
            crud.evaluate_and_store_badges(db, current_user.id)

        profile = crud.get_or_create_profile(db, current_user.id)
        if payload.profile:
            try:
                updates = ProfileUpdate(**payload.profile)
                profile = crud.update_profile(db, profile, updates.dict(exclude_unset=True))
                results.profile_synced = True
            except ValidationError as e:
                logger.warning(f"Skipping invalid profile in sync for user {current_user.id}: {e.errors()}")

        logger.info(
            f"Sync for user {current_user.id}: fasts={results.fasts.synced}/{results.fasts.errors} "
            f"weights={results.weights.synced}/{results.weights.errors}"
        )
        return SyncResponse(
            results=results,
            data=SyncData(
                fasts=[FastResponse.from_orm(f) for f in crud.get_fasts(db, current_user.id)],
                weights=[WeightResponse.from_orm(w) for w in crud.get_weights(db, current_user.id)],
                profile=ProfileResponse.from_orm(profile),
            ),
        )
    except Exception as e:
        logger.exception(f"Error in sync: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
