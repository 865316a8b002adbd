from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.notification import StatusResponse
from fasttrack.schemas.weight import WeightListResponse, WeightResponse, WeightUpsert
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/weights", tags=["weights"])


@router.get("", response_model=WeightListResponse)
async def list_weights(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        weights = crud.get_weights(db, current_user.id)
        return WeightListResponse(
            weights=[WeightResponse.from_orm(w) for w in weights],
            total_count=len(weights),
        )
    except Exception as e:
        logger.exception(f"Error listing weights: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=WeightResponse, status_code=status.HTTP_201_CREATED)
async def save_weight(
    payload: WeightUpsert,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create or update a weight entry by its client id."""
    try:
        weight, created = crud.upsert_weight(db, current_user.id, payload)
        if weight is None:
            raise HTTPException(status_code=404, detail="Weight entry not found")
        if not created:
            response.status_code = status.HTTP_200_OK
        return WeightResponse.from_orm(weight)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error saving weight: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{weight_id}", response_model=StatusResponse)
async def delete_weight(
    weight_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not crud.delete_weight(db, current_user.id, weight_id):
            raise HTTPException(status_code=404, detail="Weight entry not found")
        return StatusResponse(message="Weight entry deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting weight: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
