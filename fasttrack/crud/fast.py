from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from fasttrack.models import Fast
from fasttrack.schemas.fast import FastUpsert

UPDATABLE_FIELDS = ("start_time", "end_time", "target_duration", "plan_id", "plan_name", "completed", "note")


def get_fasts(db: Session, user_id: str, ended_since_ms: Optional[int] = None) -> List[Fast]:
    """A user's fasts, newest first; optionally only those ended since a time."""
    query = db.query(Fast).filter(Fast.user_id == user_id)
    if ended_since_ms is not None:
        query = query.filter(Fast.end_time >= ended_since_ms)
    return query.order_by(Fast.start_time.desc()).all()


def get_fasts_for_users(db: Session, user_ids: List[str], ended_since_ms: Optional[int] = None) -> List[Fast]:
    """Completed fasts for many users at once."""
    if not user_ids:
        return []
    query = db.query(Fast).filter(
        Fast.user_id.in_(user_ids),
        Fast.completed.is_(True),
        Fast.end_time.isnot(None),
    )
    if ended_since_ms is not None:
        query = query.filter(Fast.end_time >= ended_since_ms)
    return query.all()


def get_fast(db: Session, user_id: str, fast_id: str) -> Optional[Fast]:
    return db.query(Fast).filter(Fast.id == fast_id, Fast.user_id == user_id).first()


def get_fast_by_id(db: Session, fast_id: str) -> Optional[Fast]:
    return db.query(Fast).filter(Fast.id == fast_id).first()


def get_active_fast(db: Session, user_id: str, exclude_id: Optional[str] = None) -> Optional[Fast]:
    query = db.query(Fast).filter(Fast.user_id == user_id, Fast.end_time.is_(None))
    if exclude_id:
        query = query.filter(Fast.id != exclude_id)
    return query.order_by(Fast.start_time.desc()).first()


def validate_fast(data: FastUpsert) -> Optional[str]:
    """Error message if the fast breaks the completed/end_time rules, else None."""
    if data.end_time is not None and data.end_time <= data.start_time:
        return "end_time must be after start_time"
    if data.completed and data.end_time is None:
        return "A completed fast must have an end_time"
    return None


def upsert_fast(db: Session, user_id: str, data: FastUpsert) -> Tuple[Optional[Fast], bool]:
    """
    Insert or update a fast by its client id.

    Returns ``(fast, created)``. ``fast`` is None when the id belongs to
    another user.
    """
    fast = get_fast_by_id(db, data.id)
    if fast is not None and fast.user_id != user_id:
        return None, False

    if fast is None:
        fast = Fast(id=data.id, user_id=user_id, **data.dict(include=set(UPDATABLE_FIELDS)))
        db.add(fast)
        created = True
    else:
        for name in UPDATABLE_FIELDS:
            setattr(fast, name, getattr(data, name))
        created = False

    db.commit()
    db.refresh(fast)
    return fast, created


def delete_fast(db: Session, user_id: str, fast_id: str) -> bool:
    fast = get_fast(db, user_id, fast_id)
    if not fast:
        return False
    db.delete(fast)
    db.commit()
    return True
