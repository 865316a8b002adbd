from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from fasttrack.models import Weight
from fasttrack.schemas.weight import WeightUpsert


def get_weights(db: Session, user_id: str) -> List[Weight]:
    return db.query(Weight).filter(Weight.user_id == user_id).order_by(Weight.date.desc()).all()


def upsert_weight(db: Session, user_id: str, data: WeightUpsert) -> Tuple[Optional[Weight], bool]:
    """Returns ``(weight, created)``; weight is None when the id belongs to another user."""
    weight = db.query(Weight).filter(Weight.id == data.id).first()
    if weight is not None and weight.user_id != user_id:
        return None, False

    created = weight is None
    if created:
        weight = Weight(id=data.id, user_id=user_id, date=data.date, weight=data.weight)
        db.add(weight)
    else:
        weight.date = data.date
        weight.weight = data.weight
    db.commit()
    db.refresh(weight)
    return weight, created


def delete_weight(db: Session, user_id: str, weight_id: str) -> bool:
    weight = db.query(Weight).filter(Weight.id == weight_id, Weight.user_id == user_id).first()
    if not weight:
        return False
    db.delete(weight)
    db.commit()
    return True
