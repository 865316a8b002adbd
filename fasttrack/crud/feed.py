from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional, Set
from fasttrack.crud.friends import FriendsCRUD
from fasttrack.models import CommunityPost, PostLike


def create_post(db: Session, user_id: str, post_type: str, content: Optional[str],
                metadata: Optional[Dict[str, Any]], visibility: str) -> CommunityPost:
    post = CommunityPost(
        user_id=user_id,
        type=post_type,
        content=content,
        metadata_json=metadata,
        visibility=visibility,
        likes_count=0,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def get_feed(db: Session, user_id: str, feed_type: str = "all", limit: int = 20, offset: int = 0) -> List[CommunityPost]:
    """
    ``public``: all public posts. ``mine``: the user's own posts. Anything
    else: public posts plus friends-only posts from friends and the user.
    """
    query = db.query(CommunityPost)
    if feed_type == "public":
        query = query.filter(CommunityPost.visibility == "public")
    elif feed_type == "mine":
        query = query.filter(CommunityPost.user_id == user_id)
    else:
        allowed = FriendsCRUD.get_friend_ids(db, user_id) + [user_id]
        query = query.filter(or_(
            CommunityPost.visibility == "public",
            and_(CommunityPost.visibility == "friends", CommunityPost.user_id.in_(allowed)),
        ))
    return query.order_by(CommunityPost.created_at.desc(), CommunityPost.id).offset(offset).limit(limit).all()


def liked_post_ids(db: Session, user_id: str, post_ids: List[str]) -> Set[str]:
    if not post_ids:
        return set()
    rows = db.query(PostLike.post_id).filter(PostLike.user_id == user_id, PostLike.post_id.in_(post_ids)).all()
    return {row[0] for row in rows}


def get_post(db: Session, post_id: str) -> Optional[CommunityPost]:
    return db.query(CommunityPost).filter(CommunityPost.id == post_id).first()


def like_post(db: Session, post: CommunityPost, user_id: str) -> bool:
    """False if the user already liked the post."""
    existing = db.query(PostLike).filter(PostLike.post_id == post.id, PostLike.user_id == user_id).first()
    if existing:
        return False
    db.add(PostLike(post_id=post.id, user_id=user_id))
    post.likes_count = (post.likes_count or 0) + 1
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def unlike_post(db: Session, post: CommunityPost, user_id: str) -> bool:
    like = db.query(PostLike).filter(PostLike.post_id == post.id, PostLike.user_id == user_id).first()
    if not like:
        return False
    db.delete(like)
    post.likes_count = max((post.likes_count or 0) - 1, 0)
    db.commit()
    return True


def delete_post(db: Session, user_id: str, post_id: str) -> bool:
    post = db.query(CommunityPost).filter(CommunityPost.id == post_id, CommunityPost.user_id == user_id).first()
    if not post:
        return False
    db.delete(post)
    db.commit()
    return True
