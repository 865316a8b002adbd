from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.config import settings
from fasttrack.crud import feed as feed_crud
from fasttrack.database import get_db
from fasttrack.models import Profile, User
from fasttrack.schemas.feed import FeedResponse, PostCreate, PostResponse
from fasttrack.schemas.notification import StatusResponse
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social/feed", tags=["feed"])


def _post_response(post, user, profile, liked: bool) -> PostResponse:
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        username=user.username if user else None,
        display_name=profile.display_name if profile else None,
        avatar_id=profile.avatar_id if profile else 0,
        type=post.type,
        content=post.content,
        metadata=post.metadata_json,
        visibility=post.visibility,
        likes_count=post.likes_count or 0,
        is_liked=liked,
        created_at=post.created_at,
    )


@router.get("", response_model=FeedResponse)
async def get_feed(
    type: str = Query("all", description="all | public | mine"),
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Public posts plus friends-only posts from friends, newest first."""
    try:
        posts = feed_crud.get_feed(db, current_user.id, type, limit, offset)
        author_ids = list({p.user_id for p in posts})
        users = {u.id: u for u in db.query(User).filter(User.id.in_(author_ids)).all()} if author_ids else {}
        profiles = {p.user_id: p for p in db.query(Profile).filter(Profile.user_id.in_(author_ids)).all()} if author_ids else {}
        liked = feed_crud.liked_post_ids(db, current_user.id, [p.id for p in posts])
        return FeedResponse(
            posts=[_post_response(p, users.get(p.user_id), profiles.get(p.user_id), p.id in liked) for p in posts],
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        logger.exception(f"Error getting feed: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        post = feed_crud.create_post(
            db, current_user.id, payload.type, payload.content, payload.metadata, payload.visibility
        )
        profile = db.query(Profile).filter(Profile.user_id == current_user.id).first()
        return _post_response(post, current_user, profile, False)
    except Exception as e:
        logger.exception(f"Error creating post: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{post_id}/like", response_model=StatusResponse)
async def like_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        post = feed_crud.get_post(db, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        if not feed_crud.like_post(db, post, current_user.id):
            raise HTTPException(status_code=400, detail="Already liked")
        return StatusResponse(message="Liked")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error liking post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{post_id}/like", response_model=StatusResponse)
async def unlike_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        post = feed_crud.get_post(db, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        feed_crud.unlike_post(db, post, current_user.id)
        return StatusResponse(message="Unliked")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error unliking post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{post_id}", response_model=StatusResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete one of the caller's own posts."""
    try:
        if not feed_crud.delete_post(db, current_user.id, post_id):
            raise HTTPException(status_code=404, detail="Post not found")
        return StatusResponse(message="Post deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
