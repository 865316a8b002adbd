from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, List, Optional, Tuple
from collections import defaultdict
from fasttrack.crud.fast import get_fasts_for_users
from fasttrack.crud.profile import profile_timezone
from fasttrack.models.friend_request import FriendRequest, FriendRequestStatus
from fasttrack.models.friendship import Friendship
from fasttrack.models.profile import Profile
from fasttrack.models.user import User
from fasttrack.services import streaks
from fasttrack.services.records import Timestamp
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

PENDING = FriendRequestStatus.PENDING.value


class FriendsCRUD:

    @staticmethod
    def send_friend_request(db: Session, requester_id: str, recipient_username: str) -> Optional[FriendRequest]:
        """Send a friend request by username; None if the request isn't allowed."""
        recipient = db.query(User).filter(User.username == recipient_username.strip().lower()).first()
        if not recipient or not recipient.username:
            return None

        if requester_id == recipient.id:
            return None

        if FriendsCRUD.are_friends(db, requester_id, recipient.id):
            return None

        existing_request = db.query(FriendRequest).filter(
            and_(
                or_(
                    and_(FriendRequest.requester_id == requester_id, FriendRequest.recipient_id == recipient.id),
                    and_(FriendRequest.requester_id == recipient.id, FriendRequest.recipient_id == requester_id)
                ),
                FriendRequest.status == PENDING
            )
        ).first()
        if existing_request:
            return None

        try:
            friend_request = FriendRequest(requester_id=requester_id, recipient_id=recipient.id, status=PENDING)
            db.add(friend_request)
            db.commit()
            db.refresh(friend_request)
            return friend_request
        except SQLAlchemyError as e:
            logger.error(f"Error sending friend request: {e}")
            db.rollback()
            return None

    @staticmethod
    def accept_friend_request(db: Session, user_id: str, request_id: str) -> Optional[Friendship]:
        """Accept a friend request addressed to ``user_id`` and create the friendship."""
        friend_request = db.query(FriendRequest).filter(FriendRequest.id == request_id).first()
        if not friend_request or friend_request.recipient_id != user_id:
            return None
        if friend_request.status != PENDING:
            return None

        user1_id, user2_id = sorted([friend_request.requester_id, friend_request.recipient_id])
        friendship = Friendship(user1_id=user1_id, user2_id=user2_id)
        db.add(friendship)
        db.delete(friend_request)
        db.commit()
        db.refresh(friendship)
        return friendship

    @staticmethod
    def reject_friend_request(db: Session, user_id: str, request_id: str) -> bool:
        friend_request = db.query(FriendRequest).filter(FriendRequest.id == request_id).first()
        if not friend_request or friend_request.recipient_id != user_id:
            return False
        db.delete(friend_request)
        db.commit()
        return True

    @staticmethod
    def cancel_friend_request(db: Session, user_id: str, request_id: str) -> bool:
        friend_request = db.query(FriendRequest).filter(FriendRequest.id == request_id).first()
        if not friend_request or friend_request.requester_id != user_id:
            return False
        db.delete(friend_request)
        db.commit()
        return True

    @staticmethod
    def get_friend_requests(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[FriendRequest], int]:
        """Pending requests received by a user."""
        query = db.query(FriendRequest).filter(
            FriendRequest.recipient_id == user_id,
            FriendRequest.status == PENDING
        ).options(
            joinedload(FriendRequest.requester)
        ).order_by(FriendRequest.created_at.desc())
        total = query.count()
        return query.offset((page - 1) * page_size).limit(page_size).all(), total

    @staticmethod
    def get_sent_friend_requests(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[FriendRequest], int]:
        """Pending requests sent by a user."""
        query = db.query(FriendRequest).filter(
            FriendRequest.requester_id == user_id,
            FriendRequest.status == PENDING
        ).options(
            joinedload(FriendRequest.recipient)
        ).order_by(FriendRequest.created_at.desc())
        total = query.count()
        return query.offset((page - 1) * page_size).limit(page_size).all(), total

    @staticmethod
    def get_friends_list(db: Session, user_id: str, as_of: Timestamp, page: int = 1, page_size: int = 20) -> Tuple[List[dict], int]:
        """
        Friends of a user with streaks computed from their fasts.

        Fasts for the whole page are loaded in one query and bucketed in each
        friend's own profile timezone.
        """
        query = db.query(Friendship).filter(
            or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id)
        ).options(
            joinedload(Friendship.user1),
            joinedload(Friendship.user2)
        ).order_by(Friendship.created_at.desc())

        total = query.count()
        friendships = query.offset((page - 1) * page_size).limit(page_size).all()

        friend_ids = [f.user2_id if f.user1_id == user_id else f.user1_id for f in friendships]
        profiles: Dict[str, Profile] = {
            p.user_id: p for p in db.query(Profile).filter(Profile.user_id.in_(friend_ids)).all()
        } if friend_ids else {}
        fasts_by_user = defaultdict(list)
        for fast in get_fasts_for_users(db, friend_ids):
            fasts_by_user[fast.user_id].append(fast)

        items = []
        for friendship, friend_id in zip(friendships, friend_ids):
            friend = friendship.user2 if friendship.user1_id == user_id else friendship.user1
            profile = profiles.get(friend_id)
            history = fasts_by_user.get(friend_id, [])
            summary = streaks.streak_summary(history, as_of, profile_timezone(profile))
            items.append({
                "id": friendship.id,
                "friend_id": friend_id,
                "created_at": friendship.created_at,
                "friend_username": friend.username if friend else None,
                "friend_display_name": profile.display_name if profile else None,
                "friend_avatar_id": profile.avatar_id if profile else 0,
                "friend_current_streak": summary.current,
                "friend_longest_streak": summary.longest,
                "friend_total_fasts": len(history),
            })
        return items, total

    @staticmethod
    def get_friend_ids(db: Session, user_id: str) -> List[str]:
        friendships = db.query(Friendship).filter(
            or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id)
        ).all()
        return [f.user2_id if f.user1_id == user_id else f.user1_id for f in friendships]

    @staticmethod
    def remove_friend(db: Session, user_id: str, friend_id: str) -> bool:
        user1_id, user2_id = sorted([user_id, friend_id])
        friendship = db.query(Friendship).filter(
            Friendship.user1_id == user1_id,
            Friendship.user2_id == user2_id
        ).first()
        if not friendship:
            return False
        db.delete(friendship)
        db.commit()
        return True

    @staticmethod
    def are_friends(db: Session, user1_id: str, user2_id: str) -> bool:
        user1_id, user2_id = sorted([user1_id, user2_id])
        return db.query(Friendship).filter(
            Friendship.user1_id == user1_id,
            Friendship.user2_id == user2_id
        ).first() is not None

    @staticmethod
    def get_relationship_status_map(db: Session, current_user_id: str, other_user_ids: List[str]) -> Dict[str, str]:
        """Map other_user_id -> 'friend' | 'request_sent' | 'request_received' | 'none'."""
        if not other_user_ids:
            return {}

        status_map: Dict[str, str] = {user_id: 'none' for user_id in other_user_ids}

        friendships = db.query(Friendship).filter(
            or_(
                and_(Friendship.user1_id == current_user_id, Friendship.user2_id.in_(other_user_ids)),
                and_(Friendship.user2_id == current_user_id, Friendship.user1_id.in_(other_user_ids))
            )
        ).all()
        for fr in friendships:
            other_id = fr.user2_id if fr.user1_id == current_user_id else fr.user1_id
            status_map[other_id] = 'friend'

        pending_requests = db.query(FriendRequest).filter(
            FriendRequest.status == PENDING,
            or_(
                and_(FriendRequest.requester_id == current_user_id, FriendRequest.recipient_id.in_(other_user_ids)),
                and_(FriendRequest.recipient_id == current_user_id, FriendRequest.requester_id.in_(other_user_ids))
            )
        ).all()
        for req in pending_requests:
            if req.requester_id == current_user_id:
                if status_map.get(req.recipient_id) != 'friend':
                    status_map[req.recipient_id] = 'request_sent'
            elif status_map.get(req.requester_id) != 'friend':
                status_map[req.requester_id] = 'request_received'

        return status_map
