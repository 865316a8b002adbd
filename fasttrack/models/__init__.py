from fasttrack.database import Base
from fasttrack.models.user import User
from fasttrack.models.profile import Profile
from fasttrack.models.fast import Fast
from fasttrack.models.weight import Weight
from fasttrack.models.friend_request import FriendRequest, FriendRequestStatus
from fasttrack.models.friendship import Friendship
from fasttrack.models.challenge import Challenge, ChallengeParticipant
from fasttrack.models.weekly_challenge import WeeklyChallenge, WeeklyChallengeParticipant
from fasttrack.models.community_post import CommunityPost, PostLike
from fasttrack.models.device import DeviceToken
from fasttrack.models.notification_settings import NotificationSettings
from fasttrack.models.circle import Circle, CircleMember, CircleMessage

__all__ = [
    "Base", "User", "Profile", "Fast", "Weight",
    "FriendRequest", "FriendRequestStatus", "Friendship",
    "Challenge", "ChallengeParticipant", "WeeklyChallenge", "WeeklyChallengeParticipant",
    "CommunityPost", "PostLike", "DeviceToken", "NotificationSettings",
    "Circle", "CircleMember", "CircleMessage",
]
