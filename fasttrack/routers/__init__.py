# API Routers
from fasttrack.routers import (
    auth, fasts, weights, profile, stats, sync, friends, social_profile,
    leaderboard, challenges, weekly_challenges, feed, notifications, circles
)

__all__ = [
    "auth", "fasts", "weights", "profile", "stats", "sync", "friends", "social_profile",
    "leaderboard", "challenges", "weekly_challenges", "feed", "notifications", "circles"
]
