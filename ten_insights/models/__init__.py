from .rating import Rating
from .user_profile import UserProfile
from .friendship import Friendship, FriendshipScoreRecord
from .user_stats import UserStats
from .checkin_cooldown import CheckInCooldown

__all__ = [
    "Rating",
    "UserProfile",
    "Friendship",
    "FriendshipScoreRecord",
    "UserStats",
    "CheckInCooldown",
]
