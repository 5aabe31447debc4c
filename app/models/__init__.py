from .user import User, UserRole, UserStatus
from .profile import Profile
from .match_action import MatchAction, MatchActionKind
from .block import Block
from .favorite import Favorite
from .user_filters import UserFilters

__all__ = [
    "User", "UserRole", "UserStatus", "Profile", "MatchAction", "MatchActionKind",
    "Block", "Favorite", "UserFilters"
]
