# Repositories package
from .base import BaseRepository
from .user_repository import UserRepository
from .profile_repository import ProfileRepository
from .match_action_repository import MatchActionRepository
from .block_repository import BlockRepository
from .favorite_repository import FavoriteRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ProfileRepository",
    "MatchActionRepository",
    "BlockRepository",
    "FavoriteRepository",
]
