from .profile import ProfileSummary
from .discovery import CandidateItem, DiscoveryResponse
from .match_action import (
    MatchActionCreate,
    MatchAction,
    MatchActionResponse,
    UndoRequest,
    UndoResponse,
    UndoableAction,
    UndoableStatus
)
from .block import BlockCreate, BlockCreateResponse, BlockedUser, BlockedUsersResponse
from .match import (
    MutualMatchItem,
    MutualMatchesResponse,
    LikeReceivedItem,
    LikesReceivedResponse,
    LikeSentItem,
    LikesSentResponse,
    MatchStatusResponse,
    UnmatchResponse
)

__all__ = [
    "ProfileSummary",
    "CandidateItem", "DiscoveryResponse",
    "MatchActionCreate", "MatchAction", "MatchActionResponse",
    "UndoRequest", "UndoResponse", "UndoableAction", "UndoableStatus",
    "BlockCreate", "BlockCreateResponse", "BlockedUser", "BlockedUsersResponse",
    "MutualMatchItem", "MutualMatchesResponse",
    "LikeReceivedItem", "LikesReceivedResponse",
    "LikeSentItem", "LikesSentResponse",
    "MatchStatusResponse", "UnmatchResponse",
]
