from .eligibility_service import EligibilityService, ViewerContext
from .discovery_service import DiscoveryService
from .match_service import MatchService
from .undo_service import UndoService
from .block_service import BlockService

__all__ = [
    "EligibilityService",
    "ViewerContext",
    "DiscoveryService",
    "MatchService",
    "UndoService",
    "BlockService"
]
