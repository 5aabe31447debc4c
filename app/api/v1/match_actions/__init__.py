from app.api.v1.match_actions.endpoints import router

__all__ = ["router"]
