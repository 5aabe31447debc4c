from app.api.v1.discovery.endpoints import router

__all__ = ["router"]
