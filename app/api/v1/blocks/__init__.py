from app.api.v1.blocks.endpoints import router

__all__ = ["router"]
