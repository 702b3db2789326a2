from app.api.dishes.dishes import router as dishes_router

__all__ = ["dishes_router"]
