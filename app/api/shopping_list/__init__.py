from app.api.shopping_list.shopping_list import router as shopping_list_router

__all__ = ["shopping_list_router"]
