from app.api.menu_generation.menu_generation import router as menu_generation_router

__all__ = ["menu_generation_router"]
