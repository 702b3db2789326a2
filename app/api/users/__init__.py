from app.api.users.users import router as users_router

__all__ = ["users_router"]
