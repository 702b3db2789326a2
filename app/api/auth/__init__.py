from app.api.auth.auth import router as auth_router, get_current_user

__all__ = ["auth_router", "get_current_user"]
