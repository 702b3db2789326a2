from app.api.customization_groups.customization_groups import router as customization_groups_router

__all__ = ["customization_groups_router"]
