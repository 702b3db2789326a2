from app.api.ingredients.ingredients import router as ingredients_router

__all__ = ["ingredients_router"]
