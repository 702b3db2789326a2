from app.api.meal_plans.meal_plans import router as meal_plans_router

__all__ = ["meal_plans_router"]
