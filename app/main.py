import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from app.core.config import settings
from app.core.database import engine
from app.core.exceptions import MealPlannerError
from app.core.startup import lifespan
from app.models import Base
from app.api.auth import auth_router
from app.api.users import users_router
from app.api.dishes import dishes_router
from app.api.customization_groups import customization_groups_router
from app.api.ingredients import ingredients_router
from app.api.categories import categories_router
from app.api.meal_plans import meal_plans_router
from app.api.orders import orders_router
from app.api.menu_generation import menu_generation_router
from app.api.shopping_list import shopping_list_router
from app.middleware.security import SecurityHeadersMiddleware
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Meal Planner API",
    description="Backend API for meal ordering, weekly meal planning and shopping lists",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limit decorators look the limiter up on app state even when disabled
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add security headers middleware (should be added before CORS)
app.add_middleware(SecurityHeadersMiddleware)

# Applies DEFAULT_RATE_LIMIT to routes without their own limit
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(SlowAPIMiddleware)
else:
    logger.info("Rate limiting is disabled in settings")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Requested-With"],
    expose_headers=["Content-Disposition"],
)

@app.exception_handler(MealPlannerError)
async def meal_planner_error_handler(request: Request, exc: MealPlannerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"{location}: {message}" if location else message}
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(dishes_router, prefix="/api/dishes", tags=["dishes"])
app.include_router(customization_groups_router, prefix="/api/customization-groups", tags=["customization-groups"])
app.include_router(ingredients_router, prefix="/api/ingredients", tags=["ingredients"])
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(meal_plans_router, prefix="/api/meal-plans", tags=["meal-plans"])
app.include_router(orders_router, prefix="/api/orders", tags=["orders"])
app.include_router(menu_generation_router, prefix="/api/menu-generation", tags=["menu-generation"])
app.include_router(shopping_list_router, prefix="/api/shopping-list", tags=["shopping-list"])

@app.get("/")
async def root():
    return {"message": "Meal Planner API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
