from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union

class Settings(BaseSettings):
    # Application Secret Key - signs bearer tokens, must be set via environment variable
    SECRET_KEY: str = ""

    # Database Configuration - must be set via environment variable
    DATABASE_URL: str = ""

    # JWT Validation Settings
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = ""
    JWT_CLOCK_SKEW_TOLERANCE_SECONDS: int = 5
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS Configuration - must be set via environment variable
    ALLOWED_ORIGINS: Union[List[str], str] = []

    # Rate Limiting Configuration
    RATE_LIMIT_ENABLED: bool = True

    # Default rate limits (requests per minute)
    DEFAULT_RATE_LIMIT: str = "100/minute"

    # Batch writes are more restrictive
    MENU_GENERATION_RATE_LIMIT: str = "10/minute"
    EXPORT_RATE_LIMIT: str = "20/minute"

    # Standard endpoint rate limits
    ORDER_RATE_LIMIT: str = "60/minute"
    DISH_RATE_LIMIT: str = "60/minute"
    MEAL_PLAN_RATE_LIMIT: str = "60/minute"
    CATALOG_RATE_LIMIT: str = "30/minute"
    USER_RATE_LIMIT: str = "20/minute"

    # Menu generation: how free-text order dish names are matched to the catalog
    MENU_DISH_MATCH_STRATEGY: str = "substring"  # substring | exact

    # Ingredient translation variants
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[List[str], str] = ["en", "zh-CN"]

    LOG_LEVEL: str = "INFO"

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('SUPPORTED_LANGUAGES', mode='before')
    @classmethod
    def parse_supported_languages(cls, v):
        if isinstance(v, str):
            return [code.strip() for code in v.split(',') if code.strip()]
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"  # Ignore extra environment variables

settings = Settings()
