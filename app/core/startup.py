"""
Startup validation and checks for the Meal Planner backend
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Tuple
from app.core.config import settings

logger = logging.getLogger(__name__)

class StartupValidationError(Exception):
    """Raised when startup validation fails"""
    pass

def validate_secret_key() -> Tuple[bool, List[str]]:
    """
    Validate the SECRET_KEY configuration

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues = []

    if not settings.SECRET_KEY:
        issues.append("SECRET_KEY is not set")
        return False, issues

    # HMAC signing keys shorter than 32 bytes are brute-forceable
    min_length = 32
    if len(settings.SECRET_KEY.encode('utf-8')) < min_length:
        issues.append(f"SECRET_KEY is too short. Minimum {min_length} bytes required.")

    return len(issues) == 0, issues

def validate_database_url() -> Tuple[bool, List[str]]:
    """
    Validate the DATABASE_URL configuration

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues = []

    if not settings.DATABASE_URL:
        issues.append("DATABASE_URL is not set")
        return False, issues

    if settings.DATABASE_URL.startswith("sqlite"):
        logger.warning("DATABASE_URL points at SQLite. Use PostgreSQL for production deployments.")

    return len(issues) == 0, issues

def validate_cors_origins() -> Tuple[bool, List[str]]:
    """
    Validate CORS origins configuration

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues = []

    if not settings.ALLOWED_ORIGINS:
        logger.warning("ALLOWED_ORIGINS is not set; browser clients will be rejected")
    elif all("localhost" in origin for origin in settings.ALLOWED_ORIGINS):
        logger.warning("All CORS origins are localhost. Update for production deployment.")

    return True, issues

def validate_menu_generation() -> Tuple[bool, List[str]]:
    """
    Validate the dish matching strategy used by menu generation

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    from app.services.dish_resolver import DISH_RESOLVERS

    issues = []
    if settings.MENU_DISH_MATCH_STRATEGY not in DISH_RESOLVERS:
        issues.append(
            f"MENU_DISH_MATCH_STRATEGY must be one of: {', '.join(sorted(DISH_RESOLVERS))}"
        )
    return len(issues) == 0, issues

def perform_startup_validation(strict: bool = False) -> bool:
    """
    Perform all startup validations

    Args:
        strict: If True, failures raise instead of being logged

    Returns:
        True if all validations pass, False otherwise

    Raises:
        StartupValidationError: If critical validations fail in strict mode
    """
    logger.info("Starting application validation...")

    all_issues = []

    validations = [
        ("Secret Key", validate_secret_key),
        ("Database URL", validate_database_url),
        ("CORS Origins", validate_cors_origins),
        ("Menu Generation", validate_menu_generation),
    ]

    for name, validator in validations:
        is_valid, issues = validator()
        if not is_valid:
            logger.error(f"{name} validation failed: {'; '.join(issues)}")
            all_issues.extend([f"{name}: {issue}" for issue in issues])
        else:
            logger.info(f"{name} validation passed")

    if all_issues:
        error_summary = "\n".join([f"  - {issue}" for issue in all_issues])
        logger.error(f"Startup validation failed with {len(all_issues)} issues:\n{error_summary}")

        if strict:
            raise StartupValidationError(f"Startup validation failed: {'; '.join(all_issues)}")
        return False

    logger.info("All startup validations passed successfully")
    return True

async def startup_event():
    """Run the non-strict validations when the application starts"""
    try:
        perform_startup_validation(strict=False)
    except StartupValidationError as e:
        logger.error(f"Startup validation failed: {str(e)}")

@asynccontextmanager
async def lifespan(app):
    """FastAPI lifespan: validate configuration before serving requests"""
    await startup_event()
    yield

if __name__ == "__main__":
    # Command line validation
    logging.basicConfig(level=logging.INFO)
    try:
        success = perform_startup_validation(strict=True)
        print("All startup validations passed" if success else "Startup validation failed")
        sys.exit(0 if success else 1)
    except StartupValidationError as e:
        print(f"Critical validation error: {str(e)}")
        sys.exit(1)
