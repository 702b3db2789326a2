from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import verify_access_token
from app.models.user import User
from app.schemas.user import User as UserSchema, UserCreate
from app.services.user_service import UserService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

def user_data_from_claims(subject: str, payload: dict) -> UserCreate:
    """Build the profile of a first-time user from verified token claims"""
    email = payload.get("email") or f"{subject}@users.local"
    name = (payload.get("name") or
            f"{payload.get('given_name', '')} {payload.get('family_name', '')}".strip() or
            None)
    return UserCreate(auth_subject=subject, email=email, name=name)

async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    authorization: str = request.headers.get("Authorization")

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"}
        )

    auth_parts = authorization.split()
    if len(auth_parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"}
        )

    scheme, token = auth_parts
    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication scheme",
            headers={"WWW-Authenticate": "Bearer"}
        )

    token_data = verify_access_token(token)
    subject = token_data.get("user_id")

    user_service = UserService(db)
    user = user_service.get_user_by_auth_subject(subject)
    if not user:
        # First authenticated request: create the user and their weekly plan
        user = user_service.create_user(user_data_from_claims(subject, token_data.get("payload", {})))
        logger.info(f"Auto-created user {user.id} on first request")

    return user

@router.get("/me", response_model=UserSchema)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
