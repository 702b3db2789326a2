from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.shopping_list import ShoppingListResponse, ShoppingListExportRequest
from app.services.shopping_list_service import ShoppingListService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=ShoppingListResponse)
async def get_shopping_list(
    start_date: str = Query(..., description="First day of the week, YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    shopping_list_service = ShoppingListService(db)
    return shopping_list_service.build_shopping_list(start_date)

@router.post("")
@limiter.limit(settings.EXPORT_RATE_LIMIT)
async def export_shopping_list(
    export_request: ShoppingListExportRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    shopping_list_service = ShoppingListService(db)
    body, content_type, filename = shopping_list_service.export_shopping_list(
        export_request.start_date,
        export_request.export_format
    )
    return Response(
        content=body,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
