from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.deps import get_optional_user
from app.models.user import User
from app.schemas.page import PublicPageResponse
from app.services.page_service import build_public_view, resolve_page
from app.services.visit_service import client_ip, record_page_visit

# Enregistré en dernier dans main.py: /{slug} attrape tout le reste
router = APIRouter(tags=["public"])

@router.get("/{slug}", response_model=PublicPageResponse)
def view_page(
    slug: str,
    request: Request,
    db: Session = Depends(get_db),
    visitor: Optional[User] = Depends(get_optional_user),
    user_agent: Optional[str] = Header(None),
    referer: Optional[str] = Header(None),
    x_forwarded_for: Optional[str] = Header(None),
    x_real_ip: Optional[str] = Header(None),
):
    page = resolve_page(db, slug)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")

    view = build_public_view(page)

    # la visite ne doit jamais bloquer le rendu
    record_page_visit(
        db,
        page_id=page.id,
        user_id=visitor.id if visitor else None,
        ip=client_ip(x_forwarded_for, x_real_ip, request.client.host if request.client else None),
        user_agent=user_agent,
        referrer=referer,
    )
    return view
