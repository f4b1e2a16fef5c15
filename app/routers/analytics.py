from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.page import Page
from app.schemas.analytics import DashboardResponse, PageAnalyticsResponse
from app.services.analytics_service import get_dashboard_stats, load_page_analytics

router = APIRouter(tags=["analytics"])

@router.get("/analytics", response_model=PageAnalyticsResponse)
def get_analytics(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Statistiques détaillées de la page de l'user
    page = db.query(Page).filter(Page.user_id == current_user.id).first()
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return load_page_analytics(db, page)

@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_dashboard_stats(db, current_user.id)
