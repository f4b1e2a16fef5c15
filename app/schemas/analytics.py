from pydantic import BaseModel
from datetime import date
from typing import List, Optional

class DailyVisits(BaseModel):
    day: date
    visits: int

class SourceCount(BaseModel):
    source: str
    count: int

class LocationCount(BaseModel):
    country: str
    count: int

class TopLink(BaseModel):
    id: int
    title: str
    url: str
    clicks: int

class AnalyticsSummary(BaseModel):
    """Statistiques d'une page, calculées à partir des visites et des blocks"""
    total_visits: int = 0
    visits_last_7_days: int = 0
    visits_last_30_days: int = 0
    visits_by_day: List[DailyVisits] = []
    top_referrers: List[SourceCount] = []
    top_locations: List[LocationCount] = []
    top_links: List[TopLink] = []
    total_link_clicks: int = 0

class PageAnalyticsResponse(AnalyticsSummary):
    page_id: int
    slug: str
    title: str

class DashboardResponse(BaseModel):
    has_page: bool
    slug: Optional[str] = None
    total_visits: int = 0
    visits_last_7_days: int = 0
    total_link_clicks: int = 0
    content_blocks: int = 0
