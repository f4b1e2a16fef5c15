"""
Service analytics - agrégation des visites et des clics d'une page.

Les fonctions de calcul sont pures (records en entrée, résumé en sortie)
et tolèrent des listes vides. Seules load_page_analytics() et
get_dashboard_stats() touchent la base.
"""

from collections import Counter
from datetime import datetime, timedelta
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional, Sequence, Tuple
from app.core.config import settings
from app.models.content_block import ContentBlock, ContentType
from app.models.page import Page
from app.models.page_visit import PageVisit
from app.schemas.analytics import (
    AnalyticsSummary,
    DailyVisits,
    DashboardResponse,
    LocationCount,
    PageAnalyticsResponse,
    SourceCount,
    TopLink,
)


def _in_window(visit, now: datetime, days: int) -> bool:
    return visit.timestamp is not None and visit.timestamp >= now - timedelta(days=days)


def count_visits(visits: Sequence) -> int:
    return len(visits)


def count_visits_since(visits: Iterable, now: datetime, days: int) -> int:
    return sum(1 for visit in visits if _in_window(visit, now, days))


def daily_visit_series(visits: Iterable, now: datetime, days: int) -> List[DailyVisits]:
    """
    Visites par jour calendaire sur la fenêtre glissante.
    Seuls les jours avec au moins une visite apparaissent (pas de zéros).
    """
    per_day = Counter(visit.timestamp.date() for visit in visits if _in_window(visit, now, days))
    return [DailyVisits(day=day, visits=per_day[day]) for day in sorted(per_day)]


def top_counts(values: Iterable[Optional[str]], limit: int) -> List[Tuple[str, int]]:
    """Valeurs non nulles les plus fréquentes. Égalités: ordre de première apparition"""
    if limit <= 0:
        return []
    return Counter(value for value in values if value).most_common(limit)


def top_links(blocks: Iterable, limit: int) -> List[TopLink]:
    """Blocks LINK triés par clics décroissants (tri stable: ordre d'origine en cas d'égalité)"""
    if limit <= 0:
        return []
    links = [block for block in blocks if block.type == ContentType.LINK.value]
    ranked = sorted(links, key=lambda block: -(block.clicks or 0))[:limit]
    return [
        TopLink(
            id=block.id,
            title=block.title or "Untitled Link",
            url=block.url or "#",
            clicks=block.clicks or 0,
        )
        for block in ranked
    ]


def compute_analytics(
    visits: Sequence,
    blocks: Sequence,
    now: Optional[datetime] = None,
    window_days: int = settings.ANALYTICS_WINDOW_DAYS,
    top_sources_limit: int = settings.TOP_SOURCES_LIMIT,
    top_links_limit: int = settings.TOP_LINKS_LIMIT,
) -> AnalyticsSummary:
    if now is None:
        now = datetime.utcnow()

    return AnalyticsSummary(
        total_visits=count_visits(visits),
        visits_last_7_days=count_visits_since(visits, now, 7),
        visits_last_30_days=count_visits_since(visits, now, 30),
        visits_by_day=daily_visit_series(visits, now, window_days),
        top_referrers=[
            SourceCount(source=source, count=count)
            for source, count in top_counts((visit.referrer for visit in visits), top_sources_limit)
        ],
        top_locations=[
            LocationCount(country=country, count=count)
            for country, count in top_counts((visit.country for visit in visits), top_sources_limit)
        ],
        top_links=top_links(blocks, top_links_limit),
        total_link_clicks=sum(block.clicks or 0 for block in blocks if block.type == ContentType.LINK.value),
    )


def load_page_analytics(db: Session, page: Page, now: Optional[datetime] = None) -> PageAnalyticsResponse:
    visits = db.query(
        PageVisit.timestamp, PageVisit.referrer, PageVisit.country
    ).filter(PageVisit.page_id == page.id).order_by(PageVisit.timestamp, PageVisit.id).all()

    blocks = db.query(ContentBlock).filter(ContentBlock.page_id == page.id).order_by(ContentBlock.position).all()

    summary = compute_analytics(visits, blocks, now=now)
    return PageAnalyticsResponse(page_id=page.id, slug=page.slug, title=page.title, **summary.model_dump())


def get_dashboard_stats(db: Session, user_id: int, now: Optional[datetime] = None) -> DashboardResponse:
    if now is None:
        now = datetime.utcnow()

    page = db.query(Page).filter(Page.user_id == user_id).first()
    if not page:
        return DashboardResponse(has_page=False)

    total_visits = db.query(func.count(PageVisit.id)).filter(PageVisit.page_id == page.id).scalar()
    recent_visits = db.query(func.count(PageVisit.id)).filter(
        PageVisit.page_id == page.id,
        PageVisit.timestamp >= now - timedelta(days=settings.DASHBOARD_WINDOW_DAYS)
    ).scalar()
    total_clicks = db.query(func.sum(ContentBlock.clicks)).filter(
        ContentBlock.page_id == page.id,
        ContentBlock.type == ContentType.LINK.value
    ).scalar()
    block_count = db.query(func.count(ContentBlock.id)).filter(ContentBlock.page_id == page.id).scalar()

    return DashboardResponse(
        has_page=True,
        slug=page.slug,
        total_visits=total_visits or 0,
        visits_last_7_days=recent_visits or 0,
        total_link_clicks=total_clicks or 0,
        content_blocks=block_count or 0,
    )
