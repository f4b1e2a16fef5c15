"""Enregistrement des visites et des clics (effets de bord des pages publiques)"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from app.models.content_block import ContentBlock, ContentType
from app.models.page_visit import PageVisit

logger = logging.getLogger(__name__)


def client_ip(forwarded_for: Optional[str], real_ip: Optional[str], remote_addr: Optional[str]) -> Optional[str]:
    # x-forwarded-for peut contenir une chaîne de proxies: le premier est le client
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return real_ip or remote_addr or None


def record_page_visit(
    db: Session,
    page_id: int,
    user_id: Optional[int] = None,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
    referrer: Optional[str] = None,
    country: Optional[str] = None,
    city: Optional[str] = None,
) -> bool:
    """
    Enregistre une visite. Ne lève jamais: un échec est loggé et
    n'empêche pas le rendu de la page.
    """
    try:
        visit = PageVisit(
            page_id=page_id,
            user_id=user_id,
            ip=ip or None,
            user_agent=user_agent or None,
            referrer=referrer or None,
            country=country or None,
            city=city or None,
        )
        db.add(visit)
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error recording page visit for page {page_id}: {e}")
        return False


def increment_block_click(db: Session, block_id: int) -> Tuple[bool, Optional[str]]:
    """
    Incrément atomique côté base (UPDATE ... SET clicks = clicks + 1),
    uniquement pour un block LINK existant.

    Retourne (success, error)
    """
    try:
        updated = db.query(ContentBlock).filter(
            ContentBlock.id == block_id,
            ContentBlock.type == ContentType.LINK.value
        ).update({ContentBlock.clicks: ContentBlock.clicks + 1}, synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error incrementing content block click {block_id}: {e}")
        return False, "Could not record click."

    if not updated:
        logger.warning(f"Attempted to increment click for non-link or non-existent block: {block_id}")
        return False, "Not a link block or block not found."

    return True, None
