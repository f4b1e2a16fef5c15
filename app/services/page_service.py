# IMPORTS
import logging
import random
import re
import string
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.errors import BlockNotFoundError, PageNotFoundError, PermissionDeniedError, SlugTakenError
from app.models.page import Page, PageAlias
from app.models.content_block import ContentBlock, ContentType
from app.models.user import User
from app.schemas.content_block import ContentBlockIn
from app.schemas.page import PublicBlock, PublicPageResponse
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_PAGE_TITLE = "My Link Page"
FALLBACK_SLUG = "page"
SLUG_SUFFIX_LENGTH = 5

# chemins de l'API, jamais utilisables comme slug public
RESERVED_SLUGS = {"health", "auth", "pages", "blocks", "analytics", "dashboard", "uploads", "docs", "redoc", "openapi.json"}

# champs de la page modifiables via update_page (aliases traité à part)
UPDATABLE_FIELDS = (
    "title",
    "description",
    "slug",
    "banner_image",
    "font_family",
    "background_color",
    "text_color",
    "accent_color",
    "show_watermark",
)


# func 1: slug_in_use()
def slug_in_use(db: Session, slug: str, exclude_page_id: Optional[int] = None) -> bool:
    """Un slug est pris s'il est le slug OU un alias d'une autre page"""
    if slug in RESERVED_SLUGS:
        return True
    page_query = db.query(Page.id).filter(Page.slug == slug)
    alias_query = db.query(PageAlias.id).filter(PageAlias.alias == slug)
    if exclude_page_id is not None:
        page_query = page_query.filter(Page.id != exclude_page_id)
        alias_query = alias_query.filter(PageAlias.page_id != exclude_page_id)
    return page_query.first() is not None or alias_query.first() is not None


def _random_suffix() -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=SLUG_SUFFIX_LENGTH))


# func 2: generate_default_slug()
def generate_default_slug(db: Session, user: User) -> str:
    # partie locale de l'email, on ne garde que [a-z0-9]
    local_part = (user.email or "").split("@")[0].lower()
    base = re.sub(r"[^a-z0-9]", "", local_part) or FALLBACK_SLUG

    slug = base
    while slug_in_use(db, slug):
        slug = f"{base}-{_random_suffix()}"
    return slug


# func 3: get_or_create_user_page()
def get_or_create_user_page(db: Session, user: User) -> Page:
    """Retourne la page de l'user, créée à la première ouverture de l'éditeur"""
    page = db.query(Page).filter(Page.user_id == user.id).first()
    if page:
        return page

    page = Page(
        user_id=user.id,
        slug=generate_default_slug(db, user),
        title=user.name or DEFAULT_PAGE_TITLE,
    )
    page.content_blocks.append(
        ContentBlock(type=ContentType.LINK.value, title="My Website", url="https://example.com", position=0)
    )
    db.add(page)
    try:
        db.commit()
    except IntegrityError:
        # création concurrente pour le même user: on relit celle qui a gagné
        db.rollback()
        page = db.query(Page).filter(Page.user_id == user.id).first()
        if page is None:
            raise
        return page

    db.refresh(page)
    logger.info(f"Created page '{page.slug}' for user {user.id}")
    return page


# func 4: get_owned_page()
def get_owned_page(db: Session, user: User, page_id: int) -> Page:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise PageNotFoundError()
    if page.user_id != user.id:
        logger.warning(f"User {user.id} tried to modify page {page_id} owned by user {page.user_id}")
        raise PermissionDeniedError()
    return page


# func 5: resolve_page()
def resolve_page(db: Session, slug: str) -> Optional[Page]:
    """Slug direct d'abord, puis les alias"""
    slug = slug.strip().lower()
    page = db.query(Page).filter(Page.slug == slug).first()
    if page:
        return page

    return db.query(Page).join(PageAlias, PageAlias.page_id == Page.id).filter(PageAlias.alias == slug).first()


# func 6: normalize_aliases()
def normalize_aliases(values: List[str], slug: str) -> List[str]:
    """Trim, minuscules, sans vides ni doublons, sans le slug lui-même, tronqué à MAX_ALIASES"""
    aliases: List[str] = []
    for value in values:
        alias = (value or "").strip().lower()
        if alias and alias != slug and alias not in aliases:
            aliases.append(alias)
    return aliases[:settings.MAX_ALIASES]


# func 7: update_page()
def update_page(db: Session, user: User, page_id: int, data: Dict[str, Any]) -> Page:
    """
    Mise à jour partielle des réglages de la page.

    - seuls les champs présents dans data sont modifiés
    - un slug ou alias déjà utilisé par une autre page lève SlugTakenError
    - la page doit appartenir à l'user (PermissionDeniedError sinon)
    """
    page = get_owned_page(db, user, page_id)

    new_slug = data.get("slug")
    if new_slug and new_slug != page.slug and slug_in_use(db, new_slug, exclude_page_id=page.id):
        raise SlugTakenError()

    final_slug = new_slug or page.slug
    aliases = None
    if "aliases" in data:
        aliases = normalize_aliases(data["aliases"] or [], final_slug)
    elif final_slug in page.aliases:
        # le slug devient un ancien alias: on le retire de la liste
        aliases = [alias for alias in page.aliases if alias != final_slug]

    if aliases is not None:
        for alias in aliases:
            if slug_in_use(db, alias, exclude_page_id=page.id):
                raise SlugTakenError(f"URL alias '{alias}' already taken")

    changed_fields: List[str] = []
    for field in UPDATABLE_FIELDS:
        if field in data and getattr(page, field) != data[field]:
            setattr(page, field, data[field])
            changed_fields.append(field)

    try:
        if aliases is not None and aliases != page.aliases:
            # suppression flushée avant réinsertion (contrainte unique sur alias)
            page.alias_rows.clear()
            db.flush()
            page.alias_rows.extend(PageAlias(alias=alias) for alias in aliases)
            changed_fields.append("aliases")
        db.commit()
    except IntegrityError:
        db.rollback()
        raise SlugTakenError()

    db.refresh(page)
    logger.info(f"Updated page {page.id}: {changed_fields or 'no changes'}")
    return page


def _block_fields(block: ContentBlockIn, position: int) -> Dict[str, Any]:
    # url/icon réservés aux LINK, text_content aux TEXT/HEADER
    is_link = block.type == ContentType.LINK
    return {
        "type": block.type.value,
        "position": position,
        "title": block.title or None,
        "url": (block.url or None) if is_link else None,
        "icon": (block.icon or None) if is_link else None,
        "text_content": None if is_link else (block.text_content or None),
    }


# func 8: update_page_content_blocks()
def update_page_content_blocks(db: Session, user: User, page_id: int, blocks: List[ContentBlockIn]) -> Dict[str, Any]:
    """
    Synchronise l'ensemble des blocks de la page avec ceux envoyés par l'éditeur.

    LOGIQUE:
    1. block sans id -> création
    2. block avec id -> mise à jour (l'id doit appartenir à cette page)
    3. block existant absent de la liste -> suppression
    Le tout dans un seul commit: en cas d'erreur rien n'est appliqué.
    Les positions sont renumérotées 0..N-1 selon l'ordre envoyé.
    """
    page = get_owned_page(db, user, page_id)

    existing = {block.id: block for block in db.query(ContentBlock).filter(ContentBlock.page_id == page.id).all()}

    submitted_ids = [block.id for block in blocks if block.id is not None]
    if len(submitted_ids) != len(set(submitted_ids)):
        raise ValueError("Duplicate content block id in payload")
    unknown_ids = set(submitted_ids) - set(existing)
    if unknown_ids:
        raise BlockNotFoundError(f"Content block {min(unknown_ids)} not found on this page")

    # tri stable: position envoyée, puis ordre de la liste
    ordered = [block for _, block in sorted(enumerate(blocks), key=lambda item: (item[1].position, item[0]))]

    created = updated = deleted = 0
    try:
        for block_id, block in existing.items():
            if block_id not in submitted_ids:
                db.delete(block)
                deleted += 1

        for position, block_data in enumerate(ordered):
            fields = _block_fields(block_data, position)
            if block_data.id is None:
                db.add(ContentBlock(page_id=page.id, **fields))
                created += 1
            else:
                block = existing[block_data.id]
                for key, value in fields.items():
                    setattr(block, key, value)
                updated += 1

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving content blocks for page {page.id}: {e}")
        raise

    db.refresh(page)
    logger.info(f"Saved content blocks for page {page.id}: {created} created, {updated} updated, {deleted} deleted")
    return {
        "created": created,
        "updated": updated,
        "deleted": deleted,
        "blocks": list(page.content_blocks),
    }


# func 9: build_public_view()
def build_public_view(page: Page) -> PublicPageResponse:
    """
    Données de rendu de la page publique.

    Le premier block HEADER remplace titre/description de la page.
    Les HEADER ne sont jamais rendus dans la liste de contenu.
    """
    blocks = sorted(page.content_blocks, key=lambda block: block.position)
    header = next((block for block in blocks if block.type == ContentType.HEADER.value), None)

    return PublicPageResponse(
        id=page.id,
        slug=page.slug,
        title=header.title if header else page.title,
        description=header.text_content if header else page.description,
        banner_image=page.banner_image,
        background_color=page.background_color,
        text_color=page.text_color,
        accent_color=page.accent_color,
        font_family=page.font_family,
        show_watermark=page.show_watermark,
        owner_name=page.user.name if page.user else None,
        blocks=[
            PublicBlock(
                id=block.id,
                type=block.type,
                title=block.title,
                url=block.url,
                icon=block.icon,
                text_content=block.text_content,
            )
            for block in blocks
            if block.type != ContentType.HEADER.value
        ],
    )
