import re
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Optional, List
from app.schemas.content_block import ContentBlockResponse

# Schemas pour les pages

SLUG_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,62}[a-z0-9])?$")
COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class PageUpdate(BaseModel):
    """Mise à jour partielle: seuls les champs envoyés sont modifiés"""
    title: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    banner_image: Optional[str] = None
    font_family: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    accent_color: Optional[str] = None
    aliases: Optional[List[str]] = None
    show_watermark: Optional[bool] = None

    # champs non effaçables: null explicite refusé
    @field_validator("title", "slug", "background_color", "text_color", "accent_color", "aliases", "show_watermark")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title cannot be blank")
        return value.strip()

    @field_validator("slug")
    @classmethod
    def slug_format(cls, value: str) -> str:
        value = value.strip().lower()
        if not SLUG_PATTERN.match(value):
            raise ValueError("slug may only contain lowercase letters, digits and hyphens")
        return value

    @field_validator("background_color", "text_color", "accent_color")
    @classmethod
    def color_format(cls, value: str) -> str:
        if not COLOR_PATTERN.match(value):
            raise ValueError("color must be a hex value like #1A2B3C")
        return value

    @field_validator("aliases")
    @classmethod
    def alias_format(cls, value: List[str]) -> List[str]:
        # trim + on jette les vides, le reste est validé comme un slug
        cleaned = [alias.strip().lower() for alias in value if alias and alias.strip()]
        for alias in cleaned:
            if not SLUG_PATTERN.match(alias):
                raise ValueError(f"invalid alias: {alias}")
        return cleaned

class PageResponse(BaseModel):
    id: int
    user_id: int
    slug: str
    title: str
    description: Optional[str]
    banner_image: Optional[str]
    background_color: str
    text_color: str
    accent_color: str
    font_family: Optional[str]
    aliases: List[str] = []
    show_watermark: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageWithBlocks(PageResponse):
    content_blocks: List[ContentBlockResponse] = []

class BannerUploadResponse(BaseModel):
    url: str

# Vue publique (rendu de /{slug})

class PublicBlock(BaseModel):
    id: int
    type: str
    title: Optional[str]
    url: Optional[str]
    icon: Optional[str]
    text_content: Optional[str]

class PublicPageResponse(BaseModel):
    id: int
    slug: str
    title: Optional[str]
    description: Optional[str]
    banner_image: Optional[str]
    background_color: str
    text_color: str
    accent_color: str
    font_family: Optional[str]
    show_watermark: bool
    owner_name: Optional[str]
    blocks: List[PublicBlock] = []
