from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List
from app.models.content_block import ContentType

class ContentBlockIn(BaseModel):
    """Block envoyé par l'éditeur. id absent = block à créer"""
    id: Optional[int] = None
    type: ContentType
    position: int = Field(default=0, ge=0)
    title: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    text_content: Optional[str] = None

class ContentBlocksUpdate(BaseModel):
    """Ensemble complet des blocks de la page"""
    blocks: List[ContentBlockIn] = []

class ContentBlockResponse(BaseModel):
    """Block retourné"""
    id: int
    page_id: int
    type: ContentType
    position: int
    title: Optional[str]
    url: Optional[str]
    icon: Optional[str]
    text_content: Optional[str]
    clicks: int
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class ContentBlocksSyncResult(BaseModel):
    created: int
    updated: int
    deleted: int
    blocks: List[ContentBlockResponse]

class ClickResult(BaseModel):
    success: bool
    error: Optional[str] = None
