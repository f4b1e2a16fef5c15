"""Page model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base


DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_ACCENT_COLOR = "#3B82F6"


class Page(Base):
    __tablename__ = "pages"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)  # une page par user
    slug = Column(String, nullable=False, unique=True, index=True)
    
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    banner_image = Column(String, nullable=True)

    background_color = Column(String, nullable=False, default=DEFAULT_BACKGROUND_COLOR)
    text_color = Column(String, nullable=False, default=DEFAULT_TEXT_COLOR)
    accent_color = Column(String, nullable=False, default=DEFAULT_ACCENT_COLOR)
    font_family = Column(String, nullable=True)

    show_watermark = Column(Boolean, nullable=False, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    content_blocks = relationship(
        "ContentBlock",
        back_populates="page",
        order_by="ContentBlock.position",
        cascade="all, delete-orphan",
    )
    user = relationship("User")
    alias_rows = relationship(
        "PageAlias",
        back_populates="page",
        order_by="PageAlias.id",
        cascade="all, delete-orphan",
    )

    @property
    def aliases(self) -> list[str]:
        return [row.alias for row in self.alias_rows]


class PageAlias(Base):
    """Slug secondaire qui résout vers la même page"""
    __tablename__ = "page_aliases"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id"), nullable=False, index=True)
    alias = Column(String, nullable=False, unique=True, index=True)

    page = relationship("Page", back_populates="alias_rows")
