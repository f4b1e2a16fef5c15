from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base


class ContentType(str, Enum):
    LINK = "LINK"
    TEXT = "TEXT"
    HEADER = "HEADER"


class ContentBlock(Base):
    __tablename__ = "content_blocks"
    
    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id"), nullable=False, index=True)
    type = Column(String, nullable=False, default=ContentType.LINK.value)
    position = Column(Integer, nullable=False, default=0)  # position dans la page, 0..N-1

    title = Column(String, nullable=True)
    url = Column(String, nullable=True)  # LINK uniquement
    icon = Column(String, nullable=True)  # LINK uniquement
    text_content = Column(String, nullable=True)  # TEXT et HEADER

    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    page = relationship("Page", back_populates="content_blocks")
