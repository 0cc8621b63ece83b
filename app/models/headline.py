"""
Persisted headline drafts.

Rows are created by the ingestion pipeline as moderation-pending drafts and
are owned by the moderation workflow afterwards; the pipeline never updates
a row once it has been inserted.
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, Boolean, JSON, Uuid, Index
from datetime import datetime, timezone
import uuid

from app.database import Base

MODERATION_PENDING = "pending"


class Headline(Base):
    """
    A curated headline.

    Attributes:
        id: Unique identifier (UUID)
        title: Headline title as published by the source
        url: Original article URL
        normalized_url: Deduplication key (unique)
        source: Human-readable source name (feed name or search-API source id)
        snippet: Source-provided description, if any
        published_at: Original publication date, if the source gave one
        summary: AI-written summary
        hype_score: AI hype score (1-5)
        category: AI category (Model Releases, Funding, ...)
        moderation_status: pending / approved / rejected
        is_published: Whether the headline is publicly visible
        ai_summary: Whether the summary was machine-generated
        created_at: When the draft was inserted
        item_metadata: Source-specific extras (relevance score, feed category)
    """
    __tablename__ = "headlines"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    title = Column(Text, nullable=False)
    url = Column(Text, nullable=False)
    normalized_url = Column(Text, nullable=False, unique=True, index=True)
    source = Column(String(255), nullable=False)
    snippet = Column(Text)
    published_at = Column(DateTime(timezone=True), index=True)

    summary = Column(Text, nullable=False)
    hype_score = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False, default="Other")

    moderation_status = Column(String(20), nullable=False, default=MODERATION_PENDING, index=True)
    is_published = Column(Boolean, nullable=False, default=False, index=True)
    ai_summary = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    item_metadata = Column(JSON, default=dict)

    __table_args__ = (
        Index('ix_headlines_published_status', 'is_published', 'published_at'),
    )

    def __repr__(self):
        return f"<Headline(source={self.source!r}, title={self.title[:40] if self.title else ''}...)>"
