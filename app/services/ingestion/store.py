"""
Headline persistence used by the ingestion pipeline.

The pipeline only needs four things from storage: every known URL in one
bulk read, a single-URL existence check, one insert per draft and a prune of
old published rows. HeadlineStore names that contract; SqlHeadlineStore
implements it on the async SQLAlchemy session factory.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol
import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.headline import MODERATION_PENDING, Headline

logger = logging.getLogger(__name__)


class StoreReadError(Exception):
    """Existing headlines could not be read."""


class StoreWriteError(Exception):
    """A draft could not be persisted."""

    def __init__(self, message: str, duplicate: bool = False):
        super().__init__(message)
        self.duplicate = duplicate


@dataclass
class Draft:
    """An enriched candidate ready to be stored as a moderation-pending headline."""
    title: str
    url: str
    normalized_url: str
    source: str
    summary: str
    hype_score: int
    category: str
    published_at: Optional[datetime] = None
    snippet: Optional[str] = None
    moderation_status: str = MODERATION_PENDING
    is_published: bool = False
    ai_summary: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "url": self.url,
            "normalized_url": self.normalized_url,
            "source": self.source,
            "summary": self.summary,
            "hype_score": self.hype_score,
            "category": self.category,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "moderation_status": self.moderation_status,
            "is_published": self.is_published,
            "ai_summary": self.ai_summary,
        }


class HeadlineStore(Protocol):
    async def list_urls(self) -> List[str]:
        ...

    async def url_exists(self, normalized_url: str) -> bool:
        ...

    async def insert_draft(self, draft: Draft) -> str:
        ...

    async def prune_published(self, older_than: datetime) -> int:
        ...


class SqlHeadlineStore:
    """HeadlineStore backed by the headlines table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._logger = logging.getLogger(f"{__name__}.SqlHeadlineStore")

    async def list_urls(self) -> List[str]:
        """Normalized URL of every stored headline, in one query."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Headline.normalized_url))
                urls = list(result.scalars().all())
        except SQLAlchemyError as e:
            self._logger.error(f"[STORE] Failed to read existing URLs: {e}")
            raise StoreReadError(str(e)) from e

        self._logger.debug(f"[STORE] Loaded {len(urls)} existing URLs")
        return urls

    async def url_exists(self, normalized_url: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Headline.id).where(Headline.normalized_url == normalized_url).limit(1)
                )
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            self._logger.error(f"[STORE] Failed to check {normalized_url}: {e}")
            raise StoreReadError(str(e)) from e

    async def insert_draft(self, draft: Draft) -> str:
        """Insert one draft in its own transaction. Returns the new row id."""
        headline = Headline(
            id=uuid.uuid4(),
            title=draft.title,
            url=draft.url,
            normalized_url=draft.normalized_url,
            source=draft.source,
            snippet=draft.snippet,
            published_at=draft.published_at,
            summary=draft.summary,
            hype_score=draft.hype_score,
            category=draft.category,
            moderation_status=draft.moderation_status,
            is_published=draft.is_published,
            ai_summary=draft.ai_summary,
            item_metadata=dict(draft.metadata),
        )

        async with self._session_factory() as session:
            try:
                session.add(headline)
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                self._logger.warning(f"[STORE] Duplicate headline {draft.normalized_url}")
                raise StoreWriteError(f"duplicate url: {draft.normalized_url}", duplicate=True) from e
            except SQLAlchemyError as e:
                await session.rollback()
                self._logger.error(f"[STORE] Insert failed for {draft.normalized_url}: {e}")
                raise StoreWriteError(str(e)) from e

        return str(headline.id)

    async def prune_published(self, older_than: datetime) -> int:
        """Delete published headlines whose publication date is before older_than."""
        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    delete(Headline).where(
                        Headline.is_published.is_(True),
                        Headline.published_at < older_than,
                    )
                )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                self._logger.error(f"[STORE] Prune failed: {e}")
                raise StoreWriteError(str(e)) from e

        deleted = result.rowcount or 0
        self._logger.info(f"[STORE] Pruned {deleted} published headlines older than {older_than.isoformat()}")
        return deleted
