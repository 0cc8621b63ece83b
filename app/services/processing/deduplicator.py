"""
URL-based deduplication of fetched candidates.

Identity is the normalized URL only. The first occurrence of a URL wins;
later occurrences in the same batch, and anything whose URL is already
stored, are dropped. Survivors keep their input order.
"""
from dataclasses import dataclass, field
from typing import AbstractSet, Generic, Iterable, List, Protocol, TypeVar
import logging

from .urls import normalize_url

logger = logging.getLogger(__name__)


class HasUrl(Protocol):
    url: str


C = TypeVar("C", bound=HasUrl)


@dataclass
class DedupeResult(Generic[C]):
    unique: List[C] = field(default_factory=list)
    duplicate_in_batch: int = 0
    duplicate_in_store: int = 0

    @property
    def total(self) -> int:
        return len(self.unique) + self.duplicate_in_batch + self.duplicate_in_store


def normalize_all(urls: Iterable[str]) -> set:
    """Normalize a collection of stored URLs into a lookup set."""
    return {normalize_url(u) for u in urls if u}


def dedupe_with_stats(candidates: Iterable[C], existing_urls: AbstractSet[str]) -> DedupeResult[C]:
    """Deduplicate candidates and report where the duplicates came from."""
    result: DedupeResult[C] = DedupeResult()
    seen = set()

    for candidate in candidates:
        key = normalize_url(candidate.url)
        if key in seen:
            result.duplicate_in_batch += 1
            continue
        if key in existing_urls:
            result.duplicate_in_store += 1
            continue
        seen.add(key)
        result.unique.append(candidate)

    logger.info(
        f"[DEDUP] processed={result.total}, in_batch={result.duplicate_in_batch}, "
        f"in_store={result.duplicate_in_store}, unique={len(result.unique)}"
    )
    return result


def dedupe(candidates: Iterable[C], existing_urls: AbstractSet[str]) -> List[C]:
    """
    Drop candidates whose normalized URL was already seen in this batch or is stored.

    Args:
        candidates: Candidates in fetch order
        existing_urls: Normalized URLs already in the store

    Returns:
        Surviving candidates in their original order
    """
    return dedupe_with_stats(candidates, existing_urls).unique
