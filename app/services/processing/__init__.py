"""
Candidate processing helpers for the ingestion pipeline.

- URL normalization (deduplication identity)
- Keyword relevance scoring
- Batch/store deduplication
- Title curation rules
"""
from .urls import normalize_url
from .keywords import DEFAULT_KEYWORD_CATEGORIES, KeywordCategory
from .scorer import RelevanceScorer, ScoringConfig, ScoreBreakdown
from .deduplicator import dedupe, dedupe_with_stats, normalize_all, DedupeResult
from .validator import CandidateValidator, TitleRules, ValidationResult

__all__ = [
    "normalize_url",
    "DEFAULT_KEYWORD_CATEGORIES",
    "KeywordCategory",
    "RelevanceScorer",
    "ScoringConfig",
    "ScoreBreakdown",
    "dedupe",
    "dedupe_with_stats",
    "normalize_all",
    "DedupeResult",
    "CandidateValidator",
    "TitleRules",
    "ValidationResult",
]
