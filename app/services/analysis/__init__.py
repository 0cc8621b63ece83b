"""
Headline enrichment through the OpenAI chat API.
"""
from .analyzer import (
    ALLOWED_CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_HYPE_SCORE,
    AnalysisQuotaError,
    AnalysisResult,
    ArticleAnalyzer,
    is_quota_error,
)

__all__ = [
    "ALLOWED_CATEGORIES",
    "DEFAULT_CATEGORY",
    "DEFAULT_HYPE_SCORE",
    "AnalysisQuotaError",
    "AnalysisResult",
    "ArticleAnalyzer",
    "is_quota_error",
]
