"""
AI analysis of candidate headlines.

One chat completion per candidate, asking for a short summary, a 1-5 hype
score and a category. The reply is validated strictly: a blank summary or a
missing / non-integer / out-of-range hype score fails the whole analysis.
An unknown category is replaced by "Other". Quota and rate-limit errors from
the service produce a degraded result built from the title so the candidate
is still kept.
"""
import asyncio
import json
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, StrictInt, StrictStr, ValidationError, field_validator

from app.services.processing.scorer import RelevanceScorer

logger = logging.getLogger(__name__)

ALLOWED_CATEGORIES = ("Model Releases", "Funding", "Regulation", "Research", "Drama", "Other")
DEFAULT_CATEGORY = "Other"
DEFAULT_HYPE_SCORE = 3
SUMMARY_MAX_CHARS = 120
DEFAULT_SNIPPET_WORDS = 120

QUOTA_ERROR_CODES = frozenset({"insufficient_quota", "rate_limit_exceeded"})

PROMPT_TEMPLATE = """Analyze this news headline and snippet for a tech news aggregator:
Title: "{title}"
Snippet: "{snippet}"
Base score: {base_score}
Please provide:
1. A concise 1-2 sentence summary (max {summary_chars} characters)
2. A hype score from 1-5 (1: minor, 3: notable, 5: major news)
3. A category from this list: {categories}
Consider the base score but adjust based on the content's significance.
Respond in JSON format: {{"summary": "...", "hype_score": number, "category": "..."}}"""


class AnalysisQuotaError(Exception):
    """Raised by enrichment clients when the service is out of quota or capacity."""

    def __init__(self, message: str = "analysis quota exceeded", code: str = "insufficient_quota"):
        super().__init__(message)
        self.code = code


def is_quota_error(exc: BaseException) -> bool:
    """True for quota / rate-limit class failures of the enrichment service."""
    if isinstance(exc, (AnalysisQuotaError, openai.RateLimitError)):
        return True
    return getattr(exc, "code", None) in QUOTA_ERROR_CODES


class AnalysisResult(BaseModel):
    """Validated enrichment output."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    summary: StrictStr
    hype_score: StrictInt = Field(ge=1, le=5)
    category: str = DEFAULT_CATEGORY

    _degraded: bool = PrivateAttr(default=False)

    @field_validator("summary")
    @classmethod
    def _summary_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("summary is empty")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value: Any) -> str:
        if isinstance(value, str) and value in ALLOWED_CATEGORIES:
            return value
        return DEFAULT_CATEGORY

    @property
    def degraded(self) -> bool:
        """True when built from defaults because the service was out of capacity."""
        return self._degraded

    @classmethod
    def fallback(cls, title: str) -> "AnalysisResult":
        summary = (title or "").strip()[:SUMMARY_MAX_CHARS] or "Untitled"
        result = cls(summary=summary, hype_score=DEFAULT_HYPE_SCORE, category=DEFAULT_CATEGORY)
        result._degraded = True
        return result


def truncate_words(text: Optional[str], max_words: int) -> str:
    words = (text or "").split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + "..."


class ArticleAnalyzer:
    """
    Enriches one candidate at a time.

    analyze() never raises: it returns an AnalysisResult, a degraded
    AnalysisResult on quota errors, or None on any other failure.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        scorer: Optional[RelevanceScorer] = None,
        timeout_seconds: float = 30.0,
        snippet_words: int = DEFAULT_SNIPPET_WORDS,
        temperature: float = 0.3,
    ):
        """
        Args:
            client: AsyncOpenAI-compatible client; created lazily from api_key if None
            api_key: OpenAI API key (falls back to OPENAI_API_KEY in the environment)
            model: Chat model name
            scorer: Keyword scorer used for the base score hint in the prompt
            timeout_seconds: Upper bound for one analysis call
            snippet_words: Word budget for the snippet sent to the model
            temperature: Sampling temperature
        """
        self._client = client
        self._api_key = api_key
        self.model = model
        self.scorer = scorer or RelevanceScorer()
        self.timeout_seconds = timeout_seconds
        self.snippet_words = snippet_words
        self.temperature = temperature
        self._logger = logging.getLogger(f"{__name__}.ArticleAnalyzer")

    @property
    def client(self):
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    def build_prompt(self, title: str, snippet: Optional[str]) -> str:
        truncated = truncate_words(snippet, self.snippet_words)
        return PROMPT_TEMPLATE.format(
            title=title,
            snippet=truncated or "N/A",
            base_score=self.scorer.score_candidate(title, truncated),
            summary_chars=SUMMARY_MAX_CHARS,
            categories=", ".join(ALLOWED_CATEGORIES),
        )

    async def _complete(self, prompt: str) -> Optional[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=self.temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def parse(self, title: str, content: Optional[str]) -> Optional[AnalysisResult]:
        """Validate a raw model reply. Returns None on any shape mismatch."""
        if not content:
            self._logger.error(f"[ANALYZE] Empty response for {title!r}")
            return None

        try:
            payload = json.loads(content)
            result = AnalysisResult.model_validate(payload)
        except (json.JSONDecodeError, ValidationError) as e:
            self._logger.warning(f"[ANALYZE] Rejected response for {title!r}: {e}")
            return None

        if payload.get("category") != result.category:
            self._logger.warning(
                f"[ANALYZE] Invalid category {payload.get('category')!r} for {title!r}, "
                f"defaulting to {DEFAULT_CATEGORY!r}"
            )
        return result

    async def analyze(self, title: str, snippet: Optional[str] = None) -> Optional[AnalysisResult]:
        """Analyze one headline. See class docstring for failure semantics."""
        self._logger.info(f"[ANALYZE] Analyzing: {title!r}")
        try:
            prompt = self.build_prompt(title, snippet)
            content = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout_seconds)
        except Exception as e:
            if is_quota_error(e):
                self._logger.warning(
                    f"[ANALYZE] Quota/rate limit hit for {title!r}; storing with defaults"
                )
                return AnalysisResult.fallback(title)
            self._logger.error(f"[ANALYZE] Analysis failed for {title!r}: {type(e).__name__}: {e}")
            return None

        result = self.parse(title, content)
        if result:
            self._logger.debug(
                f"[ANALYZE] Result for {title!r}: hype={result.hype_score}, category={result.category}"
            )
        return result
