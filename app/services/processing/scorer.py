"""
Keyword-based relevance scoring for candidate headlines.

Each keyword category contributes (number of its phrases found in the text)
times its weight. The weighted total is compressed into a 1-5 score:
ceil(total / divisor), clamped to [min_score, max_score].
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import math

from .keywords import DEFAULT_KEYWORD_CATEGORIES, KeywordCategory

logger = logging.getLogger(__name__)


@dataclass
class ScoringConfig:
    """Tunable scoring rules."""
    categories: Dict[str, KeywordCategory] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORD_CATEGORIES)
    )
    divisor: int = 3
    min_score: int = 1
    max_score: int = 5


@dataclass
class ScoreBreakdown:
    """Score with per-category weighted contributions."""
    score: int
    weighted_total: int
    components: Dict[str, int] = field(default_factory=dict)

    def __repr__(self):
        return f"<ScoreBreakdown(score={self.score}, weighted_total={self.weighted_total})>"


class RelevanceScorer:
    """
    Scores free text against a weighted keyword table.

    Never returns less than min_score: ties and misses favor inclusion, and
    the relevance floor is applied by whoever consumes the score.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        # Lower-case phrases once; duplicates within a category count once
        self._lowered: Dict[str, Tuple[int, Tuple[str, ...]]] = {
            name: (cat.weight, tuple(dict.fromkeys(k.lower() for k in cat.keywords)))
            for name, cat in self.config.categories.items()
        }

    def breakdown(self, text: str) -> ScoreBreakdown:
        lowered = (text or "").lower()
        components: Dict[str, int] = {}
        total = 0

        for name, (weight, phrases) in self._lowered.items():
            matches = sum(1 for phrase in phrases if phrase in lowered)
            if matches:
                components[name] = matches * weight
                total += matches * weight

        score = math.ceil(total / self.config.divisor)
        score = min(self.config.max_score, max(self.config.min_score, score))
        return ScoreBreakdown(score=score, weighted_total=total, components=components)

    def score(self, text: str) -> int:
        """Relevance score in [min_score, max_score] for the given text."""
        return self.breakdown(text).score

    def score_candidate(self, title: str, snippet: Optional[str] = None) -> int:
        """Score a title plus optional snippet the same way fetchers do."""
        return self.score(f"{title} {snippet or ''}")
