"""
Title and URL curation rules applied before a candidate is sent for analysis.

Rejects headlines that are too short or too long, use clickbait phrasing or
punctuation, or do not point at an http(s) URL.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import re
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TitleRules:
    min_length: int = 20
    max_length: int = 120
    blacklisted_phrases: Tuple[str, ...] = (
        "you won't believe", "here's why", "this one weird trick",
        "shocking", "must-see",
    )
    blacklisted_punctuation: Tuple[str, ...] = ("!!!", "???")


@dataclass
class ValidationResult:
    """Result of curation checks."""
    is_valid: bool
    issues: List[str] = field(default_factory=list)

    def __repr__(self):
        status = "VALID" if self.is_valid else "INVALID"
        return f"<ValidationResult({status}, issues={len(self.issues)})>"


class CandidateValidator:
    """Checks a candidate's title and URL against curation rules."""

    VALID_URL_PATTERN = re.compile(r'^https?://[^\s/?#]+[^\s]*$', re.I)

    def __init__(self, rules: Optional[TitleRules] = None):
        self.rules = rules or TitleRules()
        self._logger = logging.getLogger(f"{__name__}.CandidateValidator")

    def validate(self, candidate) -> ValidationResult:
        """
        Validate anything with `title` and `url` attributes.

        Returns:
            ValidationResult listing every rule the candidate broke
        """
        issues = self._check_title(candidate.title)
        if not self.VALID_URL_PATTERN.match((candidate.url or "").strip()):
            issues.append("Invalid URL format")

        result = ValidationResult(is_valid=not issues, issues=issues)
        if not result.is_valid:
            self._logger.debug(f"Candidate failed curation: {candidate.title!r}: {issues}")
        return result

    def _check_title(self, title: Optional[str]) -> List[str]:
        if not title or not title.strip():
            return ["Missing title"]

        issues = []
        lowered = title.strip().lower()

        if len(lowered) < self.rules.min_length:
            issues.append(f"Title too short ({len(lowered)} chars, min {self.rules.min_length})")
        elif len(lowered) > self.rules.max_length:
            issues.append(f"Title too long ({len(lowered)} chars, max {self.rules.max_length})")

        for phrase in self.rules.blacklisted_phrases:
            if phrase in lowered:
                issues.append(f"Clickbait phrase: {phrase!r}")
                break

        for punctuation in self.rules.blacklisted_punctuation:
            if punctuation in lowered:
                issues.append(f"Clickbait punctuation: {punctuation!r}")
                break

        return issues
