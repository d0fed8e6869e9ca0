"""
Content Analyzer Module.

Static SEO checks over an already generated article:
- Keyword density per comma-separated keyword, with health bands
- A heuristic E-E-A-T score (never calls the generation API)
- Meta description length status

Every function is pure; the expensive ones are memoized so the
presentation layer can call them on demand.
"""

import re
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Tuple

from .utils.matching import CONCLUSION_MARKERS

logger = logging.getLogger(__name__)

# Density bands (percent)
OVER_OPTIMIZED_THRESHOLD = 2.5
UNDER_USED_THRESHOLD = 0.5

DENSITY_OVER_OPTIMIZED = "over-optimized"
DENSITY_UNDER_USED = "under-used"
DENSITY_HEALTHY = "healthy"

# E-E-A-T heuristic
EEAT_BASE_SCORE = 70
EEAT_LENGTH_BONUS = 10
EEAT_HEADINGS_BONUS = 10
EEAT_CONCLUSION_BONUS = 10
EEAT_MIN_LENGTH = 1000
EEAT_MIN_H2_HEADINGS = 3

# Meta description target (characters)
META_DESCRIPTION_MIN = 115
META_DESCRIPTION_MAX = 125

META_ON_TARGET = "on-target"
META_TOO_SHORT = "too-short"
META_TOO_LONG = "too-long"

_H2_PATTERN = re.compile(r'^##\s+\S', re.MULTILINE)


@dataclass(frozen=True)
class KeywordDensity:
    keyword: str
    count: int
    density: float
    status: str

    @property
    def density_label(self) -> str:
        return f"{self.density:.2f}%"


def parse_keywords(keyword_string: str) -> List[str]:
    """Split a comma-separated keyword string into trimmed, lowercased, unique terms."""
    keywords: List[str] = []
    for term in (keyword_string or "").split(","):
        term = term.strip().lower()
        if term and term not in keywords:
            keywords.append(term)
    return keywords


def count_words(text: str) -> int:
    return len(text.split())


def keywords_pattern(keywords: Iterable[str]) -> "re.Pattern[str]":
    """
    Case-insensitive pattern matching any of ``keywords`` as a standalone term.

    A match may not touch a word character on either side. Unlike ``\\b`` this
    also holds for terms that start or end with punctuation ("c++", "c#",
    ".net"). Longer keywords are tried first so "seo tools" wins over "seo".
    """
    ordered = sorted(keywords, key=len, reverse=True)
    alternatives = '|'.join(re.escape(k) for k in ordered)
    return re.compile(rf'(?<!\w)(?:{alternatives})(?!\w)', re.IGNORECASE)


def keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return keywords_pattern([keyword])


def count_keyword_occurrences(text: str, keyword: str) -> int:
    if not keyword:
        return 0
    return len(keyword_pattern(keyword).findall(text))


def classify_density(density: float) -> str:
    if density > OVER_OPTIMIZED_THRESHOLD:
        return DENSITY_OVER_OPTIMIZED
    if density < UNDER_USED_THRESHOLD:
        return DENSITY_UNDER_USED
    return DENSITY_HEALTHY


@lru_cache(maxsize=128)
def analyze_keyword_density(article_body: str, keyword_string: str) -> Tuple[KeywordDensity, ...]:
    """
    Compute occurrence count and density for every keyword of the request.

    Args:
        article_body: Generated markdown article
        keyword_string: The original comma-separated keyword string

    Returns:
        One KeywordDensity per keyword, in keyword order. Empty when
        no keywords were supplied.
    """
    keywords = parse_keywords(keyword_string)
    if not keywords:
        return ()

    total_words = count_words(article_body)
    results = []
    for keyword in keywords:
        count = count_keyword_occurrences(article_body, keyword)
        density = round(count / total_words * 100, 2) if total_words else 0.0
        results.append(KeywordDensity(keyword, count, density, classify_density(density)))

    logger.debug(f"Keyword density computed for {len(results)} keywords over {total_words} words")
    return tuple(results)


def has_conclusion(article_body: str) -> bool:
    lowered = article_body.lower()
    return any(marker in lowered for marker in CONCLUSION_MARKERS)


@lru_cache(maxsize=128)
def calculate_eeat_score(article_body: str) -> int:
    """Heuristic E-E-A-T score in [70, 100] from length, structure and a conclusion."""
    score = EEAT_BASE_SCORE
    if len(article_body) > EEAT_MIN_LENGTH:
        score += EEAT_LENGTH_BONUS
    if len(_H2_PATTERN.findall(article_body)) >= EEAT_MIN_H2_HEADINGS:
        score += EEAT_HEADINGS_BONUS
    if has_conclusion(article_body):
        score += EEAT_CONCLUSION_BONUS
    return score


def meta_description_status(meta_description: str) -> str:
    """Flag, but never enforce, the 115-125 character target."""
    length = len(meta_description)
    if length < META_DESCRIPTION_MIN:
        return META_TOO_SHORT
    if length > META_DESCRIPTION_MAX:
        return META_TOO_LONG
    return META_ON_TARGET
