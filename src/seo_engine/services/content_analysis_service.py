from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, List, Optional

from seo_engine.model import ContentMetrics
from seo_engine.utils.config_loader import ContentSettings

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r'<[^>]*>')
SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
SILENT_ENDING_RE = re.compile(r'(?:[^laeiouy]es|ed|[^laeiouy]e)$')
LEADING_Y_RE = re.compile(r'^y')
VOWEL_GROUP_RE = re.compile(r'[aeiouy]{1,2}')
NON_WORD_RE = re.compile(r'\W')
PUNCTUATION_RE = re.compile(r'[^\w\s]')

GAP_QUESTION_KEYWORDS = "Consider adding more informational and question-based keywords"
GAP_TOO_SHORT = "Content length is below recommended minimum ({min_words}+ words)"
GAP_TOO_LONG = "Content might be too long - consider breaking into multiple pages"


def round_half_up(value: float, digits: int = 0) -> float:
    """Rounds .5 away from zero for positive values (Python's round() is banker's rounding)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def strip_tags(html: str) -> str:
    """Simple tag-removal pass; no HTML parsing involved."""
    return TAG_RE.sub('', html).strip()


def split_sentences(text: str) -> List[str]:
    return SENTENCE_SPLIT_RE.split(text)


def count_syllables(word: str) -> int:
    """Heuristic English syllable count."""
    word = word.lower()
    if len(word) <= 3:
        return 1

    # Endings that usually do not add a syllable
    word = SILENT_ENDING_RE.sub('', word, count=1)
    word = LEADING_Y_RE.sub('', word, count=1)

    return max(1, len(VOWEL_GROUP_RE.findall(word)))


def readability_score(text: str) -> float:
    """
    Flesch Reading Ease, clamped to [0, 100] and rounded to an integer.
    Empty text (no sentences or no words) scores 0.
    """
    sentences = [s for s in split_sentences(text) if s.strip()]
    words = text.split()
    if not sentences or not words:
        return 0

    syllables = sum(count_syllables(w) for w in words)
    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = syllables / len(words)

    score = 206.835 - (1.015 * avg_words_per_sentence) - (84.6 * avg_syllables_per_word)
    return int(round_half_up(max(0.0, min(100.0, score))))


def keyword_density(content: str, keyword: str) -> float:
    """Share (in %) of whitespace tokens that contain `keyword`, case-insensitive."""
    words = content.lower().split()
    if not words or not keyword:
        return 0.0
    needle = keyword.lower()
    hits = sum(1 for w in words if needle in w)
    return hits / len(words) * 100


def extract_keywords(content: str, min_length: int = 3, top_n: int = 20) -> List[str]:
    """Most frequent words after punctuation removal, most frequent first."""
    words = [w for w in PUNCTUATION_RE.sub('', content.lower()).split() if len(w) >= min_length]
    return [word for word, _ in Counter(words).most_common(top_n)]


class ContentAnalysisService:
    """
    Plain-text content analysis: word count, readability, keyword density,
    duplicate sentences and content gaps.
    """

    def __init__(self, settings: Optional[ContentSettings] = None):
        self.settings = settings or ContentSettings()

    def analyze(self, html: str) -> ContentMetrics:
        """
        Analyzes raw HTML. Tags are stripped with a regex pass first.

        Raises:
            TypeError: If `html` is not a string.
        """
        if html is None:
            html = ""
        if not isinstance(html, str):
            raise TypeError(f"HTML must be a string, got {type(html).__name__}")

        text = strip_tags(html)
        words = text.lower().split()

        metrics = ContentMetrics(
            word_count=len(words),
            readability_score=readability_score(text),
            keyword_density=self.keyword_densities(words),
            duplicate_content=self.detect_duplicate_content(text),
            content_gaps=self.identify_content_gaps(words),
        )
        logger.debug(
            "Content analysed: %d words, readability %s, %d keywords",
            metrics.word_count, metrics.readability_score, len(metrics.keyword_density)
        )
        return metrics

    def keyword_densities(self, words: List[str]) -> Dict[str, float]:
        """
        Density per repeated keyword, top N by frequency. Ties keep the order
        in which the words first appear.
        """
        total = len(words)
        counts = Counter()
        for word in words:
            clean = NON_WORD_RE.sub('', word).lower()
            if len(clean) >= self.settings.min_keyword_len:
                counts[clean] += 1

        repeated = Counter({w: c for w, c in counts.items() if c > 1})
        return {
            word: round_half_up(count / total * 100, 2)
            for word, count in repeated.most_common(self.settings.max_keywords)
        }

    def detect_duplicate_content(self, text: str) -> bool:
        """
        True when fewer than 80% of the (long enough) sentences are unique.
        """
        sentences = [s for s in split_sentences(text) if len(s.strip()) > self.settings.min_sentence_len]
        unique = {s.strip().lower() for s in sentences}
        return len(unique) < len(sentences) * self.settings.duplicate_unique_ratio

    def identify_content_gaps(self, words: List[str]) -> List[str]:
        gaps = []
        seed_terms = self.settings.seed_terms

        word_set = set(words)
        missing = [term for term in seed_terms if term not in word_set]
        if len(missing) > len(seed_terms) * self.settings.gap_missing_ratio:
            gaps.append(GAP_QUESTION_KEYWORDS)

        if len(words) < self.settings.min_words:
            gaps.append(GAP_TOO_SHORT.format(min_words=self.settings.min_words))

        if len(words) > self.settings.max_words:
            gaps.append(GAP_TOO_LONG)

        return gaps

    def generate_recommendations(self, metrics: ContentMetrics) -> List[str]:
        """Turns content metrics into actionable advice."""
        s = self.settings
        recommendations = []

        if metrics.word_count < s.min_words:
            recommendations.append(
                f"Increase content length (current: {metrics.word_count} words, recommended: {s.min_words}+)"
            )

        if metrics.readability_score < s.readability_low:
            recommendations.append("Improve readability by using shorter sentences and simpler words")
        elif metrics.readability_score > s.readability_high:
            recommendations.append("Content might be too simple - consider adding more detailed explanations")

        if metrics.duplicate_content:
            recommendations.append("Reduce duplicate or repetitive content")

        stuffed = [kw for kw, density in metrics.keyword_density.items() if density > s.keyword_density_warning]
        if stuffed:
            recommendations.append(f"Reduce keyword density for: {', '.join(stuffed)}")

        recommendations.extend(metrics.content_gaps)
        return recommendations
