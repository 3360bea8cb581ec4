"""
Keyword-based feature extraction for social-media posts.

Cleans post text and derives the numeric features the signal engine
reads (keyword counts and engagement) plus a few descriptive ones.
"""

from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Sequence
import math
import re
import structlog

from ..models.post import Post
from .base import FeatureExtractor

logger = structlog.get_logger()

BULLISH_KEYWORDS = (
    "buy", "long", "bullish", "up", "gain", "profit", "moon", "rocket",
    "खरीदें", "तेजी", "लाभ", "ऊपर"
)

BEARISH_KEYWORDS = (
    "sell", "short", "bearish", "down", "loss", "crash", "dump",
    "बेचें", "मंदी", "नुकसान", "नीचे"
)

_URL_PATTERN = re.compile(r"http[s]?://[^\s]+")
# Keep word characters, whitespace and the Devanagari block (including its marks)
_SPECIAL_CHARS_PATTERN = re.compile(r"[^\w\s\u0900-\u097F]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

class KeywordFeatureExtractor(FeatureExtractor):
    """Cleans text and counts market keywords"""

    def __init__(self, bullish_keywords: Sequence[str] = BULLISH_KEYWORDS,
                 bearish_keywords: Sequence[str] = BEARISH_KEYWORDS,
                 include_term_frequencies: bool = False, max_terms: int = 10):
        self.bullish_keywords = tuple(k.lower() for k in bullish_keywords)
        self.bearish_keywords = tuple(k.lower() for k in bearish_keywords)
        self.include_term_frequencies = include_term_frequencies
        self.max_terms = max_terms

    @staticmethod
    def clean_text(text: str) -> str:
        if not text or not text.strip():
            return ""

        text = _URL_PATTERN.sub(" ", text)
        text = _SPECIAL_CHARS_PATTERN.sub(" ", text)
        text = _WHITESPACE_PATTERN.sub(" ", text).strip()
        return text.lower()

    @staticmethod
    def engagement_score(post: Post) -> float:
        """log10 of weighted interactions: likes + 2 * reposts + 1.5 * replies"""
        total = post.likes + post.reposts * 2 + post.replies * 1.5
        return math.log10(max(0.0, total) + 1)

    @staticmethod
    def count_keywords(text: str, keywords: Sequence[str]) -> int:
        """Number of distinct keywords contained in the text"""
        lowered = text.lower()
        return sum(1 for keyword in keywords if keyword in lowered)

    def term_frequencies(self, text: str) -> Dict[str, float]:
        words = text.split()
        if not words:
            return {}

        counts = Counter(words)
        # First-seen order, capped at max_terms
        return {word: count / len(words) for word, count in list(counts.items())[:self.max_terms]}

    def extract_features(self, post: Post, cleaned_text: str) -> Dict[str, float]:
        features: Dict[str, float] = {
            'length': float(len(cleaned_text)),
            'word_count': float(len(cleaned_text.split())),
            'hashtag_count': float(len(post.tags)),
            'mention_count': float(len(post.mentions)),
            'engagement_score': self.engagement_score(post),
            'bullish_keywords': float(self.count_keywords(cleaned_text, self.bullish_keywords)),
            'bearish_keywords': float(self.count_keywords(cleaned_text, self.bearish_keywords)),
        }

        # Malformed timestamps are left for the engine to reject
        if isinstance(post.timestamp, datetime):
            features['hour_of_day'] = float(post.utc_timestamp.hour)
            features['day_of_week'] = float(post.utc_timestamp.isoweekday() % 7)  # Sunday = 0

        if self.include_term_frequencies:
            for word, frequency in self.term_frequencies(cleaned_text).items():
                features[f"tf_{word}"] = frequency

        return features

    def process_posts(self, posts: Sequence[Post]) -> List[Post]:
        """
        Clean and featurize a batch of posts.

        Args:
            posts: Raw posts from the post source

        Returns:
            New Post instances with cleaned text and feature maps
        """
        processed = []
        for post in posts:
            cleaned = self.clean_text(post.text)
            processed.append(replace(post, text=cleaned,
                                     features=self.extract_features(post, cleaned)))

        logger.debug("Posts featurized", post_count=len(processed))
        return processed
