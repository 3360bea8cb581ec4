"""
Unit tests for keyword feature extraction
"""

import math
import pytest
from datetime import datetime, timezone

from marketsense.collaborators.text_processor import KeywordFeatureExtractor
from marketsense.models.post import Post


@pytest.fixture
def extractor():
    return KeywordFeatureExtractor()


def raw_post(text, likes=0, reposts=0, replies=0, tags=(), mentions=()):
    return Post(
        id="p1",
        author="trader_1",
        timestamp=datetime(2025, 3, 9, 14, 30, tzinfo=timezone.utc),  # a Sunday
        text=text,
        likes=likes,
        reposts=reposts,
        replies=replies,
        tags=tags,
        mentions=mentions
    )


class TestCleanText:

    def test_removes_urls_punctuation_and_case(self, extractor):
        cleaned = extractor.clean_text("#NIFTY50 to the MOON!!! https://example.com/x?y=1  now")
        assert cleaned == "nifty50 to the moon now"

    def test_keeps_devanagari(self, extractor):
        assert extractor.clean_text("NIFTY में तेजी!") == "nifty में तेजी"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_text(self, extractor, text):
        assert extractor.clean_text(text) == ""


class TestFeatures:

    def test_engagement_score(self, extractor):
        post = raw_post("x", likes=100, reposts=50, replies=20)
        # 100 + 100 + 30 = 230
        assert extractor.engagement_score(post) == pytest.approx(math.log10(231))

    def test_keyword_counts(self, extractor):
        [post] = extractor.process_posts([raw_post("NIFTY bullish, time to BUY. Sell the SENSEX")])

        assert post.get_feature('bullish_keywords') == 2.0  # bullish, buy
        assert post.get_feature('bearish_keywords') == 1.0  # sell

    def test_hindi_keywords(self, extractor):
        [post] = extractor.process_posts([raw_post("निफ्टी में तेजी, खरीदें")])
        assert post.get_feature('bullish_keywords') == 2.0

    def test_descriptive_features(self, extractor):
        [post] = extractor.process_posts([raw_post("Nifty breakout", tags=("NIFTY50", "intraday"),
                                                   mentions=("someone",))])

        assert post.text == "nifty breakout"
        assert post.get_feature('word_count') == 2.0
        assert post.get_feature('length') == len("nifty breakout")
        assert post.get_feature('hashtag_count') == 2.0
        assert post.get_feature('mention_count') == 1.0
        assert post.get_feature('hour_of_day') == 14.0
        assert post.get_feature('day_of_week') == 0.0

    def test_term_frequencies_optional(self):
        extractor = KeywordFeatureExtractor(include_term_frequencies=True, max_terms=2)
        [post] = extractor.process_posts([raw_post("nifty nifty up down")])

        assert post.get_feature('tf_nifty') == pytest.approx(0.5)
        assert post.get_feature('tf_up') == pytest.approx(0.25)
        assert 'tf_down' not in post.features

    def test_originals_are_not_modified(self, extractor):
        original = raw_post("NIFTY Buy!")
        extractor.process_posts([original])
        assert original.text == "NIFTY Buy!"
        assert dict(original.features) == {}
