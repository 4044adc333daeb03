"""Unit tests for the sentiment label/score rule."""
from __future__ import annotations

import pytest

from src.careadmin.core.exceptions import ValidationError
from src.careadmin.core.sentiment import (
    bucket_for_score,
    resolve_sentiment,
    score_for_bucket,
)
from src.careadmin.models.enums import Sentiment


class TestBucketForScore:

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0.0, Sentiment.NEGATIVE),
            (0.3, Sentiment.NEGATIVE),
            (0.31, Sentiment.NEUTRAL),
            (0.6, Sentiment.NEUTRAL),
            (0.61, Sentiment.POSITIVE),
            (1.0, Sentiment.POSITIVE),
        ],
    )
    def test_bucket_boundaries(self, score, expected):
        assert bucket_for_score(score) == expected

    @pytest.mark.parametrize("score", [-0.01, 1.01])
    def test_out_of_range_rejected(self, score):
        with pytest.raises(ValidationError):
            bucket_for_score(score)


class TestScoreForBucket:

    def test_canonical_scores_land_in_their_own_bucket(self):
        for label in Sentiment:
            assert bucket_for_score(score_for_bucket(label)) == label

    def test_accepts_string_label(self):
        assert score_for_bucket("neutral") == 0.6


class TestResolveSentiment:

    def test_nothing_edited(self):
        assert resolve_sentiment(None, None) is None

    def test_score_derives_label(self):
        assert resolve_sentiment(None, 0.2) == (Sentiment.NEGATIVE, 0.2)

    def test_label_snaps_score(self):
        assert resolve_sentiment(Sentiment.NEUTRAL, None) == (Sentiment.NEUTRAL, 0.6)

    def test_score_wins_over_conflicting_label(self):
        label, score = resolve_sentiment(Sentiment.POSITIVE, 0.1)
        assert label == Sentiment.NEGATIVE
        assert score == 0.1
