"""Sentiment bucket rule shared by doctor edits.

A doctor's ``sentiment`` label and ``sentiment_score`` must agree:

    score <= 0.3  -> negative
    score <= 0.6  -> neutral
    otherwise     -> positive

Whichever field the admin edited wins. Editing the label snaps the score to
the bucket's ceiling so the pair stays consistent.
"""
from __future__ import annotations

from ..models.enums import Sentiment
from .exceptions import ValidationError

NEGATIVE_CEILING = 0.3
NEUTRAL_CEILING = 0.6

CANONICAL_SCORES: dict[Sentiment, float] = {
    Sentiment.NEGATIVE: NEGATIVE_CEILING,
    Sentiment.NEUTRAL: NEUTRAL_CEILING,
    Sentiment.POSITIVE: 1.0,
}


def bucket_for_score(score: float) -> Sentiment:
    """Return the sentiment label for a score in [0, 1]."""
    if score < 0.0 or score > 1.0:
        raise ValidationError(
            message="Sentiment score must be between 0 and 1",
            errors=[{"field": "sentiment_score", "value": score}],
        )
    if score <= NEGATIVE_CEILING:
        return Sentiment.NEGATIVE
    if score <= NEUTRAL_CEILING:
        return Sentiment.NEUTRAL
    return Sentiment.POSITIVE


def score_for_bucket(sentiment: Sentiment | str) -> float:
    """Return the canonical score for a label."""
    return CANONICAL_SCORES[Sentiment(sentiment)]


def resolve_sentiment(
    sentiment: Sentiment | str | None,
    score: float | None,
) -> tuple[Sentiment, float] | None:
    """Resolve an edit to a consistent ``(label, score)`` pair.

    Returns None when neither field was edited. When both are supplied the
    score is authoritative and the label is derived from it.
    """
    if score is not None:
        return bucket_for_score(score), score
    if sentiment is not None:
        label = Sentiment(sentiment)
        return label, score_for_bucket(label)
    return None
