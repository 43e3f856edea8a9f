from __future__ import annotations

import asyncio
import json
import logging
from typing import Protocol, Sequence

from ..identity.reconciler import transient_key
from ..storage.models import Rating, ReviewSentiment
from .aspects import score_aspects
from .client import DocumentSentiment
from .config import DEFAULT_SENTIMENT_CONFIG, SentimentConfig
from .emotions import classify_emotions
from .language import detect_language

logger = logging.getLogger(__name__)


class SentimentService(Protocol):
    async def analyze_sentiment(self, text: str) -> DocumentSentiment: ...


def build_review_sentiment(rating: Rating, document: DocumentSentiment) -> ReviewSentiment:
    aspects = score_aspects(document.sentences)
    return ReviewSentiment(
        review_id=transient_key(rating.user_id, rating.restaurant_id),
        user_id=rating.user_id,
        restaurant_id=rating.restaurant_id,
        overall_score=document.score,
        overall_magnitude=document.magnitude,
        food_score=aspects["food"],
        service_score=aspects["service"],
        value_score=aspects["value"],
        ambiance_score=aspects["ambiance"],
        language=detect_language(rating.review_text),
        emotions=json.dumps(classify_emotions(document.score, document.magnitude)),
    )


class SentimentEnricher:
    def __init__(self, service: SentimentService, config: SentimentConfig = DEFAULT_SENTIMENT_CONFIG) -> None:
        self.service = service
        self.config = config

    async def _analyze_one(self, rating: Rating) -> ReviewSentiment | None:
        if not rating.review_text or not rating.review_text.strip():
            return None
        try:
            document = await self.service.analyze_sentiment(rating.review_text)
            return build_review_sentiment(rating, document)
        except Exception:
            logger.warning(
                "Error analyzing review by %s at %s",
                rating.source_user_name,
                rating.restaurant_id,
                exc_info=True,
            )
            return None

    async def analyze(self, ratings: Sequence[Rating]) -> list[ReviewSentiment]:
        """
        Analyze ``ratings`` in sequential batches, each batch concurrently.

        Returns one row per non-empty review that was analyzed successfully,
        keyed by its transient key.
        """
        batch_size = self.config.batch_size
        total_batches = (len(ratings) + batch_size - 1) // batch_size
        logger.info("Analyzing sentiment for %d reviews...", len(ratings))

        results: list[ReviewSentiment] = []
        for start in range(0, len(ratings), batch_size):
            batch = ratings[start:start + batch_size]
            logger.info("Processing batch %d of %d", start // batch_size + 1, total_batches)

            batch_results = await asyncio.gather(*(self._analyze_one(rating) for rating in batch))
            results.extend(row for row in batch_results if row is not None)

            if start + batch_size < len(ratings):
                await asyncio.sleep(self.config.batch_delay)

        return results
