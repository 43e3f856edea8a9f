from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..identity.reconciler import (
    clean_invalid_ids,
    reassign_review_sentiment_ids,
    reassign_user_ids,
    with_transient_keys,
)
from ..places.client import PlacesDirectory
from ..places.collector import Directory, RestaurantCollector
from ..sentiment.analyzer import SentimentEnricher, SentimentService
from ..sentiment.client import LanguageAnalyzer
from ..storage.models import Rating, Restaurant, ReviewSentiment
from ..storage.tables import load_table, save_table
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig, load_credentials

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    restaurants: int = 0
    new_restaurants: int = 0
    ratings: int = 0
    new_ratings: int = 0
    analyzed: int = 0
    sentiment_rows: int = 0
    purged: int = 0
    start_time: datetime = field(default_factory=datetime.now)

    def summary(self) -> str:
        elapsed = datetime.now() - self.start_time
        return (
            f"Harvest complete in {elapsed.total_seconds():.1f}s: "
            f"{self.restaurants} restaurants ({self.new_restaurants} new), "
            f"{self.ratings} ratings ({self.new_ratings} new), "
            f"{self.analyzed} reviews analyzed, "
            f"{self.sentiment_rows} sentiment rows, "
            f"{self.purged} invalid rows purged"
        )


async def run_ingestion(
    directory: Directory,
    sentiment_service: SentimentService,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> PipelineStats:
    """
    Execute one incremental harvest.

    Steps:
    - Load the persisted tables (missing tables are empty).
    - Collect restaurants until the target count is reached.
    - Analyze sentiment for the reviews collected in this run only.
    - Reconcile user and review ids over the merged tables and purge
      rows whose ids could not be resolved.
    - Rewrite all three tables.
    """
    stats = PipelineStats()
    storage = config.storage

    restaurants = load_table(storage.restaurants_path, Restaurant)
    ratings = load_table(storage.ratings_path, Rating)
    sentiment = load_table(storage.sentiment_path, ReviewSentiment)

    logger.info("Starting collection with a target of %d restaurants", config.target_count)
    collector = RestaurantCollector(directory, config.collector)
    collected = await collector.collect(config.target_count, restaurants, ratings)
    stats.new_restaurants = collected.new_restaurants
    stats.new_ratings = collected.new_ratings

    fresh_ratings = collected.fresh_ratings
    new_sentiment: list[ReviewSentiment] = []
    if fresh_ratings:
        enricher = SentimentEnricher(sentiment_service, config.sentiment)
        new_sentiment = await enricher.analyze(fresh_ratings)
        stats.analyzed = len(new_sentiment)
        logger.info("Analyzed sentiment for %d reviews", len(new_sentiment))
    else:
        logger.info("No new reviews to analyze")

    assignment = reassign_user_ids(collected.ratings)
    reassignment = reassign_review_sentiment_ids(
        with_transient_keys(sentiment) + new_sentiment,
        old_ratings=collected.ratings,
        new_ratings=assignment.ratings,
    )

    final_ratings, removed_ratings = clean_invalid_ids(assignment.ratings, "ratings")
    final_sentiment, removed_sentiment = clean_invalid_ids(reassignment.rows, "review_sentiment")
    stats.purged = removed_ratings + removed_sentiment

    save_table(storage.restaurants_path, collected.restaurants)
    save_table(storage.ratings_path, final_ratings)
    save_table(storage.sentiment_path, final_sentiment)

    stats.restaurants = len(collected.restaurants)
    stats.ratings = len(final_ratings)
    stats.sentiment_rows = len(final_sentiment)
    return stats


async def _run(config: IngestionConfig) -> PipelineStats:
    credentials = load_credentials()
    # The async gRPC clients must be created inside the running loop.
    directory = PlacesDirectory(credentials.places_api_key)
    analyzer = LanguageAnalyzer(credentials.nlp_api_key)
    return await run_ingestion(directory, analyzer, config)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    stats = asyncio.run(_run(DEFAULT_INGESTION_CONFIG))
    logger.info(stats.summary())


if __name__ == "__main__":
    main()
