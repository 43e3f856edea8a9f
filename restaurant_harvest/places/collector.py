from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from ..storage.models import Rating, Restaurant
from .config import DEFAULT_COLLECTOR_CONFIG, CollectorConfig
from .models import PlaceDetail, PlaceSummary

logger = logging.getLogger(__name__)


class Directory(Protocol):
    async def search(self, query: str, location_bias: dict | None = None) -> list[PlaceSummary]: ...

    async def get_detail(self, place_id: str, fields: Sequence[str] = ...) -> PlaceDetail: ...


@dataclass
class CollectionResult:
    restaurants: list[Restaurant] = field(default_factory=list)
    ratings: list[Rating] = field(default_factory=list)
    new_restaurants: int = 0
    new_ratings: int = 0

    @property
    def fresh_ratings(self) -> list[Rating]:
        """Ratings collected during this run (they trail the persisted ones)."""
        if self.new_ratings == 0:
            return []
        return self.ratings[-self.new_ratings:]


def convert_to_restaurant(detail: PlaceDetail) -> Restaurant:
    attributes = {
        "dineIn": detail.dine_in,
        "takeout": detail.takeout,
        "delivery": detail.delivery,
        "outdoorSeating": detail.outdoor_seating,
        "reservable": detail.reservable,
        "userRatingCount": detail.user_rating_count,
    }
    return Restaurant(
        restaurant_id=detail.id,
        name=detail.display_name,
        address=detail.formatted_address,
        location_lat=detail.latitude,
        location_lng=detail.longitude,
        primary_type=detail.primary_type,
        price_level=detail.price_level,
        rating=detail.rating,
        attributes=json.dumps(attributes),
    )


def extract_reviews(detail: PlaceDetail) -> list[Rating]:
    """
    Turn the reviews attached to a place into Rating rows.

    There are no real user accounts, so ``user_id`` is a counter local to
    this place; it is only made global by reconciliation.
    """
    return [
        Rating(
            user_id=counter,
            restaurant_id=detail.id,
            rating=review.rating,
            review_text=review.text,
            date=review.publish_date,
            source_user_name=review.author_name,
        )
        for counter, review in enumerate(detail.reviews, start=1)
    ]


class RestaurantCollector:
    def __init__(self, directory: Directory, config: CollectorConfig = DEFAULT_COLLECTOR_CONFIG) -> None:
        self.directory = directory
        self.config = config

    async def collect(
        self,
        target_count: int,
        existing_restaurants: Iterable[Restaurant] = (),
        existing_ratings: Iterable[Rating] = (),
    ) -> CollectionResult:
        """
        Collect restaurants until ``target_count`` are persisted in total.

        Places already in ``existing_restaurants`` are never fetched again.
        The returned lists hold the existing rows first, untouched, followed
        by the rows collected in this run.
        """
        restaurants = list(existing_restaurants)
        ratings = list(existing_ratings)
        seen_ids = {restaurant.restaurant_id for restaurant in restaurants}

        needed = target_count - len(seen_ids)
        if needed <= 0:
            logger.info("Already have %d restaurants (target %d); nothing to collect", len(seen_ids), target_count)
            return CollectionResult(restaurants=restaurants, ratings=ratings)

        new_restaurants: list[Restaurant] = []
        new_ratings: list[Rating] = []

        last_index = len(self.config.queries) - 1
        for index, query in enumerate(self.config.queries):
            if len(new_restaurants) >= needed:
                break

            logger.info("Searching for: %s", query)
            try:
                results = await self.directory.search(query, self.config.location_bias)
            except Exception:
                logger.error("Search failed for %r; backing off", query, exc_info=True)
                await asyncio.sleep(self.config.query_error_backoff)
                continue

            for summary in results:
                if len(new_restaurants) >= needed:
                    break
                if not summary.id or summary.id in seen_ids:
                    continue

                try:
                    logger.info("Fetching details for: %s", summary.display_name or summary.id)
                    detail = await self.directory.get_detail(summary.id, self.config.detail_fields)
                    restaurant = convert_to_restaurant(detail)
                    reviews = extract_reviews(detail)
                except Exception:
                    logger.error("Error fetching details for %s", summary.display_name or summary.id, exc_info=True)
                    continue
                finally:
                    await asyncio.sleep(self.config.detail_delay)

                if restaurant.restaurant_id in seen_ids:
                    # Detail resolved to a place we already hold under its canonical id.
                    seen_ids.add(summary.id)
                    continue

                new_restaurants.append(restaurant)
                new_ratings.extend(reviews)
                seen_ids.update((summary.id, restaurant.restaurant_id))
                logger.info("Found %d reviews for %s", len(reviews), restaurant.name)

            if index < last_index and len(new_restaurants) < needed:
                await asyncio.sleep(self.config.query_delay)

        logger.info(
            "Collected %d new restaurants and %d new reviews", len(new_restaurants), len(new_ratings)
        )
        return CollectionResult(
            restaurants=restaurants + new_restaurants,
            ratings=ratings + new_ratings,
            new_restaurants=len(new_restaurants),
            new_ratings=len(new_ratings),
        )
