"""
Explicit shapes for the Places payloads the collector consumes.

The proto objects returned by ``google.maps.places_v1`` leave most fields
unset depending on the field mask and the place. Every field is defaulted
here, once, so downstream code never has to probe the raw payload.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

_PRICE_LEVELS: dict[str, int] = {
    "PRICE_LEVEL_UNSPECIFIED": 0,
    "PRICE_LEVEL_FREE": 0,
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _text(value: Any) -> str:
    """Read a LocalizedText (or a bare string) as plain text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return getattr(value, "text", "") or ""


def place_id_of(place: Any) -> str:
    """Return the place id, falling back to the ``places/<id>`` resource name."""
    place_id = getattr(place, "id", "") or ""
    if place_id:
        return place_id
    name = getattr(place, "name", "") or ""
    return name.split("/")[-1] if name else ""


def _price_level(value: Any) -> int:
    if value is None:
        return 0
    return _PRICE_LEVELS.get(getattr(value, "name", str(value)), 0)


def _publish_date(value: Any) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    seconds = getattr(value, "seconds", None)
    if seconds:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc).date().isoformat()
    return _today()


class PlaceSummary(BaseModel):
    id: str = ""
    display_name: str = ""

    @classmethod
    def from_place(cls, place: Any) -> "PlaceSummary":
        return cls(id=place_id_of(place), display_name=_text(getattr(place, "display_name", None)))


class PlaceReview(BaseModel):
    author_name: str = "Anonymous"
    rating: int = Field(default=0, ge=0, le=5)
    text: str = ""
    publish_date: str = Field(default_factory=_today)

    @classmethod
    def from_review(cls, review: Any) -> "PlaceReview":
        author = getattr(review, "author_attribution", None)
        text = _text(getattr(review, "text", None)) or _text(getattr(review, "original_text", None))
        rating = getattr(review, "rating", None) or 0
        return cls(
            author_name=getattr(author, "display_name", "") or "Anonymous",
            rating=int(round(float(rating))),
            text=text,
            publish_date=_publish_date(getattr(review, "publish_time", None)),
        )


class PlaceDetail(BaseModel):
    id: str
    display_name: str = ""
    formatted_address: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    primary_type: str = ""
    price_level: int = Field(default=0, ge=0, le=4)
    rating: float = 0.0
    dine_in: bool = False
    takeout: bool = False
    delivery: bool = False
    outdoor_seating: bool = False
    reservable: bool = False
    user_rating_count: int = 0
    reviews: list[PlaceReview] = Field(default_factory=list)

    @classmethod
    def from_place(cls, place: Any) -> "PlaceDetail":
        location = getattr(place, "location", None)
        return cls(
            id=place_id_of(place),
            display_name=_text(getattr(place, "display_name", None)),
            formatted_address=getattr(place, "formatted_address", "") or "",
            latitude=getattr(location, "latitude", 0.0) or 0.0,
            longitude=getattr(location, "longitude", 0.0) or 0.0,
            primary_type=_text(getattr(place, "primary_type_display_name", None)),
            price_level=_price_level(getattr(place, "price_level", None)),
            rating=getattr(place, "rating", 0.0) or 0.0,
            dine_in=bool(getattr(place, "dine_in", False)),
            takeout=bool(getattr(place, "takeout", False)),
            delivery=bool(getattr(place, "delivery", False)),
            outdoor_seating=bool(getattr(place, "outdoor_seating", False)),
            reservable=bool(getattr(place, "reservable", False)),
            user_rating_count=getattr(place, "user_rating_count", 0) or 0,
            reviews=[PlaceReview.from_review(r) for r in getattr(place, "reviews", None) or [] if r],
        )
