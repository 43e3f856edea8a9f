from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Row(BaseModel):
    # CSV loads hand back ints/floats for numeric-looking text.
    model_config = ConfigDict(coerce_numbers_to_str=True)


class Restaurant(_Row):
    restaurant_id: str = Field(..., min_length=1)
    name: str = ""
    address: str = ""
    location_lat: float = 0.0
    location_lng: float = 0.0
    primary_type: str = ""
    price_level: int = Field(default=0, ge=0, le=4)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    attributes: str = "{}"


class Rating(_Row):
    user_id: int = 0
    restaurant_id: str = Field(..., min_length=1)
    rating: int = Field(default=0, ge=0, le=5)
    review_text: str = ""
    date: str = ""
    source_user_name: str = ""


class ReviewSentiment(_Row):
    review_id: str = ""
    user_id: int = 0
    restaurant_id: str = ""
    overall_score: float = Field(default=0.0, ge=-1.0, le=1.0)
    overall_magnitude: float = Field(default=0.0, ge=0.0)
    food_score: float | None = None
    service_score: float | None = None
    value_score: float | None = None
    ambiance_score: float | None = None
    language: str = "en"
    emotions: str = "[]"
