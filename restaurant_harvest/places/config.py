from __future__ import annotations

from dataclasses import dataclass, field

SEARCH_FIELDS = "places.displayName,places.id,places.formattedAddress,places.location"

DETAIL_FIELDS: tuple[str, ...] = (
    "displayName",
    "id",
    "formattedAddress",
    "location",
    "rating",
    "primaryTypeDisplayName",
    "priceLevel",
    "dineIn",
    "takeout",
    "delivery",
    "outdoorSeating",
    "reservable",
    "reviews",
    "userRatingCount",
)


@dataclass(frozen=True)
class CollectorConfig:
    queries: tuple[str, ...] = (
        "best restaurants Madrid",
        "popular restaurants Madrid",
        "spanish restaurants Madrid",
        "tapas Madrid",
        "fine dining Madrid",
        "paella Madrid",
        "seafood Madrid",
        "steakhouse Madrid",
        "italian Madrid",
        "asian Madrid",
    )
    center_lat: float = 40.4168
    center_lng: float = -3.7038
    radius_m: float = 10000.0
    detail_fields: tuple[str, ...] = field(default=DETAIL_FIELDS)
    detail_delay: float = 0.3  # seconds after every Place Details call
    query_delay: float = 0.5
    query_error_backoff: float = 5.0

    @property
    def location_bias(self) -> dict:
        return {
            "circle": {
                "center": {"latitude": self.center_lat, "longitude": self.center_lng},
                "radius": self.radius_m,
            }
        }


DEFAULT_COLLECTOR_CONFIG = CollectorConfig()
