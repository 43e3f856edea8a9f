from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StorageConfig:
    data_dir: Path = Path("data")
    restaurants_filename: str = "restaurants.csv"
    ratings_filename: str = "ratings.csv"
    sentiment_filename: str = "review_sentiment.csv"

    @property
    def restaurants_path(self) -> Path:
        return self.data_dir / self.restaurants_filename

    @property
    def ratings_path(self) -> Path:
        return self.data_dir / self.ratings_filename

    @property
    def sentiment_path(self) -> Path:
        return self.data_dir / self.sentiment_filename


DEFAULT_STORAGE_CONFIG = StorageConfig()
