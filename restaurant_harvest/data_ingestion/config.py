from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from ..places.config import DEFAULT_COLLECTOR_CONFIG, CollectorConfig
from ..sentiment.config import DEFAULT_SENTIMENT_CONFIG, SentimentConfig
from ..storage.config import DEFAULT_STORAGE_CONFIG, StorageConfig

load_dotenv()


class MissingCredentialError(RuntimeError):
    pass


@dataclass(frozen=True)
class Credentials:
    places_api_key: str
    nlp_api_key: str


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise MissingCredentialError(f"Environment variable {name} is not set")
    return value


def load_credentials() -> Credentials:
    return Credentials(
        places_api_key=_require("PLACES_API_KEY"),
        nlp_api_key=_require("NLP_API_KEY"),
    )


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for one incremental harvest run.
    """

    target_count: int = 500
    storage: StorageConfig = field(default=DEFAULT_STORAGE_CONFIG)
    collector: CollectorConfig = field(default=DEFAULT_COLLECTOR_CONFIG)
    sentiment: SentimentConfig = field(default=DEFAULT_SENTIMENT_CONFIG)


DEFAULT_INGESTION_CONFIG = IngestionConfig()
