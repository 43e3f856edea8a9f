from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SentimentConfig:
    batch_size: int = 10
    batch_delay: float = 0.5  # seconds between batches


DEFAULT_SENTIMENT_CONFIG = SentimentConfig()
