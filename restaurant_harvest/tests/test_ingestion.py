import asyncio
import json
from pathlib import Path

import pandas as pd
import pytest

from restaurant_harvest.data_ingestion.config import (
    IngestionConfig,
    MissingCredentialError,
    load_credentials,
)
from restaurant_harvest.data_ingestion.ingest import run_ingestion
from restaurant_harvest.places.config import CollectorConfig
from restaurant_harvest.places.models import PlaceDetail, PlaceReview, PlaceSummary
from restaurant_harvest.sentiment.client import DocumentSentiment, SentenceSentiment
from restaurant_harvest.sentiment.config import SentimentConfig
from restaurant_harvest.storage.config import StorageConfig
from restaurant_harvest.storage.models import Rating, ReviewSentiment
from restaurant_harvest.storage.tables import load_table

QUERY = "best restaurants Madrid"


def _config(tmp_path: Path, target_count: int) -> IngestionConfig:
    return IngestionConfig(
        target_count=target_count,
        storage=StorageConfig(data_dir=tmp_path / "data"),
        collector=CollectorConfig(queries=(QUERY,), detail_delay=0.0, query_delay=0.0, query_error_backoff=0.0),
        sentiment=SentimentConfig(batch_delay=0.0),
    )


def _review(author: str, text: str) -> PlaceReview:
    return PlaceReview(author_name=author, rating=4, text=text, publish_date="2024-05-01")


PLACES = {
    "A": PlaceDetail(
        id="A",
        display_name="Casa Lucio",
        reviews=[_review("Ana", "The food was amazing."), _review("Ben", "")],
    ),
    "B": PlaceDetail(id="B", display_name="Botín", reviews=[_review("Ana", "La comida es muy buena y el servicio excelente")]),
    "C": PlaceDetail(id="C", display_name="StreetXO", reviews=[_review("Cara", "Great vibe."), _review("Ben", "Too expensive.")]),
}


class FakeDirectory:
    def __init__(self, place_ids):
        self.place_ids = place_ids
        self.detail_calls: list[str] = []

    async def search(self, query, location_bias=None):
        return [PlaceSummary(id=pid, display_name=PLACES[pid].display_name) for pid in self.place_ids]

    async def get_detail(self, place_id, fields=()):
        self.detail_calls.append(place_id)
        return PLACES[place_id]


class FakeSentimentService:
    def __init__(self):
        self.calls: list[str] = []

    async def analyze_sentiment(self, text):
        self.calls.append(text)
        return DocumentSentiment(score=0.6, magnitude=0.9, sentences=[SentenceSentiment(text=text, score=0.6)])


def test_two_restaurant_scenario(tmp_path: Path):
    cfg = _config(tmp_path, target_count=2)
    service = FakeSentimentService()

    stats = asyncio.run(run_ingestion(FakeDirectory(["A", "B"]), service, cfg))

    ratings = load_table(cfg.storage.ratings_path, Rating)
    sentiment = load_table(cfg.storage.sentiment_path, ReviewSentiment)

    assert stats.new_restaurants == 2
    assert len(ratings) == 3
    assert [r.user_id for r in ratings] == [1, 2, 1]
    assert {r.user_id for r in ratings} == {1, 2}

    assert len(sentiment) == 2
    assert len(service.calls) == 2
    assert [(s.review_id, s.user_id, s.restaurant_id) for s in sentiment] == [("1", 1, "A"), ("2", 1, "B")]
    assert sentiment[0].food_score == pytest.approx(0.6)
    assert sentiment[0].ambiance_score is None
    assert sentiment[1].language == "es"
    assert json.loads(sentiment[1].emotions) == ["satisfaction"]

    restaurants = pd.read_csv(cfg.storage.restaurants_path)
    assert restaurants["restaurant_id"].tolist() == ["A", "B"]


def test_rerun_without_new_places_is_idempotent(tmp_path: Path):
    cfg = _config(tmp_path, target_count=2)
    asyncio.run(run_ingestion(FakeDirectory(["A", "B"]), FakeSentimentService(), cfg))
    before = {p: p.read_text(encoding="utf-8") for p in (cfg.storage.ratings_path, cfg.storage.sentiment_path)}

    directory = FakeDirectory(["A", "B"])
    service = FakeSentimentService()
    stats = asyncio.run(run_ingestion(directory, service, _config(tmp_path, target_count=5)))

    assert stats.new_restaurants == 0
    assert directory.detail_calls == []
    assert service.calls == []
    for path, content in before.items():
        assert path.read_text(encoding="utf-8") == content


def test_incremental_run_extends_ids_densely(tmp_path: Path):
    asyncio.run(run_ingestion(FakeDirectory(["A", "B"]), FakeSentimentService(), _config(tmp_path, 2)))

    service = FakeSentimentService()
    cfg = _config(tmp_path, target_count=3)
    stats = asyncio.run(run_ingestion(FakeDirectory(["A", "B", "C"]), service, cfg))

    ratings = load_table(cfg.storage.ratings_path, Rating)
    sentiment = load_table(cfg.storage.sentiment_path, ReviewSentiment)

    assert stats.new_restaurants == 1
    assert service.calls == ["Great vibe.", "Too expensive."]
    assert [(r.source_user_name, r.user_id) for r in ratings] == [
        ("Ana", 1), ("Ben", 2), ("Ana", 1), ("Cara", 3), ("Ben", 2),
    ]
    assert [(s.review_id, s.user_id, s.restaurant_id) for s in sentiment] == [
        ("1", 1, "A"), ("2", 1, "B"), ("3", 3, "C"), ("4", 2, "C"),
    ]
    assert sentiment[2].ambiance_score == pytest.approx(0.6)
    assert sentiment[3].value_score == pytest.approx(0.6)


def test_every_sentiment_row_references_a_rating(tmp_path: Path):
    cfg = _config(tmp_path, target_count=3)
    asyncio.run(run_ingestion(FakeDirectory(["A", "B", "C"]), FakeSentimentService(), cfg))

    ratings = load_table(cfg.storage.ratings_path, Rating)
    sentiment = load_table(cfg.storage.sentiment_path, ReviewSentiment)

    rating_keys = {(r.user_id, r.restaurant_id) for r in ratings}
    assert all((s.user_id, s.restaurant_id) in rating_keys for s in sentiment)
    assert [s.review_id for s in sentiment] == [str(i) for i in range(1, len(sentiment) + 1)]


def test_missing_credentials_fail_fast(monkeypatch):
    monkeypatch.setenv("PLACES_API_KEY", "places-key")
    monkeypatch.delenv("NLP_API_KEY", raising=False)

    with pytest.raises(MissingCredentialError, match="NLP_API_KEY"):
        load_credentials()


def test_credentials_loaded_from_environment(monkeypatch):
    monkeypatch.setenv("PLACES_API_KEY", "places-key")
    monkeypatch.setenv("NLP_API_KEY", "nlp-key")

    credentials = load_credentials()

    assert credentials.places_api_key == "places-key"
    assert credentials.nlp_api_key == "nlp-key"


def test_identical_review_texts_keep_both_sentiment_rows(tmp_path: Path, monkeypatch):
    place = PlaceDetail(id="D", display_name="Lhardy", reviews=[_review("Ana", "Excellent"), _review("Ben", "Excellent")])
    monkeypatch.setitem(PLACES, "D", place)
    cfg = _config(tmp_path, target_count=1)
    service = FakeSentimentService()

    asyncio.run(run_ingestion(FakeDirectory(["D"]), service, cfg))

    ratings = load_table(cfg.storage.ratings_path, Rating)
    sentiment = load_table(cfg.storage.sentiment_path, ReviewSentiment)
    assert len(service.calls) == 2
    assert [(r.user_id, r.source_user_name) for r in ratings] == [(1, "Ana"), (2, "Ben")]
    assert [(s.review_id, s.user_id) for s in sentiment] == [("1", 1), ("2", 2)]
