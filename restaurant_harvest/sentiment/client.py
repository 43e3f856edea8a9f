from __future__ import annotations

from google.cloud import language_v1
from pydantic import BaseModel, Field


class SentenceSentiment(BaseModel):
    text: str = ""
    score: float = Field(default=0.0, ge=-1.0, le=1.0)


class DocumentSentiment(BaseModel):
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    magnitude: float = Field(default=0.0, ge=0.0)
    sentences: list[SentenceSentiment] = Field(default_factory=list)


class LanguageAnalyzer:
    """Async wrapper over the Natural Language ``analyzeSentiment`` call."""

    def __init__(
        self, api_key: str, client: language_v1.LanguageServiceAsyncClient | None = None
    ) -> None:
        self.client = client or language_v1.LanguageServiceAsyncClient(
            client_options={"api_key": api_key}
        )

    async def analyze_sentiment(self, text: str) -> DocumentSentiment:
        """
        Return document and per-sentence sentiment for ``text``.

        An out-of-range score or magnitude raises ``pydantic.ValidationError``.
        """
        document = language_v1.Document(content=text, type_=language_v1.Document.Type.PLAIN_TEXT)
        response = await self.client.analyze_sentiment(request={"document": document})

        sentiment = response.document_sentiment
        return DocumentSentiment(
            score=sentiment.score,
            magnitude=sentiment.magnitude,
            sentences=[
                SentenceSentiment(text=sentence.text.content, score=sentence.sentiment.score)
                for sentence in response.sentences
            ],
        )
