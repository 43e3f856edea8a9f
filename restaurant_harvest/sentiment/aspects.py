from __future__ import annotations

from typing import Iterable

from .client import SentenceSentiment

# ---------------------------------------------------------------------------
# Aspect keywords (English + Spanish), matched as lowercase substrings
# ---------------------------------------------------------------------------

ASPECT_TERMS: dict[str, tuple[str, ...]] = {
    "food": (
        "food", "meal", "dish", "taste", "flavor", "menu", "cuisine", "delicious",
        "comida", "plato",
    ),
    "service": (
        "service", "staff", "waiter", "waitress", "server", "attention", "friendly",
        "servicio", "atención",
    ),
    "value": (
        "price", "value", "expensive", "cheap", "worth", "cost", "affordable",
        "precio", "caro", "barato",
    ),
    "ambiance": (
        "ambiance", "atmosphere", "decor", "environment", "music", "noise", "vibe",
        "ambiente", "decoración",
    ),
}


def score_aspects(sentences: Iterable[SentenceSentiment]) -> dict[str, float | None]:
    """
    Score each aspect from the sentences that mention it.

    A later matching sentence is averaged with the score accumulated so far,
    so the result weights late sentences more than a true mean would. An
    aspect no sentence mentions stays ``None``.
    """
    scores: dict[str, float | None] = {aspect: None for aspect in ASPECT_TERMS}
    for sentence in sentences:
        text = sentence.text.lower()
        for aspect, terms in ASPECT_TERMS.items():
            if not any(term in text for term in terms):
                continue
            previous = scores[aspect]
            scores[aspect] = sentence.score if previous is None else (previous + sentence.score) / 2
    return scores
