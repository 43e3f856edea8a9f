from __future__ import annotations

SPANISH_WORDS = frozenset({
    "el", "la", "los", "las", "un", "una", "es", "son", "y", "o", "pero", "muy",
    "bueno", "buena", "malo", "mala", "comida", "servicio", "restaurante",
    "excelente", "bien", "mal",
})


def detect_language(text: str) -> str:
    """Guess "es" or "en" by counting common Spanish words."""
    words = text.lower().split()
    if not words:
        return "en"
    spanish_count = sum(1 for word in words if word in SPANISH_WORDS)
    if spanish_count >= 2 or spanish_count / len(words) > 0.1:
        return "es"
    return "en"
