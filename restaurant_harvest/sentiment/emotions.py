from __future__ import annotations


def classify_emotions(score: float, magnitude: float) -> list[str]:
    # Bands are checked independently; joy does not suppress the others.
    emotions: list[str] = []
    if score > 0.7 and magnitude > 1.5:
        emotions.append("joy")
    if 0.5 < score <= 0.7:
        emotions.append("satisfaction")
    if 0 < score <= 0.5:
        emotions.append("contentment")
    if -0.5 <= score < 0:
        emotions.append("disappointment")
    if -0.7 <= score < -0.5:
        emotions.append("frustration")
    if score < -0.7:
        emotions.append("anger")
    return emotions
