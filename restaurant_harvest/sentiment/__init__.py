"""
Review sentiment enrichment.

Responsibilities:
- Call Google Cloud Natural Language once per non-empty review.
- Derive food / service / value / ambiance scores from sentence sentiment.
- Guess the review language (English or Spanish).
- Map the document score and magnitude to coarse emotion labels.
"""
