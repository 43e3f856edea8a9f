"""
Restaurant collection from the Google Places directory.

Responsibilities:
- Run a fixed list of location-biased text searches.
- Fetch full details (including reviews) for every unseen place.
- Convert directory payloads into Restaurant and Rating rows.
- Never fetch or store the same place twice, within or across runs.
"""
