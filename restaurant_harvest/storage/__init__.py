"""
Flat-file persistence for the harvested tables.

Responsibilities:
- Define the row shapes of restaurants, ratings and review sentiment.
- Load a CSV table into validated records (missing file -> empty).
- Rewrite a CSV table as a whole from a list of records.
"""
