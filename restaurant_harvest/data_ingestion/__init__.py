"""
Incremental collection-and-enrichment pipeline.

Responsibilities:
- Load credentials and fail fast when one is missing.
- Collect new restaurants, analyze only the reviews added this run.
- Reconcile reviewer and review ids over the merged tables.
- Persist restaurants, ratings and review sentiment as CSV.
"""
