"""
Identifier reconciliation across incremental runs.

Responsibilities:
- Give every reviewer display name one dense global ``user_id``.
- Re-key sentiment rows from their transient analysis-time key to the
  global ``user_id`` space and assign dense ``review_id``s.
- Purge rows left with the invalid sentinel ids.
"""
