"""EvenKeel models package.

Defines the shared data contracts used across the validation core and the
HTTP layer:

  - outcome.py — Outcome (accept / reject-with-reason verdict) and ACCEPTED
  - responses.py — HTTP response builders for Outcome values

These models are the single source of truth for what a validation returns.
"""
