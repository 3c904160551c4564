"""EvenKeel validation package.

Provides the validation pipeline behind the HTTP endpoints:

  - rules.py     — pure, null-safe predicates and their AND-composition
  - validator.py — ValueValidator: Rule → Outcome
  - cache.py     — ResultCache / CacheRegistry: namespaced TTL + LRU store
  - facade.py    — Validator: cache + ValueValidator behind constant latency
  - factory.py   — build_validators(): stub vs. production composition root
"""
