"""Infrastructure Layer — HTTP client, failure classification, retry, logging, timing.

Invariants:
    - Infrastructure imports core/ error types, never services/
    - All outbound calls wrapped with timeout, error mapping, and (where requested) retry
"""
