"""Core Layer — pure domain logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic; validators never raise
"""
