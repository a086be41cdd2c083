"""Services Layer — catalog access and the catalog/cart state controllers.

Invariants:
    - Catalog state and cart state each have exactly one owning controller
    - Controllers hand out tuples (snapshots), never live references to their state
"""
