"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks that are independent
of the asset ledger and of the pool engine's locking.
"""
