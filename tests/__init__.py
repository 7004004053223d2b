"""
Test suite for cpamm

Contains:
- tests/unit/          : Unit tests for math, domain models, ledger and pool engine
"""
