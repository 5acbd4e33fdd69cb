"""
Test suite for lease_verifier

Contains:
- tests/unit/          : Unit tests for calculators, models, contracts and lifecycle
"""
