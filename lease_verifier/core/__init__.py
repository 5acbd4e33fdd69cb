"""
Core domain models, integer math primitives, and snapshot contracts.

This module contains the pure computation layer that is independent
of transport (RPC clients, wallets, transaction submission).
"""
