"""
lease_verifier — reference model for a collateralized-lending protocol.

Recomputes expected interest, pool share price, borrow capacity and
lease lifecycle state from observed on-chain values.
"""

__version__ = "0.1.0"
