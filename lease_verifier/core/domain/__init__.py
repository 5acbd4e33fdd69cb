"""
Domain models and value objects.

Contains lease positions, lifecycle states, pool snapshots and
protocol configuration.
"""

from lease_verifier.core.domain.lease_state import (
    OPENING_PHASE_ORDER,
    Closed,
    LeaseState,
    Liquidated,
    Opened,
    Opening,
    OpeningPhase,
    Paid,
    StateKind,
    parse_lease_state,
    stage_rank,
)
from lease_verifier.core.domain.leaser_config import LeaserConfig, LiabilitySpec
from lease_verifier.core.domain.pool import (
    PAR_PRICE,
    LiquidityPoolSnapshot,
    LppConfig,
    PriceRatio,
)
from lease_verifier.core.domain.position import ClosePolicy, Position

__all__ = [
    # Lifecycle states
    "LeaseState",
    "Opening",
    "OpeningPhase",
    "OPENING_PHASE_ORDER",
    "Opened",
    "Paid",
    "Closed",
    "Liquidated",
    "StateKind",
    "parse_lease_state",
    "stage_rank",
    # Position model
    "Position",
    "ClosePolicy",
    # Pool
    "PriceRatio",
    "PAR_PRICE",
    "LiquidityPoolSnapshot",
    "LppConfig",
    # Leaser config
    "LeaserConfig",
    "LiabilitySpec",
]
