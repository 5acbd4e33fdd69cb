"""
Contract Validation Module

Валидация снапшотов драйвера по JSON Schema и перевод в доменные модели.
"""

from .snapshots import (
    lease_state_from_status,
    pool_snapshot_from_balance,
    position_from_status,
)
from .validators import (
    ContractValidator,
    LeaseStatusValidator,
    LppBalanceValidator,
    SchemaLoader,
    validate_lease_status,
    validate_lpp_balance,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "LeaseStatusValidator",
    "LppBalanceValidator",
    # Functions
    "validate_lease_status",
    "validate_lpp_balance",
    # Adapters
    "lease_state_from_status",
    "position_from_status",
    "pool_snapshot_from_balance",
]
