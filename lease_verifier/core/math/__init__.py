"""
Core math modules для lease_verifier

Целочисленные калькуляторы с единым правилом усечения к нулю.
"""

# Fixed-Point
from lease_verifier.core.math.fixed_point import (
    PERCENT,
    PERMILLE,
    ceil_div,
    checked_sub,
    mul_div,
    validate_amount,
    validate_permille,
)

# Interest
from lease_verifier.core.math.interest import (
    NANOSEC,
    NANOSEC_YEAR,
    InterestDue,
    InterestPeriod,
    PositionInterestDue,
    accrue,
    due_boundary,
    position_interest_due,
    split_due,
)

# Utilization & Borrow Rate
from lease_verifier.core.math.utilization import (
    MIN_UTILIZATION_FOR_CURVE,
    borrow_rate,
    deposit_capacity,
    pool_utilization,
    quote_annual_interest_rate,
    utilization,
)

# Share Price
from lease_verifier.core.math.share_price import (
    deposit_shares,
    pool_price,
    price_tolerance_band,
    to_currency,
    to_shares,
    withdraw_amount,
)

# Quote
from lease_verifier.core.math.quote import (
    Quote,
    borrow_from_ltd,
    borrow_from_ltv,
    lease_total,
    ltv_to_ltd,
    quote_borrow,
    quote_lease,
)

# Liability
from lease_verifier.core.math.liability import (
    CloseTrigger,
    LiabilityZone,
    LiquidationKind,
    LiquidationOutcome,
    asset_value,
    close_trigger,
    liability_trigger_price,
    liability_zone,
    liquidation_amount,
    overdue_liquidation,
    position_ltv,
    recalculate,
    validate_close_policy,
    validate_partial_close,
)

# Repayment
from lease_verifier.core.math.repayment import RepaymentBreakdown, allocate_repayment

__all__ = [
    # Fixed-Point
    "PERCENT",
    "PERMILLE",
    "ceil_div",
    "checked_sub",
    "mul_div",
    "validate_amount",
    "validate_permille",
    # Interest
    "NANOSEC",
    "NANOSEC_YEAR",
    "InterestDue",
    "InterestPeriod",
    "PositionInterestDue",
    "accrue",
    "due_boundary",
    "position_interest_due",
    "split_due",
    # Utilization & Borrow Rate
    "MIN_UTILIZATION_FOR_CURVE",
    "borrow_rate",
    "deposit_capacity",
    "pool_utilization",
    "quote_annual_interest_rate",
    "utilization",
    # Share Price
    "deposit_shares",
    "pool_price",
    "price_tolerance_band",
    "to_currency",
    "to_shares",
    "withdraw_amount",
    # Quote
    "Quote",
    "borrow_from_ltd",
    "borrow_from_ltv",
    "lease_total",
    "ltv_to_ltd",
    "quote_borrow",
    "quote_lease",
    # Liability
    "CloseTrigger",
    "LiabilityZone",
    "LiquidationKind",
    "LiquidationOutcome",
    "asset_value",
    "close_trigger",
    "liability_trigger_price",
    "liability_zone",
    "liquidation_amount",
    "overdue_liquidation",
    "position_ltv",
    "recalculate",
    "validate_close_policy",
    "validate_partial_close",
    # Repayment
    "RepaymentBreakdown",
    "allocate_repayment",
]
