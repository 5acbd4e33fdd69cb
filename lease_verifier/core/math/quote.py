"""
Quote — сумма займа по down payment и уровню liability

Модуль переводит down payment в сумму займа и обратно:
- LTV (loan-to-value): займ как доля полной стоимости позиции
- LTD (loan-to-downpayment): займ как доля down payment
- Выбор суммы котировки при опциональном ограничении плеча

ФОРМУЛЫ (permille):
    borrow_from_ltv(dp, ltv) = ⌊dp × ltv / (1000 - ltv)⌋
    borrow_from_ltd(dp, ltd) = ⌊dp × ltd / 1000⌋
    ltv_to_ltd(ltv)          = ⌊1000 × ltv / (1000 - ltv)⌋

    quote_borrow = min(borrow_from_ltd(dp, max_ltd), borrow_from_ltv(dp, initial))
                   если max_ltd задан, иначе borrow_from_ltv(dp, initial)
"""

from typing import NamedTuple, Optional

from lease_verifier.core.domain.leaser_config import LeaserConfig
from lease_verifier.core.domain.pool import LiquidityPoolSnapshot, LppConfig, PriceRatio
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.fixed_point import PERMILLE, mul_div, validate_amount
from lease_verifier.core.math.utilization import quote_annual_interest_rate


def _validate_ltv(ltv_permille: int, name: str) -> int:
    validate_amount(ltv_permille, name)
    if ltv_permille >= PERMILLE:
        raise InvalidInput(f"{name} must be < {PERMILLE} permille, got {ltv_permille}")
    return ltv_permille


# =============================================================================
# CONVERSIONS
# =============================================================================


def borrow_from_ltv(downpayment: int, initial_liability_permille: int) -> int:
    """
    Займ по down payment и целевому LTV.

    Examples:
        >>> borrow_from_ltv(10000, 450)
        8181
    """
    _validate_ltv(initial_liability_permille, "initial_liability_permille")
    return mul_div(downpayment, initial_liability_permille, PERMILLE - initial_liability_permille)


def borrow_from_ltd(downpayment: int, max_leverage_permille: int) -> int:
    """Займ по down payment и LTD (плечу) в permille."""
    return mul_div(downpayment, max_leverage_permille, PERMILLE)


def ltv_to_ltd(ltv_permille: int) -> int:
    """
    Перевод LTV в LTD (permille).

    Examples:
        >>> ltv_to_ltd(500)
        1000
    """
    _validate_ltv(ltv_permille, "ltv_permille")
    return mul_div(PERMILLE, ltv_permille, PERMILLE - ltv_permille)


def quote_borrow(
    downpayment: int,
    initial_liability_permille: int,
    max_ltd_permille: Optional[int] = None,
) -> int:
    """
    Сумма займа в котировке.

    Args:
        downpayment: Down payment (LPN)
        initial_liability_permille: Initial LTV лизера
        max_ltd_permille: Опциональное ограничение плеча (LTD)

    Returns:
        Меньшая из сумм по LTD и LTV, либо сумма по LTV без ограничения
    """
    ltv_amount = borrow_from_ltv(downpayment, initial_liability_permille)

    if max_ltd_permille is None:
        return ltv_amount

    return min(borrow_from_ltd(downpayment, max_ltd_permille), ltv_amount)


# =============================================================================
# FULL QUOTE
# =============================================================================


class Quote(NamedTuple):
    """Ожидаемая котировка позиции."""

    borrow: int  # LPN
    total: int  # в валюте актива
    annual_interest_rate: int  # permille, ставка пула


def lease_total(downpayment: int, borrow: int, asset_price: PriceRatio) -> int:
    """
    Стоимость позиции в валюте актива.

    asset_price — единиц актива за единицу LPN (numerator/denominator).
    """
    return mul_div(downpayment + borrow, asset_price.numerator, asset_price.denominator)


def quote_lease(
    downpayment: int,
    leaser_config: LeaserConfig,
    lpp_config: LppConfig,
    pool: LiquidityPoolSnapshot,
    asset_price: PriceRatio,
    max_ltd_permille: Optional[int] = None,
) -> Quote:
    """
    Полная ожидаемая котировка: займ, размер позиции, ставка пула.

    Raises:
        InvalidInput: Нулевой down payment или займ больше свободной ликвидности
    """
    validate_amount(downpayment, "downpayment")

    if downpayment == 0:
        raise InvalidInput("Cannot open lease with zero downpayment")

    borrow = quote_borrow(downpayment, leaser_config.liability.initial, max_ltd_permille)

    if borrow > pool.available_liquidity:
        raise InvalidInput(
            f"No Liquidity: borrow {borrow} > available {pool.available_liquidity}"
        )

    return Quote(
        borrow=borrow,
        total=lease_total(downpayment, borrow, asset_price),
        annual_interest_rate=quote_annual_interest_rate(pool, lpp_config, borrow),
    )
