"""
Share Price — конверсия LPN ↔ доли пула (NLPN)

Цена доли: PriceRatio(numerator=total_shares, denominator=total_value),
т.е. shares за единицу LPN. Пустой пул (total_shares == 0) — цена 1:1.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Обе конверсии усекают к нулю
2. to_shares и to_currency не являются точными обратными: round trip
   сравнивается неравенствами с допуском в 1 единицу, точное равенство
   только для нуля
3. Допуск в 1 единицу гарантирован, пока доля стоит не меньше единицы
   LPN (numerator <= denominator)

ФОРМУЛЫ:
    to_shares(amount)   = ⌊amount × num / den⌋
    to_currency(shares) = ⌊shares × den / num⌋
"""

from fractions import Fraction
from numbers import Rational

from lease_verifier.core.domain.pool import PAR_PRICE, LiquidityPoolSnapshot, PriceRatio
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.fixed_point import PERCENT, mul_div


# =============================================================================
# CONVERSIONS
# =============================================================================


def to_shares(amount: int, price: PriceRatio) -> int:
    """
    LPN → доли пула.

    Examples:
        >>> to_shares(1000, PriceRatio(numerator=1, denominator=2))
        500
    """
    return mul_div(amount, price.numerator, price.denominator)


def to_currency(shares: int, price: PriceRatio) -> int:
    """
    Доли пула → LPN.

    Raises:
        InvalidInput: Если price.numerator == 0 (цена доли не определена)
    """
    if price.numerator == 0:
        raise InvalidInput("Share price numerator is zero, cannot convert shares")

    return mul_div(shares, price.denominator, price.numerator)


# =============================================================================
# POOL PRICE
# =============================================================================


def pool_price(snapshot: LiquidityPoolSnapshot) -> PriceRatio:
    """
    Цена доли пула по снапшоту.

    Returns:
        PriceRatio(total_shares, total_value), либо 1:1 для пустого пула

    Raises:
        InvalidInput: Если доли выпущены, а стоимость пула нулевая
    """
    if snapshot.total_shares == 0:
        return PAR_PRICE

    if snapshot.total_value == 0:
        raise InvalidInput(
            f"Pool has {snapshot.total_shares} shares but zero total value"
        )

    return PriceRatio(numerator=snapshot.total_shares, denominator=snapshot.total_value)


def deposit_shares(amount: int, snapshot: LiquidityPoolSnapshot) -> int:
    """Сколько долей должен получить депозит amount (цена до депозита)."""
    return to_shares(amount, pool_price(snapshot))


def withdraw_amount(shares: int, snapshot: LiquidityPoolSnapshot) -> int:
    """Сколько LPN должен вернуть burn shares долей (цена до вывода)."""
    return to_currency(shares, pool_price(snapshot))


def price_tolerance_band(
    price: PriceRatio,
    tolerance_percent: int | Fraction,
) -> tuple[Fraction, Fraction, Fraction]:
    """
    Диапазон допустимой цены для сравнения с наблюдаемой.

    Args:
        price: Точная цена
        tolerance_percent: Допуск (%)

    Returns:
        (min_price, exact_price, max_price)
    """
    if isinstance(tolerance_percent, bool) or not isinstance(tolerance_percent, Rational):
        raise InvalidInput("tolerance_percent must be int or Fraction")
    if tolerance_percent < 0:
        raise InvalidInput(f"tolerance_percent must be non-negative, got {tolerance_percent}")

    exact = price.as_fraction()
    tolerance = exact * Fraction(tolerance_percent) / PERCENT

    return (exact - tolerance, exact, exact + tolerance)
