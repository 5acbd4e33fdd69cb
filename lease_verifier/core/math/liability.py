"""
Liability — LTV позиции, зоны ликвидации, close policy

Модуль определяет, что протокол должен сделать с позицией при пересчёте:
- LTV позиции в permille и зона (healthy / warning 1-3 / liquidation)
- Цена актива, при которой позиция достигает заданного уровня
- Сумма частичной ликвидации, возвращающая LTV к healthy
- Полная ликвидация, если остаток актива ниже min_asset
- Ликвидация просроченных процентов после grace-периода
- Срабатывание stop-loss / take-profit

ФОРМУЛЫ (permille):
    ltv = ⌊total_due × 1000 / asset_value⌋
    trigger_price(level) = total_due × 1000 / (asset_amount × level)
    liquidation = ⌈(total_due × 1000 - healthy × asset_value) / (1000 - healthy)⌉

Сумма ликвидации округляется вверх: протокол забирает не меньше, чем
нужно для возврата в healthy.
"""

from enum import Enum
from fractions import Fraction
from typing import NamedTuple, Optional

from lease_verifier.core.domain.leaser_config import LiabilitySpec
from lease_verifier.core.domain.position import ClosePolicy, Position
from lease_verifier.core.domain.pool import PriceRatio
from lease_verifier.core.errors import InvalidInput
from lease_verifier.core.math.fixed_point import (
    PERMILLE,
    ceil_div,
    mul_div,
    validate_amount,
)


# =============================================================================
# ENUMS
# =============================================================================


class LiabilityZone(str, Enum):
    """Зона LTV позиции."""

    HEALTHY = "healthy"
    WARNING_1 = "warning_1"
    WARNING_2 = "warning_2"
    WARNING_3 = "warning_3"
    LIQUIDATION = "liquidation"

    @property
    def warning_level(self) -> int:
        """Уровень предупреждения протокола (0 — нет предупреждения)."""
        return _WARNING_LEVELS[self]


_WARNING_LEVELS = {
    LiabilityZone.HEALTHY: 0,
    LiabilityZone.WARNING_1: 1,
    LiabilityZone.WARNING_2: 2,
    LiabilityZone.WARNING_3: 3,
    LiabilityZone.LIQUIDATION: 0,
}


class LiquidationKind(str, Enum):
    """Ожидаемый результат пересчёта."""

    NONE = "none"
    WARNING = "warning"
    PARTIAL = "partial"  # Opened → Opened, тело уменьшено
    FULL = "full"  # Opened → Liquidated


class CloseTrigger(str, Enum):
    """Сработавшее правило close policy."""

    NONE = "none"
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"


class LiquidationOutcome(NamedTuple):
    """Результат пересчёта позиции."""

    kind: LiquidationKind
    amount: int  # сумма ликвидации (LPN или актив, см. функцию)
    zone: Optional[LiabilityZone]
    ltv: Optional[int]  # permille


# =============================================================================
# LTV
# =============================================================================


def asset_value(asset_amount: int, lpn_per_asset: PriceRatio) -> int:
    """Стоимость актива в LPN по цене numerator LPN за denominator актива."""
    return mul_div(asset_amount, lpn_per_asset.numerator, lpn_per_asset.denominator)


def position_ltv(total_due: int, asset_value_lpn: int) -> int:
    """
    LTV позиции в permille.

    Raises:
        InvalidInput: Если asset_value_lpn == 0
    """
    if asset_value_lpn == 0:
        raise InvalidInput("Position asset value is zero, LTV undefined")

    return mul_div(total_due, PERMILLE, asset_value_lpn)


def liability_zone(ltv_permille: int, spec: LiabilitySpec) -> LiabilityZone:
    """
    Зона LTV по уровням liability.

    Границы включительные снизу: ltv == max уже ликвидация.
    """
    validate_amount(ltv_permille, "ltv_permille")

    if ltv_permille >= spec.max:
        return LiabilityZone.LIQUIDATION
    if ltv_permille >= spec.third_liq_warn:
        return LiabilityZone.WARNING_3
    if ltv_permille >= spec.second_liq_warn:
        return LiabilityZone.WARNING_2
    if ltv_permille >= spec.first_liq_warn:
        return LiabilityZone.WARNING_1
    return LiabilityZone.HEALTHY


def liability_trigger_price(total_due: int, asset_amount: int, level_permille: int) -> Fraction:
    """
    Цена актива (LPN за единицу), при которой LTV достигает level_permille.

    Raises:
        InvalidInput: Если asset_amount или level_permille равны нулю
    """
    validate_amount(total_due, "total_due")
    validate_amount(asset_amount, "asset_amount")
    validate_amount(level_permille, "level_permille")

    if asset_amount == 0 or level_permille == 0:
        raise InvalidInput("asset_amount and level_permille must be positive")

    return Fraction(total_due * PERMILLE, asset_amount * level_permille)


# =============================================================================
# LIQUIDATION
# =============================================================================


def liquidation_amount(total_due: int, asset_value_lpn: int, healthy_permille: int) -> int:
    """
    Сумма (LPN), после продажи и погашения которой LTV вернётся к healthy.

    (total_due - L) / (asset_value - L) = healthy / 1000

    Returns:
        ⌈(total_due·1000 - healthy·asset_value) / (1000 - healthy)⌉, не меньше 0
    """
    validate_amount(total_due, "total_due")
    validate_amount(asset_value_lpn, "asset_value_lpn")
    validate_amount(healthy_permille, "healthy_permille")

    if healthy_permille >= PERMILLE:
        raise InvalidInput(f"healthy must be < {PERMILLE}, got {healthy_permille}")

    excess = total_due * PERMILLE - healthy_permille * asset_value_lpn
    if excess <= 0:
        return 0

    return ceil_div(excess, PERMILLE - healthy_permille)


def recalculate(
    total_due: int,
    asset_value_lpn: int,
    spec: LiabilitySpec,
    min_asset: int,
) -> LiquidationOutcome:
    """
    Ожидаемый результат планового пересчёта позиции (price alarm).

    Args:
        total_due: Обязательства позиции (LPN)
        asset_value_lpn: Стоимость актива (LPN)
        spec: Уровни liability
        min_asset: Минимальная стоимость актива после частичной ликвидации (LPN)

    Returns:
        LiquidationOutcome: NONE / WARNING без суммы; PARTIAL с суммой
        ликвидации; FULL с полной стоимостью актива
    """
    validate_amount(min_asset, "min_asset")

    ltv = position_ltv(total_due, asset_value_lpn)
    zone = liability_zone(ltv, spec)

    if zone == LiabilityZone.HEALTHY:
        return LiquidationOutcome(LiquidationKind.NONE, 0, zone, ltv)

    if zone != LiabilityZone.LIQUIDATION:
        return LiquidationOutcome(LiquidationKind.WARNING, 0, zone, ltv)

    amount = liquidation_amount(total_due, asset_value_lpn, spec.healthy)

    if amount >= asset_value_lpn or asset_value_lpn - amount < min_asset:
        return LiquidationOutcome(LiquidationKind.FULL, asset_value_lpn, zone, ltv)

    return LiquidationOutcome(LiquidationKind.PARTIAL, amount, zone, ltv)


def overdue_liquidation(
    position: Position,
    asset_per_lpn: PriceRatio,
    min_asset: int,
) -> LiquidationOutcome:
    """
    Ликвидация просроченных процентов по истечении grace-периода.

    Просроченные margin + interest переводятся в валюту актива по цене
    asset_per_lpn (numerator актива за denominator LPN) и списываются
    с актива позиции.

    Returns:
        LiquidationOutcome с суммой в валюте актива: NONE если просрочки нет,
        FULL если остаток актива дешевле min_asset (LPN), иначе PARTIAL
    """
    overdue = position.overdue_total
    if overdue == 0:
        return LiquidationOutcome(LiquidationKind.NONE, 0, None, None)

    if asset_per_lpn.numerator == 0:
        raise InvalidInput("Asset price numerator is zero")

    amount = mul_div(overdue, asset_per_lpn.numerator, asset_per_lpn.denominator)

    if amount >= position.asset_amount:
        return LiquidationOutcome(LiquidationKind.FULL, position.asset_amount, None, None)

    remaining = position.asset_amount - amount
    remaining_lpn = mul_div(remaining, asset_per_lpn.denominator, asset_per_lpn.numerator)

    if remaining_lpn < min_asset:
        return LiquidationOutcome(LiquidationKind.FULL, position.asset_amount, None, None)

    return LiquidationOutcome(LiquidationKind.PARTIAL, amount, None, None)


# =============================================================================
# CLOSE POLICY
# =============================================================================


def close_trigger(ltv_permille: int, policy: Optional[ClosePolicy]) -> CloseTrigger:
    """
    Правило close policy, сработавшее при данном LTV.

    Stop-loss проверяется первым: при LTV >= stop_loss позиция закрывается
    независимо от take-profit.
    """
    if policy is None:
        return CloseTrigger.NONE

    if policy.stop_loss is not None and ltv_permille >= policy.stop_loss:
        return CloseTrigger.STOP_LOSS

    if policy.take_profit is not None and ltv_permille < policy.take_profit:
        return CloseTrigger.TAKE_PROFIT

    return CloseTrigger.NONE


def validate_close_policy(policy: ClosePolicy, current_ltv_permille: int) -> None:
    """
    Политика не должна срабатывать сразу при установке.

    Raises:
        InvalidInput: stop_loss <= текущего LTV или take_profit > текущего LTV
    """
    if policy.stop_loss is not None and policy.stop_loss <= current_ltv_permille:
        raise InvalidInput(
            f"Stop loss {policy.stop_loss} must be > current LTV {current_ltv_permille}"
        )

    if policy.take_profit is not None and policy.take_profit > current_ltv_permille:
        raise InvalidInput(
            f"Take profit {policy.take_profit} must be <= current LTV {current_ltv_permille}"
        )


# =============================================================================
# PARTIAL CLOSE
# =============================================================================


def validate_partial_close(
    asset_value_lpn: int,
    close_value_lpn: int,
    min_asset: int,
    min_transaction: int,
) -> bool:
    """
    Проверка суммы частичного закрытия.

    Returns:
        True если это полное закрытие (close_value == asset_value)

    Raises:
        InvalidInput: сумма меньше min_transaction, больше актива, либо
        остаток после частичного закрытия ниже min_asset
    """
    validate_amount(asset_value_lpn, "asset_value_lpn")
    validate_amount(close_value_lpn, "close_value_lpn")

    if close_value_lpn > asset_value_lpn:
        raise InvalidInput(
            f"Close amount {close_value_lpn} exceeds position value {asset_value_lpn}"
        )

    if close_value_lpn == asset_value_lpn:
        return True

    if close_value_lpn < min_transaction:
        raise InvalidInput(
            f"Close amount {close_value_lpn} below min_transaction {min_transaction}"
        )

    if asset_value_lpn - close_value_lpn < min_asset:
        raise InvalidInput(
            f"Remaining position value {asset_value_lpn - close_value_lpn} "
            f"below min_asset {min_asset}"
        )

    return False
