"""
Pool — Модели liquidity-provider пула (LPP)

Immutable Pydantic модели:
- PriceRatio: отношение двух сумм (shares за единицу валюты и т.п.)
- LiquidityPoolSnapshot: одно наблюдение баланса пула
- LppConfig: параметры кривой ставки пула (permille)
"""

from fractions import Fraction

from pydantic import BaseModel, Field, computed_field


# =============================================================================
# PRICE RATIO
# =============================================================================


class PriceRatio(BaseModel):
    """
    Цена как отношение двух целых сумм.

    Для цены доли пула: numerator — shares, denominator — единицы LPN,
    т.е. numerator/denominator = shares за единицу валюты.
    """

    numerator: int = Field(..., ge=0, description="Сумма в единицах числителя")
    denominator: int = Field(..., gt=0, description="Сумма в единицах знаменателя (> 0)")

    model_config = {"frozen": True}

    def as_fraction(self) -> Fraction:
        """Точное значение цены."""
        return Fraction(self.numerator, self.denominator)

    def inverse(self) -> "PriceRatio":
        """Обратная цена (numerator должен быть > 0)."""
        return PriceRatio(numerator=self.denominator, denominator=self.numerator)


# Цена 1:1 (пустой пул)
PAR_PRICE = PriceRatio(numerator=1, denominator=1)


# =============================================================================
# POOL SNAPSHOT
# =============================================================================


class LiquidityPoolSnapshot(BaseModel):
    """
    Наблюдаемое состояние пула.

    Immutable после захвата; все суммы в LPN, total_shares — в долях пула.
    """

    principal_due: int = Field(..., ge=0, description="Суммарное тело выданных займов")
    interest_due: int = Field(..., ge=0, description="Суммарные начисленные проценты")
    available_liquidity: int = Field(..., ge=0, description="Свободный баланс пула")
    total_shares: int = Field(..., ge=0, description="Выпущено долей пула (NLPN)")

    model_config = {"frozen": True}

    @computed_field
    @property
    def total_due(self) -> int:
        """Суммарные обязательства заёмщиков перед пулом."""
        return self.principal_due + self.interest_due

    @computed_field
    @property
    def total_value(self) -> int:
        """Полная стоимость пула: баланс + обязательства."""
        return self.available_liquidity + self.total_due


# =============================================================================
# LPP CONFIG
# =============================================================================


class LppConfig(BaseModel):
    """
    Параметры кривой ставки пула.

    Хранятся в permille, как в конфиге контракта; кривая ставки считается
    в процентах (свойства *_percent).
    """

    base_interest_rate: int = Field(..., ge=0, le=1000, description="Базовая ставка (permille)")
    utilization_optimal: int = Field(
        ..., gt=0, lt=1000, description="Оптимальная утилизация (permille)"
    )
    addon_optimal_interest_rate: int = Field(
        ..., ge=0, le=1000, description="Надбавка в оптимальной точке (permille)"
    )
    min_utilization: int = Field(
        default=0, ge=0, le=1000, description="Минимальная утилизация для депозитов (permille)"
    )

    model_config = {"frozen": True}

    @property
    def base_interest_rate_percent(self) -> Fraction:
        return Fraction(self.base_interest_rate, 10)

    @property
    def utilization_optimal_percent(self) -> Fraction:
        return Fraction(self.utilization_optimal, 10)

    @property
    def addon_optimal_interest_rate_percent(self) -> Fraction:
        return Fraction(self.addon_optimal_interest_rate, 10)
