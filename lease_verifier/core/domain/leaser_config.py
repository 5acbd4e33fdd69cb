"""
LeaserConfig — параметры позиции, задаваемые лизером

Immutable Pydantic модели:
- LiabilitySpec: уровни LTV (permille) от initial до max
- LeaserConfig: liability + минимальные суммы + due/grace периоды

Порядок уровней liability проверяется так же, как контракт лизера
проверяет обновление конфига, с теми же сообщениями.
"""

from pydantic import BaseModel, Field, model_validator


class LiabilitySpec(BaseModel):
    """
    Уровни liability позиции (permille LTV).

    initial <= healthy < first_liq_warn < second_liq_warn < third_liq_warn < max
    """

    initial: int = Field(..., gt=0, lt=1000, description="LTV при открытии")
    healthy: int = Field(..., gt=0, lt=1000, description="LTV после частичной ликвидации")
    first_liq_warn: int = Field(..., gt=0, lt=1000, description="Первое предупреждение")
    second_liq_warn: int = Field(..., gt=0, lt=1000, description="Второе предупреждение")
    third_liq_warn: int = Field(..., gt=0, lt=1000, description="Третье предупреждение")
    max: int = Field(..., gt=0, lt=1000, description="Порог ликвидации")
    recalc_time: int = Field(
        default=7_200_000_000_000, gt=0, description="Период пересчёта (ns)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_ordering(self) -> "LiabilitySpec":
        if self.initial > self.healthy:
            raise ValueError("Initial % should be <= healthy %")
        if self.healthy >= self.first_liq_warn:
            raise ValueError("Healthy % should be < first liquidation %")
        if self.first_liq_warn >= self.second_liq_warn:
            raise ValueError("First liquidation % should be < second liquidation %")
        if self.second_liq_warn >= self.third_liq_warn:
            raise ValueError("Second liquidation % should be < third liquidation %")
        if self.third_liq_warn >= self.max:
            raise ValueError("Third liquidation % should be < max %")
        return self

    def warning_levels(self) -> tuple[int, int, int]:
        return (self.first_liq_warn, self.second_liq_warn, self.third_liq_warn)


class LeaserConfig(BaseModel):
    """Конфигурация лизера, влияющая на котировку и ликвидацию."""

    liability: LiabilitySpec
    min_asset: int = Field(..., ge=0, description="Минимальная стоимость актива позиции (LPN)")
    min_transaction: int = Field(..., ge=0, description="Минимальная сумма операции (LPN)")
    lease_interest_rate_margin: int = Field(
        ..., ge=0, description="Годовая маржа лизера (permille)"
    )
    due_period: int = Field(..., gt=0, description="Due-период (ns)")
    grace_period: int = Field(default=0, ge=0, description="Grace-период после due (ns)")

    model_config = {"frozen": True}
