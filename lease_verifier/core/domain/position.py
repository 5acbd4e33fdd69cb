"""
Position — Модель leveraged-позиции (lease)

Immutable Pydantic модель одного наблюдения позиции:
- Тело долга и актив позиции
- Проценты, разбитые на due/overdue и loan/margin транши
- Состояние жизненного цикла (tagged union из lease_state)
- Опциональная close policy (stop-loss / take-profit в permille LTV)

Poller никогда не мутирует Position: каждое наблюдение — новый экземпляр.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .lease_state import LeaseState, Opened


# =============================================================================
# CLOSE POLICY
# =============================================================================


class ClosePolicy(BaseModel):
    """
    Политика автоматического закрытия.

    stop_loss: закрыть при LTV >= stop_loss (permille)
    take_profit: закрыть при LTV < take_profit (permille)
    """

    stop_loss: Optional[int] = Field(default=None, gt=0, lt=1000, description="Stop-loss LTV (permille)")
    take_profit: Optional[int] = Field(default=None, gt=0, lt=1000, description="Take-profit LTV (permille)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_levels(self) -> "ClosePolicy":
        """Take-profit должен быть строго ниже stop-loss."""
        if (
            self.stop_loss is not None
            and self.take_profit is not None
            and self.take_profit >= self.stop_loss
        ):
            raise ValueError(
                f"take_profit {self.take_profit} must be < stop_loss {self.stop_loss}"
            )
        return self


# =============================================================================
# POSITION MODEL
# =============================================================================


class Position(BaseModel):
    """
    Модель позиции под проверкой.

    Все суммы в LPN, кроме asset_amount (в валюте актива).
    """

    # Долг и актив
    principal_due: int = Field(..., ge=0, description="Тело долга (LPN)")
    asset_amount: int = Field(..., ge=0, description="Актив позиции (в валюте актива)")

    # Ставки
    loan_interest_rate: int = Field(..., ge=0, description="Годовая ставка пула (permille)")
    margin_interest_rate: int = Field(..., ge=0, description="Годовая маржа лизера (permille)")

    # Просроченные проценты (previous period)
    overdue_margin: int = Field(default=0, ge=0, description="Просроченная маржа")
    overdue_interest: int = Field(default=0, ge=0, description="Просроченные проценты пула")

    # Текущие проценты (current period)
    due_margin: int = Field(default=0, ge=0, description="Текущая маржа")
    due_interest: int = Field(default=0, ge=0, description="Текущие проценты пула")

    # Время наблюдения
    validity_ts: int = Field(default=0, ge=0, description="Момент наблюдения (ns since epoch)")

    state: LeaseState = Field(default_factory=Opened, description="Состояние жизненного цикла")
    close_policy: Optional[ClosePolicy] = Field(default=None, description="Close policy")

    model_config = {"frozen": True}

    @property
    def overdue_total(self) -> int:
        return self.overdue_margin + self.overdue_interest

    @property
    def due_total(self) -> int:
        return self.due_margin + self.due_interest

    @property
    def total_interest_due(self) -> int:
        """Все начисленные проценты (due + overdue, оба транша)."""
        return self.overdue_total + self.due_total

    @property
    def total_due(self) -> int:
        """
        Полные обязательства позиции.

        Returns:
            principal + все проценты (LPN)
        """
        return self.principal_due + self.total_interest_due

    @property
    def in_progress(self) -> bool:
        return self.state.in_progress

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
