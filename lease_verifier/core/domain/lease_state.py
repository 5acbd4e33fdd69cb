"""
LeaseState — состояние жизненного цикла позиции как tagged union

Состояния взаимоисключающие, дискриминатор — поле status:
- Opening{phase}: позиция открывается (подфазы строго упорядочены)
- Opened{in_progress}: открыта, возможна операция в полёте
- Paid{in_progress}: долг погашен, ожидается закрытие
- Closed: закрыта (терминальное)
- Liquidated: полностью ликвидирована (терминальное)

Вместо объекта с опциональными полями (opened?/paid?/closed?) используется
размеченное объединение: разбор через isinstance исчерпывающий, проверок
на None нет.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


# =============================================================================
# OPENING PHASES
# =============================================================================


class OpeningPhase(str, Enum):
    """Подфазы открытия позиции (в порядке прохождения)."""

    OPEN_ICA_ACCOUNT = "open_ica_account"
    TRANSFER_OUT = "transfer_out"
    BUY_ASSET = "buy_asset"
    TRANSFER_IN_INIT = "transfer_in_init"
    TRANSFER_IN_FINISH = "transfer_in_finish"

    @property
    def rank(self) -> int:
        """Порядковый номер подфазы (0..4)."""
        return OPENING_PHASE_ORDER.index(self)


OPENING_PHASE_ORDER: tuple[OpeningPhase, ...] = (
    OpeningPhase.OPEN_ICA_ACCOUNT,
    OpeningPhase.TRANSFER_OUT,
    OpeningPhase.BUY_ASSET,
    OpeningPhase.TRANSFER_IN_INIT,
    OpeningPhase.TRANSFER_IN_FINISH,
)


class StateKind(str, Enum):
    """Дискриминатор состояния."""

    OPENING = "opening"
    OPENED = "opened"
    PAID = "paid"
    CLOSED = "closed"
    LIQUIDATED = "liquidated"


# Порядок стадий; переходы возможны только вперёд (или на месте)
STAGE_RANK: dict[str, int] = {
    StateKind.OPENING.value: 0,
    StateKind.OPENED.value: 1,
    StateKind.PAID.value: 2,
    StateKind.CLOSED.value: 3,
    StateKind.LIQUIDATED.value: 3,
}


# =============================================================================
# STATES
# =============================================================================


class Opening(BaseModel):
    """Позиция в процессе открытия. Всегда in_progress."""

    status: Literal["opening"] = "opening"
    phase: OpeningPhase = Field(..., description="Текущая подфаза открытия")

    model_config = {"frozen": True}

    @property
    def in_progress(self) -> bool:
        return True

    @property
    def is_terminal(self) -> bool:
        return False


class Opened(BaseModel):
    """Открытая позиция."""

    status: Literal["opened"] = "opened"
    in_progress: bool = Field(default=False, description="Операция в полёте (repay/close/liquidation)")

    model_config = {"frozen": True}

    @property
    def is_terminal(self) -> bool:
        return False


class Paid(BaseModel):
    """Долг полностью погашен, актив ещё не возвращён."""

    status: Literal["paid"] = "paid"
    in_progress: bool = Field(default=False, description="Операция закрытия в полёте")

    model_config = {"frozen": True}

    @property
    def is_terminal(self) -> bool:
        return False


class Closed(BaseModel):
    """Позиция закрыта."""

    status: Literal["closed"] = "closed"

    model_config = {"frozen": True}

    @property
    def in_progress(self) -> bool:
        return False

    @property
    def is_terminal(self) -> bool:
        return True


class Liquidated(BaseModel):
    """Позиция полностью ликвидирована."""

    status: Literal["liquidated"] = "liquidated"

    model_config = {"frozen": True}

    @property
    def in_progress(self) -> bool:
        return False

    @property
    def is_terminal(self) -> bool:
        return True


LeaseState = Annotated[
    Union[Opening, Opened, Paid, Closed, Liquidated],
    Field(discriminator="status"),
]

LEASE_STATE_ADAPTER: TypeAdapter = TypeAdapter(LeaseState)


def parse_lease_state(data: dict) -> Union[Opening, Opened, Paid, Closed, Liquidated]:
    """Построение состояния из dict с полем status."""
    return LEASE_STATE_ADAPTER.validate_python(data)


def stage_rank(state: Union[Opening, Opened, Paid, Closed, Liquidated]) -> int:
    """Ранг стадии состояния (для проверки отсутствия регресса)."""
    return STAGE_RANK[state.status]
