"""Lease Lifecycle — проверка наблюдаемой последовательности состояний позиции.

Состояния (tagged union из lease_verifier.core.domain.lease_state):
- Opening{phase} → Opened → Paid → Closed
- Opened → Opened (частичная ликвидация) / Liquidated (полная)
- Opened → Closed (полное закрытие, stop-loss, take-profit)

Модель только наблюдает: переходы выполняет удалённая система, здесь они
валидируются. Наблюдение может пропустить промежуточные состояния
(level-triggered опрос), но никогда не движется назад.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from lease_verifier.core.domain.lease_state import (
    LeaseState,
    Opening,
    StateKind,
    stage_rank,
)
from lease_verifier.core.errors import LifecycleViolation

logger = logging.getLogger(__name__)


# Допустимые рёбра (по дискриминатору status); пропуск стадий разрешён
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    StateKind.OPENING.value: frozenset(
        {
            StateKind.OPENING.value,
            StateKind.OPENED.value,
            StateKind.PAID.value,
            StateKind.CLOSED.value,
            StateKind.LIQUIDATED.value,
        }
    ),
    StateKind.OPENED.value: frozenset(
        {
            StateKind.OPENED.value,
            StateKind.PAID.value,
            StateKind.CLOSED.value,
            StateKind.LIQUIDATED.value,
        }
    ),
    StateKind.PAID.value: frozenset({StateKind.PAID.value, StateKind.CLOSED.value}),
    StateKind.CLOSED.value: frozenset({StateKind.CLOSED.value}),
    StateKind.LIQUIDATED.value: frozenset({StateKind.LIQUIDATED.value}),
}


@dataclass(frozen=True)
class LifecycleTransition:
    """Результат одного наблюдения."""

    previous: Optional[LeaseState]
    current: LeaseState

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    # Для отладки
    details: str


@dataclass
class LeaseLifecycle:
    """Наблюдатель жизненного цикла одной позиции.

    Хранит последнее принятое состояние и историю наблюдений. Каждое новое
    наблюдение сверяется с предыдущим; недопустимый переход поднимает
    LifecycleViolation и не меняет текущее состояние.
    """

    current: Optional[LeaseState] = None
    history: List[LifecycleTransition] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.current is not None and self.current.is_terminal

    def observe(self, state: LeaseState) -> LifecycleTransition:
        """Принять очередное наблюдение.

        Args:
            state: наблюдаемое состояние позиции

        Returns:
            LifecycleTransition с предыдущим и текущим состоянием

        Raises:
            LifecycleViolation: регресс стадии или подфазы открытия,
                выход из терминального состояния, недопустимое ребро
        """
        previous = self.current

        if previous is None:
            result = self._create_result(
                previous=None,
                current=state,
                transition_occurred=False,
                transition_reason="initial_observation",
                details=f"Initial state {state.status}",
            )
            return self._accept(result)

        self._check_edge(previous, state)

        if previous.status != state.status:
            result = self._create_result(
                previous=previous,
                current=state,
                transition_occurred=True,
                transition_reason=f"{previous.status}_to_{state.status}",
                details=f"Transition {previous.status} → {state.status}",
            )
        elif isinstance(previous, Opening) and isinstance(state, Opening) and previous.phase != state.phase:
            result = self._create_result(
                previous=previous,
                current=state,
                transition_occurred=True,
                transition_reason="opening_phase_advanced",
                details=f"Opening phase {previous.phase.value} → {state.phase.value}",
            )
        else:
            result = self._create_result(
                previous=previous,
                current=state,
                transition_occurred=False,
                transition_reason=f"in_{state.status}",
                details=f"in_progress={state.in_progress}",
            )

        return self._accept(result)

    def _check_edge(self, previous: LeaseState, state: LeaseState) -> None:
        """Проверка допустимости ребра previous → state."""
        if stage_rank(state) < stage_rank(previous):
            raise LifecycleViolation(
                f"Lease state regressed: {previous.status} → {state.status}"
            )

        if state.status not in ALLOWED_TRANSITIONS[previous.status]:
            if previous.is_terminal:
                raise LifecycleViolation(
                    f"Lease left terminal state {previous.status} for {state.status}"
                )
            raise LifecycleViolation(
                f"Illegal lease transition {previous.status} → {state.status}"
            )

        if isinstance(previous, Opening) and isinstance(state, Opening):
            if state.phase.rank < previous.phase.rank:
                raise LifecycleViolation(
                    f"Opening phase regressed: {previous.phase.value} → {state.phase.value}"
                )

    def _accept(self, result: LifecycleTransition) -> LifecycleTransition:
        self.current = result.current
        self.history.append(result)
        if result.transition_occurred:
            logger.info("Lease transition: %s", result.details)
        else:
            logger.debug("Lease observation: %s (%s)", result.transition_reason, result.details)
        return result

    @staticmethod
    def _create_result(
        previous: Optional[LeaseState],
        current: LeaseState,
        transition_occurred: bool,
        transition_reason: str,
        details: str,
    ) -> LifecycleTransition:
        return LifecycleTransition(
            previous=previous,
            current=current,
            transition_occurred=transition_occurred,
            transition_reason=transition_reason,
            details=details,
        )
