"""
Errors — таксономия ошибок верификатора

Все ошибки наследуются от LeaseVerifierError.

- InvalidInput: некорректные аргументы (ноль в знаменателе, отрицательная сумма).
  Совместима с ValueError, поднимается сразу, никогда не ретраится.
- InvalidTimeWindow: окно начисления с to < from (ошибка вызывающего кода).
- LifecycleViolation: наблюдаемое состояние позиции откатилось назад
  или перешло по недопустимому ребру.
- PollFailure: единичный неуспешный опрос удалённого источника (transient).
- PollTimeoutError: исчерпан лимит попыток опроса.
"""

from typing import Any, Optional


class LeaseVerifierError(Exception):
    """Базовая ошибка пакета."""

    pass


class InvalidInput(LeaseVerifierError, ValueError):
    """Некорректный или вне-доменный аргумент."""

    pass


class InvalidTimeWindow(InvalidInput):
    """
    Окно начисления процентов с концом раньше начала.

    Модель никогда не возвращает отрицательные проценты: запрос окна,
    которое ещё не началось, означает рассинхронизацию часов или баг.
    """

    def __init__(self, from_ts: int, to_ts: int):
        self.from_ts = from_ts
        self.to_ts = to_ts
        super().__init__(
            f"Invalid accrual window: to={to_ts} < from={from_ts} "
            f"(skew {from_ts - to_ts} ns)"
        )


class LifecycleViolation(LeaseVerifierError):
    """Нарушение порядка состояний позиции (протокольная ошибка)."""

    pass


class PollFailure(LeaseVerifierError):
    """
    Единичный неуспешный опрос (transient).

    Засчитывается в бюджет попыток, но не прерывает цикл опроса.
    """

    def __init__(self, attempt: int, cause: BaseException):
        self.attempt = attempt
        self.cause = cause
        super().__init__(f"Poll attempt {attempt} failed: {cause!r}")


class PollTimeoutError(LeaseVerifierError, TimeoutError):
    """Опрос исчерпал max_attempts, стабильное состояние не наблюдалось."""

    def __init__(
        self,
        attempts: int,
        last_snapshot: Optional[Any] = None,
        failures: int = 0,
    ):
        self.attempts = attempts
        self.last_snapshot = last_snapshot
        self.failures = failures
        super().__init__(
            f"No stable state after {attempts} attempts "
            f"({failures} failed polls), last={last_snapshot!r}"
        )
