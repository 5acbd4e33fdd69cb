"""Bounded polling — ожидание стабильного состояния позиции.

Удалённая система обновляет состояние асинхронно, поэтому после каждой
операции (open/repay/close/liquidate) драйвер опрашивает статус, пока
операция не завершится:

- poll вызывается сразу, затем через interval секунд между вызовами
- успех: первый снапшот с in_progress == False или терминальным состоянием
- ошибка poll засчитывается как попытка и логируется (PollFailure)
- после max_attempts неуспешных попыток — PollTimeoutError
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from lease_verifier.core.errors import InvalidInput, PollFailure, PollTimeoutError
from lease_verifier.lifecycle.state_machine import LeaseLifecycle

logger = logging.getLogger(__name__)

K = TypeVar("K")

PollFn = Callable[[], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class PollingConfig:
    """Параметры опроса.

    interval_sec: пауза между вызовами poll
    max_attempts: бюджет попыток (включая неуспешные вызовы)
    """
    interval_sec: float = 5.0
    max_attempts: int = 30

    def __post_init__(self):
        if self.interval_sec < 0:
            raise ValueError(f"interval_sec must be >= 0, got {self.interval_sec}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


def is_stable(snapshot: Any) -> bool:
    """Снапшот стабилен: нет операции в полёте или состояние терминальное."""
    return snapshot.is_terminal or not snapshot.in_progress


def _lease_state(snapshot: Any):
    # Position несёт состояние в поле state, LeaseState передаётся как есть
    return getattr(snapshot, "state", snapshot)


async def await_stable(
    poll: PollFn,
    interval: float,
    max_attempts: int,
    *,
    lifecycle: Optional[LeaseLifecycle] = None,
    sleep: SleepFn = asyncio.sleep,
) -> Any:
    """Опрос до стабильного состояния.

    Args:
        poll: async callable, возвращающий снапшот (Position или LeaseState)
        interval: пауза между вызовами (секунды)
        max_attempts: максимум вызовов poll
        lifecycle: наблюдатель, проверяющий порядок состояний
        sleep: async sleep (подменяется в тестах)

    Returns:
        Первый стабильный снапшот

    Raises:
        PollTimeoutError: стабильное состояние не наблюдалось за max_attempts
        LifecycleViolation: наблюдаемое состояние откатилось назад
        TypeError: poll вернул не awaitable (poll не async)
        InvalidInput: poll отклонил свои аргументы, повтор бессмыслен
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    last_snapshot = None
    last_failure: Optional[PollFailure] = None
    failures = 0

    for attempt in range(1, max_attempts + 1):
        if attempt > 1:
            await sleep(interval)

        pending = poll()
        if not inspect.isawaitable(pending):
            raise TypeError(
                f"poll must return an awaitable, got {type(pending).__name__}"
            )

        try:
            snapshot = await pending
        except InvalidInput:
            raise
        except Exception as e:
            failures += 1
            last_failure = PollFailure(attempt, e)
            logger.warning("%s", last_failure)
            continue

        last_snapshot = snapshot
        if lifecycle is not None:
            lifecycle.observe(_lease_state(snapshot))

        if is_stable(snapshot):
            logger.debug("Stable state after %d attempts", attempt)
            return snapshot

        logger.debug("Attempt %d/%d: operation in progress", attempt, max_attempts)

    timeout = PollTimeoutError(max_attempts, last_snapshot=last_snapshot, failures=failures)
    logger.error("%s", timeout)
    raise timeout from last_failure


async def await_all_stable(
    polls: Mapping[K, PollFn],
    config: Optional[PollingConfig] = None,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> Dict[K, Any]:
    """Параллельный опрос независимых позиций.

    У каждой позиции свой LeaseLifecycle; порядок её состояний проверяется
    независимо от остальных.

    Returns:
        {ключ позиции: стабильный снапшот}

    Raises:
        Первую ошибку любой из позиций (PollTimeoutError / LifecycleViolation).
        Опрос остальных позиций при этом отменяется.
    """
    config = config or PollingConfig()

    tasks = {
        key: asyncio.create_task(
            await_stable(
                poll,
                config.interval_sec,
                config.max_attempts,
                lifecycle=LeaseLifecycle(),
                sleep=sleep,
            )
        )
        for key, poll in polls.items()
    }

    try:
        results = await asyncio.gather(*tasks.values())
    except BaseException:
        for task in tasks.values():
            task.cancel()
        # Дожидаемся отмены, чтобы ни один опрос не пережил вызов
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise

    return dict(zip(tasks.keys(), results))
