"""Lifecycle — наблюдение за жизненным циклом позиции.

- LeaseLifecycle: проверка порядка наблюдаемых состояний
- await_stable / await_all_stable: ограниченный по попыткам опрос
"""

from .poller import (
    PollingConfig,
    await_all_stable,
    await_stable,
    is_stable,
)
from .state_machine import (
    ALLOWED_TRANSITIONS,
    LeaseLifecycle,
    LifecycleTransition,
)

__all__ = [
    "LeaseLifecycle",
    "LifecycleTransition",
    "ALLOWED_TRANSITIONS",
    "PollingConfig",
    "await_stable",
    "await_all_stable",
    "is_stable",
]
