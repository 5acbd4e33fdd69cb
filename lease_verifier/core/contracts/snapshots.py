"""
Snapshots — документы драйвера → доменные модели

Статус позиции приходит как объект с одним из ключей opened/paid/...;
здесь он проверяется контрактом и превращается в tagged union LeaseState
(и, для открытой позиции, в Position).
"""

from typing import Any, Dict

from lease_verifier.core.contracts.validators import (
    validate_lease_status,
    validate_lpp_balance,
)
from lease_verifier.core.domain.lease_state import (
    Closed,
    LeaseState,
    Liquidated,
    Opened,
    Opening,
    OpeningPhase,
    Paid,
)
from lease_verifier.core.domain.pool import LiquidityPoolSnapshot
from lease_verifier.core.domain.position import ClosePolicy, Position
from lease_verifier.core.errors import InvalidInput


def _coin(coin: Dict[str, Any]) -> int:
    return int(coin["amount"])


def _opening_phase(in_progress: Any) -> OpeningPhase:
    # Подфаза приходит строкой или объектом с единственным ключом
    if isinstance(in_progress, dict):
        (in_progress,) = in_progress.keys()
    return OpeningPhase(in_progress)


def lease_state_from_status(status: Dict[str, Any]) -> LeaseState:
    """
    Состояние позиции из документа статуса.

    Raises:
        ValidationError: Если документ не соответствует lease_status.json
    """
    validate_lease_status(status)

    (kind, body) = next(iter(status.items()))

    if kind == "opening":
        return Opening(phase=_opening_phase(body["in_progress"]))
    if kind == "opened":
        return Opened(in_progress=body.get("in_progress") is not None)
    if kind == "paid":
        return Paid(in_progress=body.get("in_progress") is not None)
    if kind == "closed":
        return Closed()
    return Liquidated()


def position_from_status(status: Dict[str, Any]) -> Position:
    """
    Position из документа статуса открытой или погашенной позиции.

    Raises:
        ValidationError: Если документ не соответствует lease_status.json
        InvalidInput: Если в состоянии нет тела позиции (opening/closed/liquidated)
    """
    state = lease_state_from_status(status)

    if isinstance(state, Opened):
        body = status["opened"]
        policy = body.get("close_policy")
        return Position(
            principal_due=_coin(body["principal_due"]),
            asset_amount=_coin(body["amount"]),
            loan_interest_rate=body["loan_interest_rate"],
            margin_interest_rate=body["margin_interest_rate"],
            overdue_margin=_coin(body["overdue_margin"]),
            overdue_interest=_coin(body["overdue_interest"]),
            due_margin=_coin(body["due_margin"]),
            due_interest=_coin(body["due_interest"]),
            validity_ts=int(body["validity"]),
            state=state,
            close_policy=ClosePolicy(**policy) if policy else None,
        )

    if isinstance(state, Paid):
        return Position(
            principal_due=0,
            asset_amount=_coin(status["paid"]["amount"]),
            loan_interest_rate=0,
            margin_interest_rate=0,
            state=state,
        )

    raise InvalidInput(f"Lease in state '{state.status}' has no position body")


def pool_snapshot_from_balance(balance: Dict[str, Any]) -> LiquidityPoolSnapshot:
    """
    Снапшот пула из документа баланса.

    Raises:
        ValidationError: Если документ не соответствует lpp_balance.json
    """
    validate_lpp_balance(balance)

    return LiquidityPoolSnapshot(
        principal_due=_coin(balance["total_principal_due"]),
        interest_due=_coin(balance["total_interest_due"]),
        available_liquidity=_coin(balance["balance"]),
        total_shares=_coin(balance["balance_nlpn"]),
    )
