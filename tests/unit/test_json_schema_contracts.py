"""
Tests for JSON Schema Contract Validators

Комплексное тестирование контрактов снапшотов:
- Валидность самих схем
- Валидация правильных документов
- Детекция нарушений (два ключа состояния, неизвестный ключ, pattern)
- Перевод документов в LeaseState / Position / LiquidityPoolSnapshot
"""

from pathlib import Path

import pytest
from jsonschema import ValidationError

from lease_verifier.core.contracts import (
    LeaseStatusValidator,
    LppBalanceValidator,
    SchemaLoader,
    lease_state_from_status,
    pool_snapshot_from_balance,
    position_from_status,
    validate_lease_status,
    validate_lpp_balance,
)
from lease_verifier.core.domain import (
    ClosePolicy,
    Closed,
    Liquidated,
    Opened,
    Opening,
    OpeningPhase,
    Paid,
)
from lease_verifier.core.errors import InvalidInput


def coin(amount, ticker="USDC"):
    return {"amount": str(amount), "ticker": ticker}


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def opened_status():
    """Валидный статус открытой позиции."""
    return {
        "opened": {
            "amount": coin(3000, "ATOM"),
            "principal_due": coin(1000),
            "loan_interest_rate": 50,
            "margin_interest_rate": 30,
            "overdue_margin": coin(1),
            "overdue_interest": coin(2),
            "due_margin": coin(3),
            "due_interest": coin(4),
            "validity": "1700000000000000000",
            "in_progress": None,
        }
    }


@pytest.fixture
def lpp_balance():
    return {
        "balance": coin(600),
        "total_principal_due": coin(300),
        "total_interest_due": coin(100),
        "balance_nlpn": coin(500, "NLPN"),
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    def test_schemas_are_valid(self):
        loader = SchemaLoader()
        for name in ("lease_status", "lpp_balance"):
            schema = loader.load_schema(name)
            assert schema["$schema"].endswith("2020-12/schema")

    def test_available(self):
        assert SchemaLoader().available() == ["lease_status", "lpp_balance"]

    def test_cache(self):
        loader = SchemaLoader()
        assert loader.load_schema("lease_status") is loader.load_schema("lease_status")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("no_such_schema")

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "absent")

    def test_invalid_schema(self, tmp_path: Path):
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# LEASE STATUS CONTRACT
# =============================================================================


class TestLeaseStatusContract:
    """Валидация lease_status."""

    def test_opened_valid(self, opened_status):
        validate_lease_status(opened_status)
        assert LeaseStatusValidator().is_valid(opened_status)

    def test_two_state_keys(self, opened_status):
        opened_status["closed"] = {}
        with pytest.raises(ValidationError):
            validate_lease_status(opened_status)

    def test_empty_document(self):
        assert not LeaseStatusValidator().is_valid({})

    def test_unknown_state(self):
        with pytest.raises(ValidationError):
            validate_lease_status({"frozen": {}})

    def test_missing_required(self, opened_status):
        del opened_status["opened"]["principal_due"]
        errors = list(LeaseStatusValidator().iter_errors(opened_status))
        assert len(errors) == 1

    def test_error_messages(self, opened_status):
        del opened_status["opened"]["validity"]
        messages = LeaseStatusValidator().error_messages(opened_status)

        assert len(messages) == 1
        assert messages[0].startswith("$.opened:")
        assert "validity" in messages[0]

    def test_negative_coin(self, opened_status):
        opened_status["opened"]["due_interest"] = coin(-4)
        with pytest.raises(ValidationError):
            validate_lease_status(opened_status)

    def test_unknown_opening_phase(self):
        with pytest.raises(ValidationError):
            validate_lease_status({"opening": {"in_progress": "swap"}})


class TestLeaseStateAdapter:
    """Документ статуса → LeaseState."""

    def test_opened(self, opened_status):
        assert lease_state_from_status(opened_status) == Opened(in_progress=False)

    def test_opened_in_progress(self, opened_status):
        opened_status["opened"]["in_progress"] = {"repayment": {"transfer_out": {}}}
        assert lease_state_from_status(opened_status) == Opened(in_progress=True)

    def test_opening_string_phase(self):
        state = lease_state_from_status({"opening": {"in_progress": "buy_asset"}})
        assert state == Opening(phase=OpeningPhase.BUY_ASSET)

    def test_opening_object_phase(self):
        state = lease_state_from_status({"opening": {"in_progress": {"transfer_in_init": {}}}})
        assert state == Opening(phase=OpeningPhase.TRANSFER_IN_INIT)

    def test_paid(self):
        state = lease_state_from_status({"paid": {"amount": coin(10, "ATOM")}})
        assert state == Paid(in_progress=False)

    def test_terminal(self):
        assert isinstance(lease_state_from_status({"closed": {}}), Closed)
        assert isinstance(lease_state_from_status({"liquidated": {}}), Liquidated)


class TestPositionAdapter:
    """Документ статуса → Position."""

    def test_opened_position(self, opened_status):
        position = position_from_status(opened_status)

        assert position.principal_due == 1000
        assert position.asset_amount == 3000
        assert position.total_due == 1010
        assert position.validity_ts == 1_700_000_000_000_000_000
        assert position.close_policy is None

    def test_close_policy(self, opened_status):
        opened_status["opened"]["close_policy"] = {"stop_loss": 800, "take_profit": None}
        position = position_from_status(opened_status)

        assert position.close_policy == ClosePolicy(stop_loss=800)

    def test_paid_position(self):
        position = position_from_status({"paid": {"amount": coin(10, "ATOM")}})

        assert position.principal_due == 0
        assert position.asset_amount == 10
        assert isinstance(position.state, Paid)

    def test_closed_has_no_position(self):
        with pytest.raises(InvalidInput, match="no position body"):
            position_from_status({"closed": {}})


# =============================================================================
# LPP BALANCE CONTRACT
# =============================================================================


class TestLppBalanceContract:
    def test_valid(self, lpp_balance):
        validate_lpp_balance(lpp_balance)
        assert LppBalanceValidator().is_valid(lpp_balance)

    def test_missing_field(self, lpp_balance):
        del lpp_balance["balance_nlpn"]
        with pytest.raises(ValidationError):
            validate_lpp_balance(lpp_balance)

    def test_snapshot(self, lpp_balance):
        snapshot = pool_snapshot_from_balance(lpp_balance)

        assert snapshot.available_liquidity == 600
        assert snapshot.principal_due == 300
        assert snapshot.interest_due == 100
        assert snapshot.total_shares == 500
        assert snapshot.total_value == 1000
