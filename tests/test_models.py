"""
Tests for Wallet Ledger models

Test strategy:
1. Unit tests for the passive models (accounts, payments, favorites)
2. Unit tests for audit events and the event builder
3. No file system access here (see test_flat_file_storage.py)
"""

import pytest

from wallet.models.account import (
    Account,
    Favorite,
    Payment,
    PaymentStatus,
)
from wallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestAccountModel:
    """Tests for the Account model."""

    def test_account_creation(self):
        """Test Account model creation with default balance."""
        account = Account(id=1, phone="+992000000001")
        assert account.id == 1
        assert account.phone == "+992000000001"
        assert account.balance == 0

    def test_account_rejects_negative_balance(self):
        """Test that a negative opening balance is rejected."""
        with pytest.raises(ValueError):
            Account(id=1, phone="+992000000001", balance=-1)

    def test_account_rejects_negative_balance_on_assignment(self):
        """Test that balance is re-validated when assigned."""
        account = Account(id=1, phone="+992000000001", balance=10)
        with pytest.raises(ValueError):
            account.balance = -5
        assert account.balance == 10

    def test_account_copy_is_independent(self):
        """Test that a copied account does not share state."""
        account = Account(id=1, phone="+992000000001", balance=10)
        copy = account.model_copy()
        copy.balance = 99
        assert account.balance == 10


class TestPaymentModel:
    """Tests for the Payment model."""

    def test_payment_defaults_to_in_progress(self):
        """Test that new payments start in progress."""
        payment = Payment(id="p1", account_id=1, amount=200, category="food")
        assert payment.status == PaymentStatus.IN_PROGRESS

    def test_payment_rejects_zero_amount(self):
        """Test that payment amounts must be positive."""
        with pytest.raises(ValueError):
            Payment(id="p1", account_id=1, amount=0, category="food")

    def test_payment_status_values(self):
        """Test payment status string values."""
        assert PaymentStatus.IN_PROGRESS.value == "INPROGRESS"
        assert PaymentStatus.FAIL.value == "FAIL"
        assert PaymentStatus("FAIL") is PaymentStatus.FAIL


class TestFavoriteModel:
    """Tests for the Favorite model."""

    def test_favorite_creation(self):
        """Test Favorite model creation."""
        favorite = Favorite(
            id="f1",
            account_id=1,
            name="lunch",
            amount=200,
            category="food",
        )
        assert favorite.name == "lunch"
        assert favorite.amount == 200

    def test_favorite_is_immutable(self):
        """Test that favorites cannot be changed once created."""
        favorite = Favorite(id="f1", account_id=1, name="lunch", amount=200, category="food")
        with pytest.raises(ValueError):
            favorite.amount = 500


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            description="Account registered",
        )
        assert event.event_type == AuditEventType.ACCOUNT_REGISTERED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.PAYMENT_CREATED,
            entity_type="payment",
            entity_id="p1",
            description="Payment created",
            details={"amount": 200},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "payment_created"
        assert log_dict["entity_id"] == "p1"
        assert log_dict["details"]["amount"] == 200

    def test_audit_event_builder_payment_rejected(self):
        """Test AuditEventBuilder.payment_rejected."""
        event = AuditEventBuilder.payment_rejected(
            payment_id="p1",
            account_id=1,
            amount=200,
        )
        assert event.event_type == AuditEventType.PAYMENT_REJECTED
        assert event.entity_type == "payment"
        assert event.entity_id == "p1"
        assert event.details["refunded"] == 200

    def test_audit_event_builder_operation_failed(self):
        """Test that refused operations are warnings carrying the code."""
        event = AuditEventBuilder.operation_failed(
            operation="pay",
            error_code="NOT_ENOUGH_BALANCE",
            error_message="not enough balance in account",
            details={"account_id": 1},
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "NOT_ENOUGH_BALANCE"
        assert event.details == {"operation": "pay", "account_id": 1}

    def test_audit_event_builder_storage_error(self):
        """Test that storage failures are errors."""
        event = AuditEventBuilder.storage_error("export_to_file", "/tmp/x", "boom")
        assert event.event_type == AuditEventType.STORAGE_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "boom"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
