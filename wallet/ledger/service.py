"""
Ledger Service

The single owner of all wallet state:
1. Accounts - registered phones with balances
2. Payments - debits, which can be rejected (refunded) or repeated
3. Favorites - named payment templates

DESIGN DECISION: Every collection is owned here and nowhere else.
Callers only ever receive copies, so the only way to change a balance
is through one of the operations below.

GUARANTEES:
- A balance never goes negative; pay() is the only debit path
- Account IDs are sequential per service instance and start at 1
- Every refusal raises a LedgerError with a code from LedgerErrorCode

NOT GUARANTEED (documented behavior, not defects):
- reject() refunds unconditionally; rejecting twice refunds twice
- add_account_with_balance() does not undo a registration whose deposit failed
- import_from_file() appends without checking for duplicate IDs or phones

Not thread-safe. Serialize all mutating calls if the service is shared.
"""

from pathlib import Path
from typing import Callable, Optional, Union
from uuid import uuid4

from wallet.audit import AuditLogger
from wallet.config import get_settings
from wallet.ledger.errors import LedgerError, LedgerErrorCode
from wallet.models.account import (
    Account,
    Favorite,
    Money,
    Payment,
    PaymentCategory,
    PaymentStatus,
    Phone,
)
from wallet.services.storage import (
    AccountStorageInterface,
    FlatFileAccountStorage,
    InMemoryAuditStorage,
    StorageError,
)


PathLike = Union[str, Path]


def _new_uuid() -> str:
    return str(uuid4())


class LedgerService:
    """
    In-memory ledger of accounts, payments and favorites.

    Accounts are kept in registration/import order for export, with
    first-wins indexes by ID and by phone for lookup. Payments and
    favorites are insertion-ordered dicts keyed by their IDs.
    """

    def __init__(
        self,
        storage: Optional[AccountStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Optional[Callable[[], str]] = None,
        export_path: Optional[PathLike] = None,
    ):
        """
        Initialize an empty ledger.

        Args:
            storage: Account snapshot format. Defaults to the flat-file format.
            audit_logger: Where operations are recorded. Defaults to local logging only.
            id_factory: Generates payment and favorite IDs. Defaults to uuid4.
            export_path: Default snapshot file. Defaults to WALLET_EXPORT_PATH.
        """
        self._storage = storage if storage is not None else FlatFileAccountStorage()
        self._audit_logger = audit_logger if audit_logger is not None else AuditLogger()
        self._new_id = id_factory or _new_uuid
        self._export_path = Path(export_path) if export_path else None

        self._next_account_id = 0
        self._accounts: list[Account] = []
        self._accounts_by_id: dict[int, Account] = {}
        self._accounts_by_phone: dict[Phone, Account] = {}
        self._payments: dict[str, Payment] = {}
        self._favorites: dict[str, Favorite] = {}

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def register_account(self, phone: Phone) -> Account:
        """
        Register a new account with a zero balance.

        Raises:
            LedgerError(PHONE_REGISTERED): If any account already has this phone
        """
        if phone in self._accounts_by_phone:
            raise self._refuse("register_account", LedgerErrorCode.PHONE_REGISTERED, phone=phone)

        self._next_account_id += 1
        account = Account(id=self._next_account_id, phone=phone, balance=0)
        self._append_account(account)

        self._audit_logger.log_account_registered(account.id, phone)
        return account.model_copy()

    def deposit(self, account_id: int, amount: Money) -> None:
        """
        Credit an account.

        Raises:
            LedgerError(AMOUNT_MUST_BE_POSITIVE): If amount <= 0
            LedgerError(ACCOUNT_NOT_FOUND): If the account does not exist
        """
        if amount <= 0:
            raise self._refuse(
                "deposit",
                LedgerErrorCode.AMOUNT_MUST_BE_POSITIVE,
                account_id=account_id,
                amount=amount,
            )

        account = self._get_account("deposit", account_id)
        account.balance += amount

        self._audit_logger.log_account_deposited(account.id, amount, account.balance)

    def find_account_by_id(self, account_id: int) -> Account:
        return self._get_account("find_account_by_id", account_id).model_copy()

    def add_account_with_balance(self, phone: Phone, balance: Money) -> Account:
        """
        Register an account and deposit an opening balance.

        Either failure is reported as one opaque code; the underlying cause
        is not chained. If the deposit fails the account stays registered
        with a zero balance.

        Raises:
            LedgerError(CANNOT_REGISTER_ACCOUNT): If registration fails
            LedgerError(CANNOT_DEPOSIT_ACCOUNT): If the deposit fails
        """
        try:
            account = self.register_account(phone)
        except LedgerError:
            raise self._refuse(
                "add_account_with_balance",
                LedgerErrorCode.CANNOT_REGISTER_ACCOUNT,
                phone=phone,
            ) from None

        try:
            self.deposit(account.id, balance)
        except LedgerError:
            raise self._refuse(
                "add_account_with_balance",
                LedgerErrorCode.CANNOT_DEPOSIT_ACCOUNT,
                account_id=account.id,
                amount=balance,
            ) from None

        return self.find_account_by_id(account.id)

    def accounts(self) -> list[Account]:
        """All accounts, in registration/import order."""
        return [account.model_copy() for account in self._accounts]

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def pay(self, account_id: int, amount: Money, category: PaymentCategory) -> Payment:
        """
        Debit an account and record an in-progress payment.

        Raises:
            LedgerError(AMOUNT_MUST_BE_POSITIVE): If amount <= 0
            LedgerError(ACCOUNT_NOT_FOUND): If the account does not exist
            LedgerError(NOT_ENOUGH_BALANCE): If the balance is below amount
        """
        if amount <= 0:
            raise self._refuse(
                "pay",
                LedgerErrorCode.AMOUNT_MUST_BE_POSITIVE,
                account_id=account_id,
                amount=amount,
            )

        account = self._get_account("pay", account_id)
        if account.balance < amount:
            raise self._refuse(
                "pay",
                LedgerErrorCode.NOT_ENOUGH_BALANCE,
                account_id=account_id,
                amount=amount,
                balance=account.balance,
            )

        payment = Payment(
            id=self._new_id(),
            account_id=account_id,
            amount=amount,
            category=category,
            status=PaymentStatus.IN_PROGRESS,
        )
        account.balance -= amount
        self._payments[payment.id] = payment

        self._audit_logger.log_payment_created(payment.id, account_id, amount, category)
        return payment.model_copy()

    def find_payment_by_id(self, payment_id: str) -> Payment:
        return self._get_payment("find_payment_by_id", payment_id).model_copy()

    def reject(self, payment_id: str) -> None:
        """
        Mark a payment failed and refund its amount to the account.

        The refund is unconditional: rejecting an already failed payment
        refunds it again.

        Raises:
            LedgerError(PAYMENT_NOT_FOUND): If the payment does not exist
            LedgerError(ACCOUNT_NOT_FOUND): If its account no longer resolves
        """
        payment = self._get_payment("reject", payment_id)
        account = self._get_account("reject", payment.account_id)

        payment.status = PaymentStatus.FAIL
        account.balance += payment.amount

        self._audit_logger.log_payment_rejected(payment.id, account.id, payment.amount)

    def repeat(self, payment_id: str) -> Payment:
        """Pay again with the account, amount and category of an earlier payment."""
        source = self._get_payment("repeat", payment_id)
        payment = self.pay(source.account_id, source.amount, source.category)

        self._audit_logger.log_payment_repeated(payment.id, source.id)
        return payment

    def payments(
        self,
        account_id: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
    ) -> list[Payment]:
        """Payments in creation order, optionally filtered by account and status."""
        return [
            payment.model_copy()
            for payment in self._payments.values()
            if (account_id is None or payment.account_id == account_id)
            and (status is None or payment.status == status)
        ]

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def favorite_payment(self, payment_id: str, name: str) -> Favorite:
        """
        Save a payment's account, amount and category as a named favorite.

        Raises:
            LedgerError(PAYMENT_NOT_FOUND): If the payment does not exist
        """
        payment = self._get_payment("favorite_payment", payment_id)
        favorite = Favorite(
            id=self._new_id(),
            account_id=payment.account_id,
            name=name,
            amount=payment.amount,
            category=payment.category,
        )
        self._favorites[favorite.id] = favorite

        self._audit_logger.log_favorite_created(favorite.id, payment.id, name)
        return favorite

    def find_favorite_by_id(self, favorite_id: str) -> Favorite:
        return self._get_favorite("find_favorite_by_id", favorite_id)

    def pay_from_favorite(self, favorite_id: str) -> Payment:
        """Create a new payment from a favorite's template."""
        favorite = self._get_favorite("pay_from_favorite", favorite_id)
        payment = self.pay(favorite.account_id, favorite.amount, favorite.category)

        self._audit_logger.log_favorite_paid(favorite.id, payment.id)
        return payment

    def favorites(self, account_id: Optional[int] = None) -> list[Favorite]:
        """Favorites in creation order, optionally filtered by account."""
        return [
            favorite
            for favorite in self._favorites.values()
            if account_id is None or favorite.account_id == account_id
        ]

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def export_to_file(self, path: Optional[PathLike] = None) -> None:
        """
        Write every account to a snapshot file, replacing its contents.

        Raises:
            StorageError: If the file cannot be created, written or closed
            RecordFormatError: If a phone cannot be represented in the format
        """
        target = self._resolve_path(path)
        try:
            count = self._storage.export_accounts(self._accounts, target)
        except StorageError as e:
            self._audit_logger.log_storage_error("export_to_file", str(target), str(e))
            raise

        self._audit_logger.log_accounts_exported(str(target), count)

    def import_from_file(self, path: Optional[PathLike] = None) -> None:
        """
        Append every account in a snapshot file to the ledger.

        Import is additive. Existing accounts are kept, and imported
        accounts are not checked against them for duplicate IDs or phones.
        The registration counter is left untouched. A malformed file is
        rejected as a whole.

        Raises:
            StorageError: If the file cannot be opened or read
            RecordFormatError: If any record is malformed
        """
        source = self._resolve_path(path)
        try:
            imported = self._storage.import_accounts(source)
        except StorageError as e:
            self._audit_logger.log_storage_error("import_from_file", str(source), str(e))
            raise

        for account in imported:
            self._append_account(account)

        self._audit_logger.log_accounts_imported(str(source), len(imported))

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _append_account(self, account: Account) -> None:
        self._accounts.append(account)
        # First account wins, so later duplicates never shadow earlier ones
        self._accounts_by_id.setdefault(account.id, account)
        self._accounts_by_phone.setdefault(account.phone, account)

    def _get_account(self, operation: str, account_id: int) -> Account:
        try:
            return self._accounts_by_id[account_id]
        except KeyError:
            raise self._refuse(
                operation, LedgerErrorCode.ACCOUNT_NOT_FOUND, account_id=account_id
            ) from None

    def _get_payment(self, operation: str, payment_id: str) -> Payment:
        try:
            return self._payments[payment_id]
        except KeyError:
            raise self._refuse(
                operation, LedgerErrorCode.PAYMENT_NOT_FOUND, payment_id=payment_id
            ) from None

    def _get_favorite(self, operation: str, favorite_id: str) -> Favorite:
        try:
            return self._favorites[favorite_id]
        except KeyError:
            raise self._refuse(
                operation, LedgerErrorCode.FAVORITE_NOT_FOUND, favorite_id=favorite_id
            ) from None

    def _refuse(self, operation: str, code: LedgerErrorCode, **details) -> LedgerError:
        """Record a refused operation and build the error to raise."""
        self._audit_logger.log_operation_failed(
            operation=operation,
            error_code=code.name,
            error_message=code.message,
            details=details,
        )
        return LedgerError(code)

    def _resolve_path(self, path: Optional[PathLike]) -> Path:
        if path is not None:
            return Path(path)
        if self._export_path is not None:
            return self._export_path
        return get_settings().ledger.export_path


def create_ledger_service(
    use_audit_storage: Optional[bool] = None,
) -> LedgerService:
    """
    Factory function to create a ledger wired from settings.

    Args:
        use_audit_storage: Keep an in-memory audit trail.
                    Defaults to WALLET_AUDIT_ENABLED.

    Returns:
        A ready LedgerService using the flat-file snapshot format
    """
    settings = get_settings().ledger
    if use_audit_storage is None:
        use_audit_storage = settings.audit_enabled

    audit_storage = InMemoryAuditStorage() if use_audit_storage else None

    return LedgerService(
        storage=FlatFileAccountStorage(encoding=settings.file_encoding),
        audit_logger=AuditLogger(audit_storage),
        export_path=settings.export_path,
    )
