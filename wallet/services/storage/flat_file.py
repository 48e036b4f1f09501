"""
Flat-File Account Snapshot Storage

DESIGN DECISION: Accounts are exported as a single line of delimited text:

    <id>;<phone>;<balance>|<id>;<phone>;<balance>|

Every record ends with "|", including the last one, and nothing else is
written. The format is small enough to read by eye and diff.

TRADEOFFS:
- No escaping. A phone containing ";" or "|" cannot be represented, so
  export refuses it instead of writing a file that would not read back.
- Accounts only. Payments and favorites are not part of the snapshot.

Reading splits on "|". The trailing empty segment produced by the final
delimiter marks end-of-input. An empty segment anywhere else is a
malformed file and is rejected.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

import structlog
from pydantic import ValidationError

from wallet.config import get_settings
from wallet.models.account import Account
from wallet.services.storage.interface import (
    AccountStorageInterface,
    RecordFormatError,
    StorageError,
)


FIELD_SEPARATOR = ";"
RECORD_SEPARATOR = "|"
FIELD_COUNT = 3


class FlatFileAccountStorage(AccountStorageInterface):
    """
    Reads and writes account snapshots in the delimited flat-file format.

    File handles are always released. A failure to close is logged, and is
    only raised when nothing else went wrong.
    """

    def __init__(self, encoding: Optional[str] = None):
        self._encoding = encoding or get_settings().ledger.file_encoding
        self._logger = structlog.get_logger(__name__)

    # -------------------------------------------------------------------------
    # Format
    # -------------------------------------------------------------------------

    def _account_to_record(self, account: Account) -> str:
        """Convert an Account to a single record, without the delimiter."""
        phone = account.phone
        if FIELD_SEPARATOR in phone or RECORD_SEPARATOR in phone:
            raise RecordFormatError(
                phone,
                f"Phone of account {account.id} contains a reserved separator: {phone!r}",
            )
        return FIELD_SEPARATOR.join([str(account.id), phone, str(account.balance)])

    def _record_to_account(self, record: str) -> Account:
        """Convert a single record back to an Account."""
        fields = record.split(FIELD_SEPARATOR)
        if len(fields) != FIELD_COUNT:
            raise RecordFormatError(
                record,
                f"Expected {FIELD_COUNT} fields, got {len(fields)}: {record!r}",
            )

        raw_id, phone, raw_balance = fields
        try:
            account_id = int(raw_id)
            balance = int(raw_balance)
        except ValueError as e:
            raise RecordFormatError(record, f"Non-integer field in {record!r}") from e

        try:
            return Account(id=account_id, phone=phone, balance=balance)
        except ValidationError as e:
            raise RecordFormatError(record, f"Invalid account in {record!r}: {e}") from e

    def serialize(self, accounts: Iterable[Account]) -> str:
        """Render accounts as snapshot text."""
        return "".join(
            self._account_to_record(account) + RECORD_SEPARATOR
            for account in accounts
        )

    def parse(self, content: str) -> list[Account]:
        """
        Parse snapshot text into accounts.

        Only the final segment may be empty (or whitespace); it is treated
        as end-of-input. An empty string therefore yields no accounts.
        """
        segments = content.split(RECORD_SEPARATOR)
        last_index = len(segments) - 1

        accounts = []
        for index, segment in enumerate(segments):
            if not segment.strip():
                if index == last_index:
                    break
                raise RecordFormatError(
                    segment,
                    f"Empty record at position {index}",
                )
            accounts.append(self._record_to_account(segment))
        return accounts

    # -------------------------------------------------------------------------
    # File access
    # -------------------------------------------------------------------------

    @contextmanager
    def _open(self, path: Path, mode: str) -> Iterator[IO[str]]:
        """Open a snapshot file and guarantee it is closed on every path."""
        try:
            handle = path.open(mode, encoding=self._encoding)
        except OSError as e:
            self._logger.error("snapshot_open_failed", path=str(path), error=str(e))
            raise StorageError(f"Unable to open {path}: {e}") from e

        failed = False
        try:
            yield handle
        except BaseException:
            failed = True
            raise
        finally:
            try:
                handle.close()
            except OSError as e:
                self._logger.error("snapshot_close_failed", path=str(path), error=str(e))
                if not failed:
                    raise StorageError(f"Unable to close {path}: {e}") from e

    def export_accounts(self, accounts: Iterable[Account], path: Path) -> int:
        accounts = list(accounts)
        # Render first so an unrepresentable account never truncates the file
        payload = self.serialize(accounts)

        with self._open(path, "w") as handle:
            try:
                handle.write(payload)
            except OSError as e:
                self._logger.error("snapshot_write_failed", path=str(path), error=str(e))
                raise StorageError(f"Unable to write to {path}: {e}") from e

        self._logger.debug("snapshot_written", path=str(path), accounts=len(accounts))
        return len(accounts)

    def import_accounts(self, path: Path) -> list[Account]:
        with self._open(path, "r") as handle:
            try:
                content = handle.read()
            except (OSError, UnicodeDecodeError) as e:
                self._logger.error("snapshot_read_failed", path=str(path), error=str(e))
                raise StorageError(f"Unable to read from {path}: {e}") from e

        accounts = self.parse(content)
        self._logger.debug("snapshot_read", path=str(path), accounts=len(accounts))
        return accounts
