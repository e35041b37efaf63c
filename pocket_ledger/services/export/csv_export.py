"""
Transaction Export

Turns the ledger into a small CSV the user can share or open in a
spreadsheet. Formatting is pure; only writing the file happens off the
caller's thread.
"""

import asyncio
from pathlib import Path
from typing import Optional

from pocket_ledger.audit import AuditLogger
from pocket_ledger.config import ExportSettings, get_settings
from pocket_ledger.models.audit import AuditEventBuilder
from pocket_ledger.models.ledger import Transaction
from pocket_ledger.services.storage import StorageError, atomic_write_text
from pocket_ledger.services.storage.codec import format_amount, sanitize_field


EXPORT_HEADER = "Type,Amount,Method,Date,Note"


def to_csv(transactions: list[Transaction], date_format: str = "%Y-%m-%d %H:%M") -> str:
    """
    Format transactions as CSV text, one row each, in the given order.

    Dates are shown in local time. Commas in notes become spaces.
    """
    lines = [EXPORT_HEADER]
    for t in transactions:
        lines.append(",".join([
            t.kind.value,
            format_amount(t.amount),
            t.method.value,
            t.timestamp.astimezone().strftime(date_format),
            sanitize_field(t.note),
        ]))
    return "\n".join(lines) + "\n"


class TransactionExporter:
    """Writes the export file on a worker thread."""

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().export
        self._audit = audit_logger or AuditLogger()

    @property
    def export_path(self) -> Path:
        return self._settings.export_dir / self._settings.export_filename

    def _write(self, content: str) -> Path:
        path = self.export_path
        atomic_write_text(path, content)
        return path

    async def export(self, transactions: list[Transaction]) -> Optional[Path]:
        """
        Write the export file.

        The transactions are formatted before this returns control, so
        later ledger changes do not leak into the file.

        Returns:
            Path of the written file, or None if it could not be written
        """
        content = to_csv(transactions, self._settings.date_format)
        try:
            path = await asyncio.to_thread(self._write, content)
        except StorageError as e:
            self._audit.log(AuditEventBuilder.export_failed(str(self.export_path), str(e)))
            return None

        self._audit.log(AuditEventBuilder.export_completed(str(path), len(transactions)))
        return path
