"""CSV export of the transaction ledger."""

from pocket_ledger.services.export.csv_export import (
    EXPORT_HEADER,
    TransactionExporter,
    to_csv,
)

__all__ = ["EXPORT_HEADER", "TransactionExporter", "to_csv"]
