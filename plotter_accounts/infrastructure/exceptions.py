"""Infrastructure exceptions for config store operations.

Store errors extend PlotterAccountsException so the command layer can
report them the same way as domain errors.
"""

from plotter_accounts.domain.exceptions import PlotterAccountsException


class StoreException(PlotterAccountsException):
    """Base exception for config store operations."""


class StoreUnavailableException(StoreException):
    """Transport or backend failure talking to the config store."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Config store unavailable during {operation}: {reason}",
            "STORE_UNAVAILABLE",
            {"operation": operation, "reason": reason},
        )


class CorruptRecordException(StoreException):
    """Stored payload does not decode into the expected record shape."""

    def __init__(self, record_type: str, key: str, reason: str) -> None:
        super().__init__(
            f"Corrupt {record_type} record: {key}",
            "CORRUPT_RECORD",
            {"record_type": record_type, "key": key, "reason": reason},
        )
