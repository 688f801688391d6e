"""Custom exceptions for the compromised package scanner."""


class ScannerError(Exception):
    """Base exception for all scanner errors."""


class CompromisedListLoadError(ScannerError):
    """Raised when the compromised package list cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load compromised package list '{path}': {reason}")


class OutputPathError(ScannerError):
    """Raised when a requested report location is unsafe or invalid."""


class ReportWriteError(ScannerError):
    """Raised when the report cannot be persisted."""
