"""Custom exceptions for document persistence."""


class DataError(Exception):
    """Base exception for the data layer."""


class DocumentLoadError(DataError):
    """Raised when a document file exists but cannot be read."""


class TransactionError(DataError):
    """Raised when a change bracket is opened twice or closed without being opened."""
