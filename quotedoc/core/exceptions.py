"""
Custom exceptions for quotedoc.

Exception Hierarchy:
    QuoteDocError (base)
    └── EmptyQuoteError - No usable line items; export aborted before any work

Image failures never surface as exceptions (they collapse to "no thumbnail"),
and reportlab failures propagate unchanged to the caller.
"""

from typing import Optional, Dict, Any


class QuoteDocError(Exception):
    """Base exception for all quotedoc errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class EmptyQuoteError(QuoteDocError):
    """
    Raised when the sanitized item list is empty.

    The message is meant to be shown to the operator as-is.
    """

    def __init__(self, message: str = "Add items to the quote before exporting.",
                 received: int = 0):
        super().__init__(message, {"received": received} if received else None)
        self.received = received
