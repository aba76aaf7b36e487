"""Domain errors raised by the rate lookup and pricing layers"""
from typing import Optional


class QuoteError(Exception):
    """Base class for errors that abort a quote calculation"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LookupNotFoundError(QuoteError):
    """A dataset file, country record, region or rate field is missing.

    Carries the missing artifact so callers can tell which table and key
    failed without parsing the message.
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        country: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.table = table
        self.country = country
        self.field = field


class RateTableError(QuoteError):
    """A dataset exists but does not have the expected shape"""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table
