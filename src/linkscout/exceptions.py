"""Exception types raised by linkscout."""

from typing import Optional

from linkscout.constants import RATE_LIMIT_STATUS_CODES


class LinkscoutError(Exception):
    """Base class for all linkscout errors."""


class FetchError(LinkscoutError):
    """A search API call or page fetch failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code in RATE_LIMIT_STATUS_CODES


class ParseError(LinkscoutError):
    """A URL could not be parsed into a hostname."""


class ExportError(LinkscoutError):
    """Data handed to an exporter has the wrong shape."""
