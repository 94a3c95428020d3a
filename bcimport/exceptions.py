"""Exceptions raised while importing a Bandcamp catalog."""

from typing import Optional


class BandcampImportError(Exception):
    """Base exception for catalog imports."""
    pass


class AuthenticationError(BandcampImportError):
    """Login was rejected or did not establish a session."""
    pass


class FetchError(BandcampImportError):
    """A storefront page could not be loaded."""

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(message)


class MalformedStructuredData(BandcampImportError):
    """Embedded release data was found but could not be decoded."""
    pass
