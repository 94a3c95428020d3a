"""Bandcamp catalog import modules."""

__version__ = "1.0.0"

# Core API
from .dataclasses import ImportConfig, ReleaseRecord, Track
from .core import CatalogImporter, import_catalog
from .parser import ReleaseParser, parse_release

# Storefront components (for advanced usage)
from .fetcher import PageFetcher, PageResponse
from .session_manager import acquire_session, merge_cookies
from .listing import enumerate_release_urls, extract_release_urls

from .exceptions import (
    BandcampImportError,
    AuthenticationError,
    FetchError,
    MalformedStructuredData,
)

__all__ = [
    # Version
    '__version__',

    # Core API
    'CatalogImporter',
    'import_catalog',
    'ReleaseParser',
    'parse_release',
    'ImportConfig',
    'ReleaseRecord',
    'Track',

    # Storefront components
    'PageFetcher',
    'PageResponse',
    'acquire_session',
    'merge_cookies',
    'enumerate_release_urls',
    'extract_release_urls',

    # Errors
    'BandcampImportError',
    'AuthenticationError',
    'FetchError',
    'MalformedStructuredData',
]
