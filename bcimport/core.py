"""Catalog import orchestration.

Sequences login, listing discovery and per-release parsing for one storefront.
Release pages are fetched strictly one after another in listing order.
"""

import logging
from typing import List, Optional

from .dataclasses import ImportConfig, ReleaseRecord
from .exceptions import FetchError
from .fetcher import PageFetcher
from .listing import enumerate_release_urls
from .log_utils import STAGE_FETCH, STAGE_IMPORT, StageLogger
from .parser import ReleaseParser
from .session_manager import acquire_session
from .text_utils import site_base_url


class CatalogImporter:
    """Imports every release of a Bandcamp storefront."""

    def __init__(self, config: Optional[ImportConfig] = None, fetcher: Optional[PageFetcher] = None) -> None:
        self.config = config or ImportConfig()
        self.logger = StageLogger(logging.getLogger(__name__), STAGE_IMPORT)

        # A fetcher passed in is owned (opened and closed) by the caller
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or PageFetcher(self.config)
        self.parser = ReleaseParser(self.config)

    async def __aenter__(self):
        if self._owns_fetcher:
            await self.fetcher.open()
        return self

    async def __aexit__(self, _exc_type, _exc_val, _exc_tb):
        if self._owns_fetcher:
            await self.fetcher.close()

    async def import_catalog(self, identifier: str, secret: str, site_host: str) -> List[ReleaseRecord]:
        """Log in and parse every release linked from the storefront listing.

        Args:
            identifier: Account email or username
            secret: Account password
            site_host: Storefront host, e.g. ``yourlabel.bandcamp.com``

        Returns:
            One ReleaseRecord per listed release, in listing order

        Raises:
            AuthenticationError: If login fails
            FetchError: If the listing fails, or a release page fails while
                release isolation is disabled
        """
        session_token = await acquire_session(
            self.fetcher, identifier, secret, site_host, self.config.login_path
        )
        base_url = site_base_url(site_host)

        release_urls = await enumerate_release_urls(
            self.fetcher,
            base_url,
            session_token,
            listing_path=self.config.listing_path,
            release_path_prefix=self.config.release_path_prefix,
            parser=self.config.html_parser,
        )

        releases = []
        for i, url in enumerate(release_urls, 1):
            self.logger.info(f"[{i}/{len(release_urls)}] Importing {url}")
            try:
                html = await self.fetch_release_page(url, session_token)
            except FetchError as e:
                if not self.config.isolate_release_failures:
                    raise
                self.logger.bind(url=url).warning(f"Skipping release: {e}")
                releases.append(ReleaseRecord.failed(str(e)))
                continue

            releases.append(self.parser.parse(html, url))

        failed_count = sum(1 for release in releases if release.error)
        self.logger.info(f"Imported {len(releases) - failed_count} release(s)"
                         + (f", {failed_count} failed" if failed_count else ""))
        return releases

    async def fetch_release_page(self, url: str, session_token: str) -> str:
        """Fetch the markup of one release page.

        Raises:
            FetchError: If the page cannot be loaded
        """
        log = self.logger.bind(url=url, stage=STAGE_FETCH)
        log.debug("Fetching release page")

        response = await self.fetcher.get(url, session_token)
        if not response.ok:
            log.error(f"Release page returned status {response.status}")
            raise FetchError(f"Failed to load release page: {url} (status: {response.status})",
                             url=url, status=response.status)
        return response.text


async def import_catalog(identifier: str, secret: str, site_host: str,
                         config: Optional[ImportConfig] = None) -> List[ReleaseRecord]:
    """Run one catalog import with a fresh HTTP session."""
    async with CatalogImporter(config) as importer:
        return await importer.import_catalog(identifier, secret, site_host)
