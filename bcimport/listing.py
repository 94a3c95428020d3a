"""Discovery of release pages on a storefront's music listing."""

from typing import List

from bs4 import BeautifulSoup

from .exceptions import FetchError
from .fetcher import PageFetcher
from .log_utils import STAGE_ENUMERATE, get_stage_logger

logger = get_stage_logger(__name__, STAGE_ENUMERATE)

RELEASE_LINK_SELECTOR = '.music-grid-item a'


def extract_release_urls(html: str, base_url: str, release_path_prefix: str = "/album/",
                         parser: str = "lxml") -> List[str]:
    """Collect absolute release URLs from listing page markup.

    Only grid links whose href starts with ``release_path_prefix`` are kept.
    Document order is preserved and duplicates are not removed.
    """
    soup = BeautifulSoup(html or "", parser)

    release_urls = []
    for link in soup.select(RELEASE_LINK_SELECTOR):
        href = link.get('href')
        if href and href.startswith(release_path_prefix):
            release_urls.append(base_url + href)
    return release_urls


async def enumerate_release_urls(fetcher: PageFetcher, base_url: str, session_token: str,
                                 listing_path: str = "/music", release_path_prefix: str = "/album/",
                                 parser: str = "lxml") -> List[str]:
    """Fetch the listing page and return every release page URL on it.

    Args:
        fetcher: Open page fetcher
        base_url: Storefront base URL, e.g. ``https://label.bandcamp.com``
        session_token: Cookie string from the login
        listing_path: Path of the catalog page
        release_path_prefix: Href prefix identifying release pages
        parser: BeautifulSoup tree builder

    Returns:
        Release URLs in listing order; empty when none are linked

    Raises:
        FetchError: If the listing page cannot be loaded
    """
    listing_url = base_url + listing_path
    log = logger.bind(url=listing_url)
    log.info("Fetching listing page")

    response = await fetcher.get(listing_url, session_token)
    if not response.ok:
        log.error(f"Listing page returned status {response.status}")
        raise FetchError(f"Failed to load {listing_url} (status: {response.status})",
                         url=listing_url, status=response.status)

    release_urls = extract_release_urls(response.text, base_url, release_path_prefix, parser)
    if release_urls:
        log.info(f"Found {len(release_urls)} album links")
    else:
        log.warning("No album links found")
    return release_urls
