"""HTTP access to Bandcamp storefront pages."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import aiohttp

from .dataclasses import ImportConfig
from .exceptions import FetchError


@dataclass(repr=True)
class PageResponse:
    """Status, body and cookie directives of one storefront response."""
    url: str
    status: int
    text: str = ""
    set_cookies: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PageFetcher:
    """Performs single-attempt GET and form POST requests.

    Cookies are never stored by the underlying client session; callers pass
    the session token explicitly with each request.
    """

    def __init__(self, config: Optional[ImportConfig] = None) -> None:
        self.config = config or ImportConfig()
        self.logger = logging.getLogger(__name__)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        del exc_type, exc_val, exc_tb
        await self.close()

    async def open(self) -> None:
        """Start the client session if it is not running yet."""
        if self._session is not None:
            return

        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            headers={'User-Agent': self.config.user_agent},
            cookie_jar=aiohttp.DummyCookieJar(),
        )
        self.logger.debug("HTTP client session started")

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
            self.logger.debug("HTTP client session closed")

    async def get(self, url: str, session_token: Optional[str] = None) -> PageResponse:
        """Fetch a page, sending the session token as the Cookie header.

        Args:
            url: Absolute page URL
            session_token: Merged cookie string from a login, if any

        Returns:
            PageResponse for the final (post-redirect) response

        Raises:
            FetchError: On connection errors or timeouts
        """
        headers = {'Cookie': session_token} if session_token else {}
        return await self._request('GET', url, headers=headers)

    async def post_form(self, url: str, form: Dict[str, str]) -> PageResponse:
        """Submit a url-encoded form."""
        return await self._request('POST', url, data=form)

    async def _request(self, method: str, url: str, **kwargs) -> PageResponse:
        if self._session is None:
            raise RuntimeError("Fetcher session not started. Use async context manager.")

        try:
            async with self._session.request(method, url, **kwargs) as response:
                text = await response.text(errors='replace')
                return PageResponse(
                    url=str(response.url),
                    status=response.status,
                    text=text,
                    set_cookies=response.headers.getall('Set-Cookie', []),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"{method} {url} failed: {e!r}")
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e
