"""Login handling for Bandcamp storefronts."""

from typing import Iterable, List

from .exceptions import AuthenticationError, FetchError
from .fetcher import PageFetcher
from .log_utils import STAGE_AUTHENTICATE, get_stage_logger
from .text_utils import strip_scheme

logger = get_stage_logger(__name__, STAGE_AUTHENTICATE)


def merge_cookies(set_cookie_headers: Iterable[str]) -> str:
    """Merge Set-Cookie directives into one Cookie header value.

    Cookie attributes (Path, Expires, Secure, ...) are discarded:
    ``["a=1; Path=/", "b=2; Secure"]`` becomes ``"a=1; b=2"``.
    """
    pairs = [header.split(';', 1)[0].strip() for header in set_cookie_headers]
    return '; '.join(pair for pair in pairs if pair)


def _cookie_names(session_token: str) -> List[str]:
    return [pair.split('=', 1)[0] for pair in session_token.split('; ') if pair]


async def acquire_session(fetcher: PageFetcher, identifier: str, secret: str, site_host: str,
                          login_path: str = "/login") -> str:
    """Log into a storefront and return the session token.

    Args:
        fetcher: Open page fetcher
        identifier: Account email or username
        secret: Account password
        site_host: Storefront host, with or without scheme
        login_path: Path of the login form handler

    Returns:
        Cookie string to send with later requests

    Raises:
        AuthenticationError: If the login response is not successful or sets
            no cookies
    """
    login_url = f"https://{strip_scheme(site_host)}{login_path}"
    log = logger.bind(url=login_url)
    log.info("Attempting login")

    try:
        response = await fetcher.post_form(login_url, {'username': identifier, 'password': secret})
    except FetchError as e:
        raise AuthenticationError(f"Bandcamp login request failed: {e}") from e

    if not response.ok:
        log.error(f"Login rejected with status {response.status}")
        raise AuthenticationError(f"Bandcamp login failed with status {response.status}")

    if not response.set_cookies:
        log.error("No Set-Cookie header returned")
        raise AuthenticationError("No Set-Cookie header returned. Login might have failed.")

    session_token = merge_cookies(response.set_cookies)
    if not session_token:
        raise AuthenticationError("Set-Cookie headers carried no cookies. Login might have failed.")

    log.info(f"Session established with {len(response.set_cookies)} cookie(s): "
             f"{', '.join(_cookie_names(session_token))}")
    return session_token
