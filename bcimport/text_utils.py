"""Text helpers shared by the storefront components."""

import re
from typing import Optional, Tuple

from bs4.element import Tag

BY_SEPARATOR = ", by "

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)


def strip_scheme(site_host: str) -> str:
    """Reduce a storefront address to its bare host.

    Args:
        site_host: Value such as ``https://label.bandcamp.com/`` or
            ``label.bandcamp.com``

    Returns:
        Host without scheme, surrounding whitespace or trailing slashes
    """
    return _SCHEME_RE.sub('', site_host.strip()).rstrip('/')


def site_base_url(site_host: str) -> str:
    """Canonical https base URL for a storefront host."""
    return f"https://{strip_scheme(site_host)}"


def split_title_artist(text: str) -> Tuple[str, Optional[str]]:
    """Split ``"Title, by Artist"`` into its parts.

    The artist is None when the separator is absent.
    """
    if BY_SEPARATOR not in text:
        return text, None
    parts = text.split(BY_SEPARATOR)
    return parts[0].strip(), parts[1].strip()


def element_text(element: Optional[Tag]) -> str:
    """Trimmed text content of an element, empty when the element is missing."""
    if element is None:
        return ""
    return element.get_text().strip()
