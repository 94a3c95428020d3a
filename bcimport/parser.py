"""Release page metadata extraction.

A release page is parsed along one of two paths:

Structured path:
    The page embeds a ``TralbumData`` object (in a ``var TralbumData = {...};``
    script or a ``data-tralbum`` script attribute). Fields are read from it,
    with the rendered markup filling in a missing description or artist.

Markup path:
    No embedded object could be decoded. Every field is scraped from the
    rendered HTML (Open Graph metadata, buy box, tag list, track table).

Each field is resolved by a chain of small extraction steps tried in order;
the first step returning a non-empty value wins, otherwise the field keeps its
default. Missing data never raises.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup

from .dataclasses import (
    NO_PRICE,
    UNKNOWN_ARTIST,
    UNTITLED,
    ImportConfig,
    ReleaseRecord,
    Track,
    TralbumData,
)
from .embedded_data import TRALBUM_VARIABLE, decode_object, find_assigned_object
from .exceptions import MalformedStructuredData
from .log_utils import STAGE_PARSE, StageLogger
from .text_utils import BY_SEPARATOR, element_text, split_title_artist

T = TypeVar('T')

ABOUT_SELECTOR = '.tralbumData.tralbum-about'
CREDITS_SELECTOR = '.tralbumData.tralbum-credits'
ALBUM_TITLE_SELECTOR = '.albumTitle'
ALBUM_TITLE_ARTIST_SELECTOR = '.albumTitle .artist'
OG_TITLE_SELECTOR = 'meta[property="og:title"]'
OG_IMAGE_SELECTOR = 'meta[property="og:image"]'
HEADING_SELECTOR = 'h2.trackTitle'
PRICE_SELECTOR = '.buyItem .buyItemNyp, .buyItem .buyItemDigital'
TAG_SELECTOR = '.tralbum-tags a'
TRACK_TITLE_SELECTOR = '#track_table .track-title'


class PageContext(NamedTuple):
    """Inputs shared by every extraction step for one page."""
    soup: BeautifulSoup
    blob: Optional[TralbumData]
    config: ImportConfig


Step = Callable[[PageContext], Optional[T]]


def _first_of(steps: Sequence[Step], context: PageContext, default: T) -> T:
    """Return the first non-empty value produced by ``steps``."""
    for step in steps:
        value = step(context)
        if value:
            return value
    return default


def _text(value: Any) -> Optional[str]:
    if not value:
        return None
    return value if isinstance(value, str) else str(value)


def format_price(value: Any) -> str:
    """Render a price as a string; whole floats drop their decimal part."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# Markup steps

def description_from_markup(context: PageContext) -> Optional[str]:
    """Text of the about element if present (even empty), else the credits element."""
    element = context.soup.select_one(ABOUT_SELECTOR)
    if element is None:
        element = context.soup.select_one(CREDITS_SELECTOR)
    return element_text(element) if element is not None else None


def artist_from_album_title(context: PageContext) -> Optional[str]:
    """Artist after ``", by "`` in the album title, or its nested artist element."""
    album_title = element_text(context.soup.select_one(ALBUM_TITLE_SELECTOR))
    if BY_SEPARATOR in album_title:
        _, artist = split_title_artist(album_title)
        if artist:
            return artist

    artist_element = context.soup.select_one(ALBUM_TITLE_ARTIST_SELECTOR)
    if artist_element is not None:
        return element_text(artist_element) or None
    return None


def heading_text(context: PageContext) -> str:
    """Social preview title, else the page heading, else the title sentinel."""
    og_title = context.soup.select_one(OG_TITLE_SELECTOR)
    if og_title is not None and og_title.get('content'):
        return og_title['content'].strip()
    return element_text(context.soup.select_one(HEADING_SELECTOR)) or UNTITLED


def title_from_heading(context: PageContext) -> Optional[str]:
    title, _ = split_title_artist(heading_text(context))
    return title or None


def artist_from_heading(context: PageContext) -> Optional[str]:
    _, artist = split_title_artist(heading_text(context))
    return artist or None


def cover_from_og_image(context: PageContext) -> Optional[str]:
    element = context.soup.select_one(OG_IMAGE_SELECTOR)
    return element.get('content') if element is not None else None


def price_from_buy_item(context: PageContext) -> Optional[str]:
    element = context.soup.select_one(PRICE_SELECTOR)
    return element_text(element) if element is not None else None


def tags_from_markup(context: PageContext) -> List[str]:
    return [element_text(tag) for tag in context.soup.select(TAG_SELECTOR)]


def tracks_from_markup(context: PageContext) -> List[Track]:
    return [Track(title=element_text(cell)) for cell in context.soup.select(TRACK_TITLE_SELECTOR)]


# Structured data steps

def title_from_blob(context: PageContext) -> Optional[str]:
    return _text(context.blob.current_title)


def artist_from_blob(context: PageContext) -> Optional[str]:
    """Release artist, else the page-level artist. The sentinel counts as missing."""
    artist = _text(context.blob.current_artist) or _text(context.blob.artist)
    return None if artist == UNKNOWN_ARTIST else artist


def cover_from_art_id(context: PageContext) -> Optional[str]:
    if not context.blob.art_id:
        return None
    return context.config.cover_art_url(context.blob.art_id)


def price_from_blob(context: PageContext) -> Optional[str]:
    if not context.blob.has_digital_price:
        return None
    return format_price(context.blob.digital_price)


def tags_from_blob(context: PageContext) -> List[str]:
    tags = []
    for tag in context.blob.tags:
        if isinstance(tag, Mapping):
            tag = tag.get('name')
        if tag is not None:
            tags.append(tag if isinstance(tag, str) else str(tag))
    return tags


def description_from_blob(context: PageContext) -> Optional[str]:
    return _text(context.blob.current_about)


def tracks_from_blob(context: PageContext) -> List[Track]:
    tracks = []
    for number, entry in enumerate(context.blob.trackinfo, 1):
        title = _text(entry.get('title')) if isinstance(entry, Mapping) else None
        tracks.append(Track(title=title or f"Track {number}"))
    return tracks


STRUCTURED_FIELDS = {
    'title': (title_from_blob,),
    'artist': (artist_from_blob, artist_from_album_title),
    'cover_art': (cover_from_art_id,),
    'price': (price_from_blob,),
    'tags': (tags_from_blob,),
    'description': (description_from_blob, description_from_markup),
    'tracks': (tracks_from_blob,),
}

MARKUP_FIELDS = {
    'title': (title_from_heading,),
    'artist': (artist_from_heading, artist_from_album_title),
    'cover_art': (cover_from_og_image,),
    'price': (price_from_buy_item,),
    'tags': (tags_from_markup,),
    'description': (description_from_markup,),
    'tracks': (tracks_from_markup,),
}

FIELD_DEFAULTS = {
    'title': UNTITLED,
    'artist': UNKNOWN_ARTIST,
    'cover_art': "",
    'price': NO_PRICE,
    'description': "",
}


class ReleaseParser:
    """Turns release page markup into a ReleaseRecord."""

    def __init__(self, config: Optional[ImportConfig] = None) -> None:
        self.config = config or ImportConfig()
        self.logger = StageLogger(logging.getLogger(__name__), STAGE_PARSE)

    def parse(self, html: Optional[str], url: Optional[str] = None) -> ReleaseRecord:
        """Extract release metadata from a page.

        Args:
            html: Raw page markup
            url: Page URL, used for log context only

        Returns:
            ReleaseRecord with sentinels for anything that could not be found
        """
        log = self.logger.bind(url=url)
        soup = BeautifulSoup(html or "", self.config.html_parser)

        blob = self.find_structured_data(soup, log)
        context = PageContext(soup=soup, blob=blob, config=self.config)

        if blob is not None:
            log.debug("Using embedded TralbumData")
            fields = STRUCTURED_FIELDS
        else:
            log.debug("No embedded TralbumData found, using markup fallback")
            fields = MARKUP_FIELDS

        record = ReleaseRecord(
            title=_first_of(fields['title'], context, FIELD_DEFAULTS['title']),
            artist=_first_of(fields['artist'], context, FIELD_DEFAULTS['artist']),
            cover_art=_first_of(fields['cover_art'], context, FIELD_DEFAULTS['cover_art']),
            price=_first_of(fields['price'], context, FIELD_DEFAULTS['price']),
            tags=_first_of(fields['tags'], context, []),
            description=_first_of(fields['description'], context, FIELD_DEFAULTS['description']),
            tracks=_first_of(fields['tracks'], context, []),
        )

        log.info(f"Parsed \"{record.title}\" by \"{record.artist}\": price={record.price}, "
                 f"{len(record.tags)} tags, {len(record.tracks)} tracks, "
                 f"description length {len(record.description)}")
        return record

    def find_structured_data(self, soup: BeautifulSoup, log: Optional[StageLogger] = None) -> Optional[TralbumData]:
        """Decode the embedded TralbumData object.

        Every script is examined in document order and the last candidate that
        decodes successfully wins. Undecodable candidates are logged and skipped.
        """
        log = log or self.logger
        blob = None

        for index, script in enumerate(soup.find_all('script')):
            for source, text in self._script_candidates(script):
                try:
                    data = decode_object(text)
                except MalformedStructuredData as e:
                    log.warning(f"Skipping TralbumData in script {index} ({source}): {e}")
                    continue
                log.debug(f"Decoded TralbumData from script {index} ({source})")
                blob = TralbumData.from_dict(data)

        return blob

    @staticmethod
    def _script_candidates(script) -> List[tuple]:
        candidates = []

        attribute = script.get('data-tralbum')
        if attribute:
            candidates.append(('data-tralbum attribute', attribute))

        assigned = find_assigned_object(script.string or "", TRALBUM_VARIABLE)
        if assigned is not None:
            candidates.append(('script body', assigned))

        return candidates


def parse_release(html: Optional[str], config: Optional[ImportConfig] = None,
                  url: Optional[str] = None) -> ReleaseRecord:
    """Parse one release page. See :class:`ReleaseParser`."""
    return ReleaseParser(config).parse(html, url)
