"""Pytest configuration and fixtures for Bandcamp import tests."""

import html
import json
import pytest
from unittest.mock import AsyncMock, Mock
from bcimport.dataclasses import ImportConfig
from bcimport.fetcher import PageResponse


def tralbum_page(blob, body=''):
    """Release page embedding ``blob`` as a TralbumData script."""
    return f'''
    <html>
    <head>
        <script type="text/javascript">
            var SiteData = {{"ui": true}};
        </script>
        <script type="text/javascript">
            var TralbumData = {json.dumps(blob)};
            var EmbedData = {{"layout": "standard"}};
        </script>
    </head>
    <body>{body}</body>
    </html>
    '''


def data_tralbum_page(blob, body=''):
    """Release page carrying ``blob`` in a data-tralbum script attribute."""
    return f'''
    <html>
    <head>
        <script src="/bundle.js" data-tralbum="{html.escape(json.dumps(blob))}"></script>
    </head>
    <body>{body}</body>
    </html>
    '''


@pytest.fixture
def config():
    """Default import configuration."""
    return ImportConfig()


@pytest.fixture
def sample_blob():
    """Representative TralbumData object."""
    return {
        'current': {
            'title': 'Night Drive',
            'artist': 'The Band',
            'about': 'Recorded live in one take.',
        },
        'artist': 'The Band (label page)',
        'art_id': 1234567890,
        'digital_price': 7.0,
        'tags': ['synthwave', 'electronic'],
        'trackinfo': [
            {'title': 'Intro', 'track_num': 1},
            {'title': None, 'track_num': 2},
            {'track_num': 3},
        ],
    }


@pytest.fixture
def sample_markup_html():
    """Release page without embedded data, matching Bandcamp's rendered markup."""
    return '''
    <html>
    <head>
        <meta property="og:title" content="Songs, by The Band">
        <meta property="og:image" content="https://f4.bcbits.com/img/a42_5.jpg">
    </head>
    <body>
        <div id="name-section">
            <h2 class="trackTitle">Songs</h2>
        </div>
        <ul class="tralbumCommands">
            <li class="buyItem digital">
                <h4 class="ft compound-button main-button">
                    <span class="buyItemDigital">
                        $7 USD
                    </span>
                </h4>
            </li>
        </ul>
        <div class="tralbumData tralbum-about">
            Songs written over one winter.
        </div>
        <div class="tralbumData tralbum-credits">released January 1, 2020</div>
        <table id="track_table" class="track_list">
            <tr class="track_row_view">
                <td class="title-col"><div class="title"><a href="/track/first"><span class="track-title">First</span></a></div></td>
            </tr>
            <tr class="track_row_view">
                <td class="title-col"><div class="title"><a href="/track/second"><span class="track-title"> Second </span></a></div></td>
            </tr>
            <tr class="track_row_view">
                <td class="title-col"><div class="title"><span class="track-title"></span></div></td>
            </tr>
        </table>
        <div class="tralbumData tralbum-tags tralbum-tags-nu">
            <a class="tag" href="https://bandcamp.com/tag/indie"> indie </a>
            <a class="tag" href="https://bandcamp.com/tag/folk">folk</a>
        </div>
    </body>
    </html>
    '''


@pytest.fixture
def sample_listing_html():
    """Storefront /music page with albums, a track and an off-site link."""
    return '''
    <html>
    <body>
        <ol id="music-grid" class="music-grid">
            <li class="music-grid-item square first-four"><a href="/album/night-drive"><p class="title">Night Drive</p></a></li>
            <li class="music-grid-item square"><a href="/track/single-song"><p class="title">Single Song</p></a></li>
            <li class="music-grid-item square"><a href="/album/second-record"><p class="title">Second Record</p></a></li>
            <li class="music-grid-item square"><a href="https://other.bandcamp.com/album/guest">Guest</a></li>
            <li class="music-grid-item square"><a>No link</a></li>
            <li class="music-grid-item square"><a href="/album/night-drive">Night Drive (again)</a></li>
        </ol>
        <a href="/album/outside-grid">Not in the grid</a>
    </body>
    </html>
    '''


@pytest.fixture
def make_response():
    """Factory for PageResponse objects."""
    def _make(status=200, text='', set_cookies=None, url='https://label.bandcamp.com/'):
        return PageResponse(url=url, status=status, text=text, set_cookies=list(set_cookies or []))
    return _make


@pytest.fixture
def mock_fetcher():
    """Fetcher double with awaitable get/post_form."""
    fetcher = Mock()
    fetcher.get = AsyncMock()
    fetcher.post_form = AsyncMock()
    fetcher.open = AsyncMock()
    fetcher.close = AsyncMock()
    return fetcher


@pytest.fixture
def build_tralbum_page():
    return tralbum_page


@pytest.fixture
def build_data_tralbum_page():
    return data_tralbum_page
