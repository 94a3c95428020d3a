"""Tests for catalog import orchestration."""

import pytest
from unittest.mock import AsyncMock, patch
from bcimport.core import CatalogImporter, import_catalog
from bcimport.dataclasses import ImportConfig
from bcimport.exceptions import AuthenticationError, FetchError

BASE_URL = 'https://yourlabel.bandcamp.com'
LISTING_HTML = '''
<ol>
    <li class="music-grid-item"><a href="/album/first">First</a></li>
    <li class="music-grid-item"><a href="/album/second">Second</a></li>
</ol>
'''


class TestCatalogImporter:
    """Test suite for CatalogImporter."""

    @pytest.fixture
    def pages(self, make_response, build_tralbum_page):
        """URL -> response map for a storefront with two releases."""
        return {
            f'{BASE_URL}/music': make_response(text=LISTING_HTML),
            f'{BASE_URL}/album/first': make_response(
                text=build_tralbum_page({'current': {'title': 'First', 'artist': 'The Band'}})
            ),
            f'{BASE_URL}/album/second': make_response(
                text='<meta property="og:title" content="Second, by The Band">'
            ),
        }

    @pytest.fixture
    def storefront(self, mock_fetcher, make_response, pages):
        """Fetcher double serving ``pages`` after a successful login."""
        mock_fetcher.post_form.return_value = make_response(set_cookies=['identity=abc; Path=/', 'js=1'])

        async def get(url, session_token=None):
            return pages[url]

        mock_fetcher.get.side_effect = get
        return mock_fetcher

    @pytest.mark.asyncio
    async def test_imports_releases_in_listing_order(self, storefront):
        async with CatalogImporter(ImportConfig(), fetcher=storefront) as importer:
            releases = await importer.import_catalog('me', 'pw', 'https://yourlabel.bandcamp.com')

        assert [release.title for release in releases] == ['First', 'Second']
        assert [release.artist for release in releases] == ['The Band', 'The Band']

    @pytest.mark.asyncio
    async def test_session_token_sent_with_every_request(self, storefront):
        """Test the merged cookie string is passed explicitly to each fetch."""
        async with CatalogImporter(fetcher=storefront) as importer:
            await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

        requested = [(call.args[0], call.args[1]) for call in storefront.get.await_args_list]
        assert requested == [
            (f'{BASE_URL}/music', 'identity=abc; js=1'),
            (f'{BASE_URL}/album/first', 'identity=abc; js=1'),
            (f'{BASE_URL}/album/second', 'identity=abc; js=1'),
        ]

    @pytest.mark.asyncio
    async def test_external_fetcher_is_not_closed(self, storefront):
        async with CatalogImporter(fetcher=storefront):
            pass

        storefront.open.assert_not_awaited()
        storefront.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_listing(self, storefront, pages, make_response):
        """Test a storefront without releases yields an empty list."""
        pages[f'{BASE_URL}/music'] = make_response(text='<html></html>')

        async with CatalogImporter(fetcher=storefront) as importer:
            releases = await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

        assert releases == []

    @pytest.mark.asyncio
    async def test_authentication_failure_aborts(self, storefront, make_response):
        storefront.post_form.return_value = make_response(status=200)

        async with CatalogImporter(fetcher=storefront) as importer:
            with pytest.raises(AuthenticationError):
                await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

        storefront.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_listing_failure_aborts(self, storefront, pages, make_response):
        pages[f'{BASE_URL}/music'] = make_response(status=500)

        async with CatalogImporter(fetcher=storefront) as importer:
            with pytest.raises(FetchError, match='/music'):
                await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

    @pytest.mark.asyncio
    async def test_release_failure_aborts_batch_by_default(self, storefront, pages, make_response):
        """Test the first failing release page stops the import."""
        pages[f'{BASE_URL}/album/first'] = make_response(status=404)

        async with CatalogImporter(fetcher=storefront) as importer:
            with pytest.raises(FetchError) as exc_info:
                await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

        assert str(exc_info.value) == f'Failed to load release page: {BASE_URL}/album/first (status: 404)'
        requested = [call.args[0] for call in storefront.get.await_args_list]
        assert f'{BASE_URL}/album/second' not in requested

    @pytest.mark.asyncio
    async def test_release_failure_isolated_when_enabled(self, storefront, pages, make_response):
        """Test isolation records the failure and continues with the next release."""
        pages[f'{BASE_URL}/album/first'] = make_response(status=404)
        config = ImportConfig(isolate_release_failures=True)

        async with CatalogImporter(config, fetcher=storefront) as importer:
            releases = await importer.import_catalog('me', 'pw', 'yourlabel.bandcamp.com')

        assert len(releases) == 2
        assert releases[0].error == f'Failed to load release page: {BASE_URL}/album/first (status: 404)'
        assert releases[0].title == 'Untitled'
        assert releases[1].error is None
        assert releases[1].title == 'Second'

    @pytest.mark.asyncio
    async def test_fetch_release_page(self, storefront):
        importer = CatalogImporter(fetcher=storefront)

        html = await importer.fetch_release_page(f'{BASE_URL}/album/second', 'a=1')

        assert 'og:title' in html


class TestImportCatalogFunction:
    """Test suite for the module-level import_catalog helper."""

    @pytest.mark.asyncio
    async def test_opens_and_closes_own_fetcher(self):
        config = ImportConfig(isolate_release_failures=True)

        with patch('bcimport.core.PageFetcher') as fetcher_class, \
                patch('bcimport.core.acquire_session', return_value='a=1') as acquire, \
                patch('bcimport.core.enumerate_release_urls', return_value=[]) as enumerate_urls:
            fetcher = fetcher_class.return_value
            fetcher.open = AsyncMock()
            fetcher.close = AsyncMock()

            releases = await import_catalog('me', 'pw', 'yourlabel.bandcamp.com', config)

        assert releases == []
        fetcher_class.assert_called_once_with(config)
        acquire.assert_awaited_once()
        enumerate_urls.assert_awaited_once()
        fetcher.open.assert_awaited_once()
        fetcher.close.assert_awaited_once()
