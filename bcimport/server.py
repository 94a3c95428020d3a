"""Web front end: an import form and the JSON import endpoint."""

import json
import logging
from typing import Callable, Optional

from aiohttp import web

from .core import CatalogImporter
from .dataclasses import ImportConfig
from .exceptions import BandcampImportError

logger = logging.getLogger(__name__)

IMPORT_ROUTE = '/api/import-bandcamp'
MISSING_FIELDS_ERROR = 'Missing required fields.'

CONFIG_KEY = web.AppKey('config', ImportConfig)
IMPORTER_FACTORY_KEY = web.AppKey('importer_factory', Callable)

FORM_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Bandcamp Import</title>
  <meta charset="UTF-8">
</head>
<body>
  <h1>Bandcamp Import</h1>
  <form id="import-form">
    <label>Email: <input type="email" name="email" required/></label><br/>
    <label>Password: <input type="password" name="password" required/></label><br/>
    <label>Bandcamp Subdomain (e.g. yourlabel.bandcamp.com):
      <input type="text" name="subdomain" placeholder="yourlabel.bandcamp.com" required/>
    </label><br/>
    <button type="submit">Import</button>
  </form>
  <div id="results"></div>

  <script>
    const form = document.getElementById('import-form');
    const resultsDiv = document.getElementById('results');

    form.addEventListener('submit', async (event) => {
      event.preventDefault();
      const formData = new FormData(form);
      resultsDiv.innerHTML = 'Importing...';

      try {
        const response = await fetch('/api/import-bandcamp', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({
            email: formData.get('email'),
            password: formData.get('password'),
            subdomain: formData.get('subdomain')
          })
        });
        const data = await response.json();

        if (!response.ok) {
          resultsDiv.innerHTML = `<p style="color: red;">Error: ${data.error || 'Unknown'}</p>`;
          return;
        }
        if (data.length === 0) {
          resultsDiv.innerHTML = '<p>No releases found or failed to import.</p>';
          return;
        }

        let html = '<h2>Imported Releases</h2><ul>';
        data.forEach((release) => {
          html += `
            <li style="margin: 20px 0;">
              ${release.coverArt ? '<img src="' + release.coverArt + '" alt="Cover Art" style="max-width:100px; display:block;" />' : ''}
              ${release.error ? '<p style="color: red;">' + release.error + '</p>' : ''}
              <strong>Title:</strong> ${release.title}<br/>
              <strong>Artist:</strong> ${release.artist}<br/>
              <strong>Price:</strong> ${release.price}<br/>
              <strong>Description:</strong> ${release.description || 'None'}<br/>
              <strong>Tags:</strong> ${(release.tags || []).join(', ')}<br/>
              <strong>Tracks:</strong>
              <ul>
                ${(release.tracks || []).map((track, i) => `<li>${i + 1}. ${track.title}</li>`).join('')}
              </ul>
            </li>`;
        });
        html += '</ul>';
        resultsDiv.innerHTML = html;
      } catch (err) {
        console.error(err);
        resultsDiv.innerHTML = '<p style="color: red;">Error importing releases.</p>';
      }
    });
  </script>
</body>
</html>
"""


async def index(request: web.Request) -> web.Response:
    del request
    return web.Response(text=FORM_PAGE, content_type='text/html')


async def import_bandcamp(request: web.Request) -> web.Response:
    """Run a catalog import for the posted credentials."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    if not isinstance(payload, dict):
        return web.json_response({'error': MISSING_FIELDS_ERROR}, status=400)

    fields = [payload.get(name) for name in ('email', 'password', 'subdomain')]
    if not all(isinstance(value, str) and value for value in fields):
        return web.json_response({'error': MISSING_FIELDS_ERROR}, status=400)
    email, password, subdomain = fields

    config = request.app[CONFIG_KEY]
    try:
        async with request.app[IMPORTER_FACTORY_KEY](config) as importer:
            releases = await importer.import_catalog(email, password, subdomain)
    except BandcampImportError as e:
        logger.error(f"Import error for {subdomain}: {e}")
        return web.json_response({'error': str(e)}, status=500)
    except Exception as e:
        logger.exception(f"Unexpected import error for {subdomain}")
        return web.json_response({'error': str(e) or 'Import failed.'}, status=500)

    return web.json_response([release.to_dict() for release in releases])


def create_app(config: Optional[ImportConfig] = None,
               importer_factory: Callable[[ImportConfig], CatalogImporter] = CatalogImporter) -> web.Application:
    """Build the web application.

    Args:
        config: Import configuration shared by every request
        importer_factory: Callable returning an async-context CatalogImporter
            for one request
    """
    app = web.Application()
    app[CONFIG_KEY] = config or ImportConfig()
    app[IMPORTER_FACTORY_KEY] = importer_factory
    app.router.add_get('/', index)
    app.router.add_post(IMPORT_ROUTE, import_bandcamp)
    return app


def run_server(config: Optional[ImportConfig] = None) -> None:
    config = config or ImportConfig()
    logger.info(f"Import server running on http://{config.server_host}:{config.server_port}")
    web.run_app(create_app(config), host=config.server_host, port=config.server_port, print=None)
