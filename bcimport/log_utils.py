"""Logging helpers for import diagnostics.

Every record emitted through a :class:`StageLogger` carries ``stage`` and
``url`` attributes so handlers can filter or format by import stage.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple

STAGE_AUTHENTICATE = "authenticate"
STAGE_ENUMERATE = "enumerate"
STAGE_FETCH = "fetch"
STAGE_PARSE = "parse"
STAGE_IMPORT = "import"


class StageLogger(logging.LoggerAdapter):
    """Logger adapter keyed by import stage and (optionally) page URL."""

    def __init__(self, logger: logging.Logger, stage: str, url: Optional[str] = None) -> None:
        super().__init__(logger, {'stage': stage, 'url': url})

    def bind(self, url: Optional[str] = None, stage: Optional[str] = None) -> 'StageLogger':
        """Return a logger for the same module with a different URL or stage."""
        return StageLogger(self.logger, stage or self.extra['stage'], url)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        extra.update(kwargs.get('extra') or {})
        kwargs['extra'] = extra

        prefix = f"[{extra['stage']}]"
        if extra.get('url'):
            prefix = f"{prefix} {extra['url']}"
        return f"{prefix} {msg}", kwargs


def get_stage_logger(name: str, stage: str) -> StageLogger:
    return StageLogger(logging.getLogger(name), stage)


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure console logging for the bcimport package."""
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger("bcimport")
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(handler)

    return root_logger
