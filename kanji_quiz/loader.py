"""Fetch a level's mappings.csv and build its Catalog."""
from __future__ import annotations

import logging
import time

import httpx

from kanji_quiz.catalog import Catalog
from kanji_quiz.config import Settings
from kanji_quiz.errors import DataUnavailable, LevelNotReady
from kanji_quiz.parsers.mappings_parser import parse_mappings_text

log = logging.getLogger("kanji_quiz.loader")


async def fetch_catalog(
    level: int,
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    origin: str = "",
) -> Catalog:
    """Load one level.

    Raises LevelNotReady before any request for unpublished levels, and
    DataUnavailable on transport errors or a non-2xx status.  No retry.
    `origin` is used when settings.data_origin is empty.
    """
    if not settings.is_ready(level):
        raise LevelNotReady(level)

    url = settings.mappings_url(level, origin)
    log.info("Fetching level %d mappings: %s", level, url)
    t0 = time.monotonic()
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.fetch_timeout) as own_client:
                resp = await own_client.get(url)
        else:
            resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        log.warning("Level %d fetch failed: HTTP %d", level, e.response.status_code)
        raise DataUnavailable(level, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        log.warning("Level %d fetch failed: %s", level, e)
        raise DataUnavailable(level, str(e) or type(e).__name__) from e

    records = parse_mappings_text(resp.content.decode("utf-8-sig", errors="replace"))
    catalog = Catalog.from_records(records, settings.level_base(level), level=level)
    log.info("Level %d: %d entries (%.2fs)", level, len(catalog), time.monotonic() - t0)
    return catalog
