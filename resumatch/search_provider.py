"""Search-provider interface, response-shape probing, and cross-source aggregation.

Every job-listing backend (JSearch, Adzuna, ...) implements the
``SearchProvider`` protocol so the rest of the pipeline can stay
source-agnostic.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import httpx

from .config import Settings
from .errors import UnsupportedSource
from .models import JobListing

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "India"
MAX_QUERY_KEYWORDS = 5
# The secondary source is only queried while the running total is below this.
SECONDARY_SOURCE_THRESHOLD = 20
MAX_LISTINGS = 50

# Probed in order; the first present, array-typed field wins.
DEFAULT_CONTAINER_KEYS: tuple[str, ...] = ("data", "jobs", "results", "job_results")

# Retry settings for transient source errors.
_MAX_RETRIES = 2
_BASE_DELAY = 1  # seconds
_RETRYABLE_STATUS = {429, 500, 502, 503}


def build_query(keywords: Sequence[str]) -> str:
    """Join at most the first five non-empty keywords into a search string."""
    cleaned = [k.strip() for k in keywords if k and k.strip()]
    return " ".join(cleaned[:MAX_QUERY_KEYWORDS])


def find_listing_container(payload: object, keys: Sequence[str] = DEFAULT_CONTAINER_KEYS) -> list:
    """Locate the list of raw listings inside a source response.

    A bare array is returned as-is. For an object, the first key in *keys*
    whose value is a list is used; an object without any such key holds
    zero listings.

    Raises:
        UnsupportedSource: *payload* is neither a JSON array nor a JSON object.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise UnsupportedSource(f"Unexpected response type: {type(payload).__name__}")
    for key in keys:
        candidate = payload.get(key)
        if isinstance(candidate, list):
            return candidate
    logger.debug("No listing container among %s; response keys: %s", list(keys), list(payload))
    return []


def fetch_json(
    url: str,
    params: dict,
    *,
    headers: dict | None = None,
    timeout: float = 15.0,
    source: str = "source",
) -> object | None:
    """GET *url* and decode JSON, retrying transient errors.

    Returns ``None`` when the source is unreachable, answers with a
    non-success status, or returns a body that is not JSON.
    """
    last_exc: Exception | None = None
    with httpx.Client(headers=headers, timeout=timeout) as client:
        for attempt in range(_MAX_RETRIES):
            try:
                resp = client.get(url, params=params)
            except httpx.TimeoutException as exc:
                logger.warning("%s timed out: %s", source, exc)
                return None
            except httpx.HTTPError as exc:
                last_exc = exc
                if attempt < _MAX_RETRIES - 1:
                    delay = _BASE_DELAY * (2**attempt)
                    logger.warning("%s network error: %s, retry in %ss", source, exc, delay)
                    time.sleep(delay)
                continue

            if resp.status_code == 200:
                try:
                    return resp.json()
                except ValueError:
                    logger.warning("%s returned a non-JSON body", source)
                    return None
            if resp.status_code in _RETRYABLE_STATUS and attempt < _MAX_RETRIES - 1:
                delay = _BASE_DELAY * (2**attempt)
                logger.warning("%s returned %s, retry in %ss", source, resp.status_code, delay)
                time.sleep(delay)
                continue
            logger.warning("%s returned %s, giving up: %s", source, resp.status_code, resp.text[:200])
            return None
    if last_exc:
        logger.error("%s failed after %d retries: %s", source, _MAX_RETRIES, last_exc)
    return None


@runtime_checkable
class SearchProvider(Protocol):
    """Pluggable interface for job-listing backends.

    Implementations must expose a ``name`` attribute, a ``search`` method
    that turns keywords + location into ``JobListing`` objects, and a
    ``normalize_listing`` adapter for one raw response item.
    """

    name: str
    """Short provider identifier, e.g. ``"jsearch"``."""

    def search(self, keywords: Sequence[str], location: str = DEFAULT_LOCATION) -> list[JobListing]:
        """Run a single search and return normalized listings.

        Must not raise: failures degrade to an empty list.
        """
        ...

    def normalize_listing(self, raw: dict, index: int, location: str) -> JobListing:
        """Map one raw response item onto the common listing schema."""
        ...


def normalize_items(provider: SearchProvider, items: Sequence[object], location: str) -> list[JobListing]:
    """Run *provider*'s adapter over each raw item, skipping items it cannot map.

    Non-object items are ignored; an item whose normalization raises is
    logged and dropped without affecting its siblings.
    """
    listings: list[JobListing] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        try:
            listings.append(provider.normalize_listing(item, index, location))
        except Exception:
            logger.exception("[%s] could not normalize listing at index %d", provider.name, index)
    return listings


def aggregate_jobs(
    providers: Sequence[SearchProvider],
    keywords: Sequence[str],
    location: str = DEFAULT_LOCATION,
    max_listings: int = MAX_LISTINGS,
) -> list[JobListing]:
    """Query sources in priority order, de-duplicate by id, and cap the result.

    The first provider is always queried; each later provider only while
    fewer than ``SECONDARY_SOURCE_THRESHOLD`` listings have been collected.
    Order of arrival is preserved; on an id collision the later listing
    replaces the earlier one in place.
    """
    collected: list[JobListing] = []
    for position, provider in enumerate(providers):
        if position > 0 and len(collected) >= SECONDARY_SOURCE_THRESHOLD:
            logger.info("Skipping %s: already have %d listings", provider.name, len(collected))
            continue
        try:
            batch = provider.search(keywords, location)
        except Exception:
            logger.exception("Provider '%s' failed", provider.name)
            continue
        logger.info("[%s] returned %d listings", provider.name, len(batch))
        collected.extend(batch)

    unique: dict[str, JobListing] = {}
    for job in collected:
        unique[job.id] = job

    if len(unique) < len(collected):
        logger.info("Removed %d duplicate listings", len(collected) - len(unique))
    return list(unique.values())[:max_listings]


def get_providers(settings: Settings) -> list[SearchProvider]:
    """Return the configured sources in priority order (JSearch first, then Adzuna).

    Sources without credentials are still returned; they log a warning and
    contribute nothing when searched.
    """
    # Lazy import so the protocol can be loaded without the concrete adapters.
    from .adzuna_provider import AdzunaProvider  # noqa: PLC0415
    from .jsearch_provider import JSearchProvider  # noqa: PLC0415

    return [
        JSearchProvider(settings.jsearch_api_key, timeout=settings.source_timeout),
        AdzunaProvider(settings.adzuna_app_id, settings.adzuna_app_key, timeout=settings.source_timeout),
    ]
