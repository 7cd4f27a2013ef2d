"""JSearch (OpenWeb Ninja) job-search provider.

The API has shipped several response shapes over time: a bare array, or
listings nested under ``data``, ``jobs``, ``results`` or ``job_results``,
with ``job_``-prefixed or plain field names. The adapter tolerates all of them.

API docs: https://www.openwebninja.com/api/jsearch
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import UnsupportedSource
from .models import JobListing
from .normalize import extract_experience, extract_skills, format_salary
from .search_provider import (
    DEFAULT_CONTAINER_KEYS,
    DEFAULT_LOCATION,
    build_query,
    fetch_json,
    find_listing_container,
    normalize_items,
)

logger = logging.getLogger(__name__)

_SEARCH_URL = "https://api.openwebninja.com/jsearch/search"
_COUNTRY = "in"


def _first(raw: dict, *keys: str) -> object:
    """Return the first truthy value among *keys*."""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def _text(value: object, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _description(raw: dict) -> str:
    direct = _first(raw, "job_description", "description")
    if direct:
        return _text(direct)
    highlights = raw.get("job_highlights")
    items = highlights.get("items") if isinstance(highlights, dict) else None
    if isinstance(items, list):
        return " ".join(str(item) for item in items if item)
    return ""


def _location(raw: dict, fallback: str) -> str:
    city = _text(_first(raw, "job_city", "city"))
    state = _text(_first(raw, "job_state", "state"))
    if city and state:
        return f"{city}, {state}"
    return city or state or fallback


class JSearchProvider:
    """Job-search provider backed by the JSearch API.

    Satisfies the :class:`~resumatch.search_provider.SearchProvider` protocol.
    """

    name: str = "jsearch"

    def __init__(self, api_key: str, timeout: float = 15.0) -> None:
        self._api_key = api_key
        self._timeout = timeout

    def search(self, keywords: Sequence[str], location: str = DEFAULT_LOCATION) -> list[JobListing]:
        if not self._api_key:
            logger.warning("JSearch API key not configured, skipping source")
            return []

        query = build_query(keywords)
        params = {
            "query": f"{query} jobs" if query else "developer jobs",
            "page": 1,
            "num_pages": 1,
            "country": _COUNTRY,
            "language": "en",
        }
        headers = {"x-api-key": self._api_key, "Accept": "*/*"}
        data = fetch_json(_SEARCH_URL, params, headers=headers, timeout=self._timeout, source="JSearch")
        if data is None:
            return []

        try:
            items = find_listing_container(data, DEFAULT_CONTAINER_KEYS)
        except UnsupportedSource as exc:
            logger.warning("JSearch response not understood: %s", exc)
            return []

        if not items:
            logger.warning("No jobs found in JSearch response")
            return []

        return normalize_items(self, items, location)

    def normalize_listing(self, raw: dict, index: int, location: str) -> JobListing:
        """Map one JSearch item onto ``JobListing``, tolerating either naming scheme."""
        description = _description(raw)
        job_id = _text(_first(raw, "job_id", "id"), str(index))
        return JobListing(
            id=f"jsearch-{job_id}",
            title=_text(_first(raw, "job_title", "title"), "Job Title"),
            company=_text(_first(raw, "employer_name", "company", "employer"), "Company"),
            description=description,
            required_skills=extract_skills(description),
            salary_range=format_salary(
                raw.get("job_min_salary"),
                raw.get("job_max_salary"),
                _text(raw.get("job_salary_currency"), "INR"),
            ),
            experience=extract_experience(description),
            location=_location(raw, location),
            employment_type=_text(_first(raw, "job_employment_type", "employment_type"), "Full-time"),
            url=_text(_first(raw, "job_apply_link", "apply_link", "url")) or None,
            posted_date=_text(_first(raw, "job_posted_at_datetime_utc", "posted_date")) or None,
            source=self.name,
        )
