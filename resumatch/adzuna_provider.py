"""Adzuna job-search provider (India).

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import UnsupportedSource
from .models import JobListing
from .normalize import extract_experience, extract_skills, format_salary
from .search_provider import DEFAULT_LOCATION, build_query, fetch_json, find_listing_container, normalize_items

logger = logging.getLogger(__name__)

COUNTRY = "in"
BASE_URL = f"https://api.adzuna.com/v1/api/jobs/{COUNTRY}/search"
RESULTS_PER_PAGE = 50


def _display_name(value: object) -> str:
    if isinstance(value, dict):
        name = value.get("display_name")
        return str(name).strip() if name else ""
    return ""


class AdzunaProvider:
    """Job-search provider backed by the Adzuna REST API.

    Satisfies the :class:`~resumatch.search_provider.SearchProvider` protocol.
    """

    name: str = "adzuna"

    def __init__(self, app_id: str, app_key: str, timeout: float = 15.0) -> None:
        self.app_id = app_id
        self.app_key = app_key
        self._timeout = timeout

    def search(self, keywords: Sequence[str], location: str = DEFAULT_LOCATION) -> list[JobListing]:
        if not self.app_id or not self.app_key:
            logger.warning("Adzuna API credentials not configured, skipping source")
            return []

        params: dict = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": RESULTS_PER_PAGE,
            "what": build_query(keywords),
            "where": location,
            "content-type": "application/json",
        }
        data = fetch_json(f"{BASE_URL}/1", params, timeout=self._timeout, source="Adzuna")
        if data is None:
            return []

        try:
            hits = find_listing_container(data, ("results",))
        except UnsupportedSource as exc:
            logger.warning("Adzuna response not understood: %s", exc)
            return []

        return normalize_items(self, hits, location)

    def normalize_listing(self, raw: dict, index: int, location: str) -> JobListing:
        description = str(raw.get("description") or "")
        raw_id = raw.get("id")
        return JobListing(
            id=f"adzuna-{raw_id if raw_id not in (None, '') else index}",
            title=str(raw.get("title") or "Job Title"),
            company=_display_name(raw.get("company")) or "Company",
            description=description,
            required_skills=extract_skills(description),
            salary_range=format_salary(raw.get("salary_min"), raw.get("salary_max")),
            experience=extract_experience(description),
            location=_display_name(raw.get("location")) or location,
            employment_type=str(raw.get("contract_type") or "Full-time"),
            url=str(raw["redirect_url"]) if raw.get("redirect_url") else None,
            posted_date=str(raw["created"]) if raw.get("created") else None,
            source=self.name,
        )
