"""Matching pipeline: profile → listings → scores → ranking."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, ConfigDict

from .evaluator_agent import DEFAULT_MAX_WORKERS, rank_matches, score_all_listings
from .llm import CompletionGateway
from .models import JobListing, ScoredMatch, StructuredProfile
from .profile_agent import extract_profile
from .search_provider import DEFAULT_LOCATION, SearchProvider, aggregate_jobs

logger = logging.getLogger(__name__)


class MatchReport(BaseModel):
    """Everything one matching request produced, handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    profile: StructuredProfile
    profile_degraded: bool = False
    listings: list[JobListing]
    matches: list[ScoredMatch]


def run_matching(
    source: StructuredProfile | str,
    gateway: CompletionGateway,
    providers: Sequence[SearchProvider],
    location: str = DEFAULT_LOCATION,
    keywords: Sequence[str] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    progress_callback: Callable[[int, int], None] | None = None,
) -> MatchReport:
    """
    Run one request end to end. Never raises for provider or source failures.

    Args:
        source: An already-extracted profile, or raw resume text.
        gateway: Completion gateway for this run.
        providers: Job sources in priority order.
        location: Target job location.
        keywords: Explicit search keywords. When omitted they come from the
            profile's skills and tech stack.
        max_workers: Upper bound on concurrent scoring calls.
        progress_callback: Optional callback(current, total) during scoring.

    Returns:
        The profile used, the aggregated listings, and the ranked matches.
    """
    profile_degraded = False

    if isinstance(source, StructuredProfile):
        profile = source
        listings = aggregate_jobs(providers, keywords if keywords is not None else profile.search_keywords, location)
    elif keywords is not None:
        # Extraction and aggregation are independent here; run them side by side.
        with ThreadPoolExecutor(max_workers=2) as executor:
            profile_future = executor.submit(extract_profile, gateway, source)
            listings_future = executor.submit(aggregate_jobs, providers, keywords, location)
            outcome = profile_future.result()
            listings = listings_future.result()
        profile, profile_degraded = outcome.value, outcome.degraded
    else:
        outcome = extract_profile(gateway, source)
        profile, profile_degraded = outcome.value, outcome.degraded
        listings = aggregate_jobs(providers, profile.search_keywords, location)

    logger.info("Matching %d listings for a %s profile", len(listings), profile.experience_level)
    scored = score_all_listings(
        gateway,
        profile,
        listings,
        progress_callback=progress_callback,
        max_workers=max_workers,
    )
    return MatchReport(
        profile=profile,
        profile_degraded=profile_degraded,
        listings=listings,
        matches=rank_matches(scored),
    )


def process_resume(
    source: StructuredProfile | str,
    gateway: CompletionGateway,
    providers: Sequence[SearchProvider],
    location: str = DEFAULT_LOCATION,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[ScoredMatch]:
    """Return the ranked matches for a profile or raw resume text."""
    return run_matching(source, gateway, providers, location=location, max_workers=max_workers).matches
