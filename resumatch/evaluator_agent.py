"""Evaluator Agent module - Scores job listings against a profile and ranks them."""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from .errors import MalformedCompletion, ProviderError, ProviderUnavailable
from .llm import CompletionGateway, parse_json_object
from .models import Degraded, JobListing, ScoredMatch, StructuredProfile, Success, clamp_score

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0
FALLBACK_REASON = "Keyword-based match"
DEFAULT_MAX_WORKERS = 10

SCORER_PROMPT = """You are a job matching expert. Rate how well this candidate matches the job on a scale of 0-100.

Candidate Profile:
{candidate}

Job Description:
{job}

Return ONLY a JSON object with this exact structure:
{{
  "score": 85,
  "reasons": ["reason1", "reason2", "reason3"]
}}

The score should reflect:
- Skill overlap (40%)
- Experience level match (20%)
- Role alignment (20%)
- Tech stack compatibility (20%)

Return ONLY the JSON, no markdown, no explanation."""


def _candidate_block(profile: StructuredProfile) -> str:
    return (
        f"Skills: {', '.join(profile.skills)}\n"
        f"Tech Stack: {', '.join(profile.tech_stack)}\n"
        f"Experience Level: {profile.experience_level}\n"
        f"Roles: {', '.join(profile.roles)}\n"
        f"Summary: {profile.summary}"
    )


def _job_block(job: JobListing) -> str:
    return (
        f"Title: {job.title}\n"
        f"Company: {job.company}\n"
        f"Description: {job.description}\n"
        f"Required Skills: {', '.join(job.required_skills)}\n"
        f"Experience: {job.experience}"
    )


def build_score_prompt(profile: StructuredProfile, job: JobListing) -> str:
    return SCORER_PROMPT.format(candidate=_candidate_block(profile), job=_job_block(job))


def keyword_score(profile: StructuredProfile, job: JobListing) -> float:
    """Deterministic overlap score used when the model path fails.

    Counts profile terms (skills, tech stack, roles, keywords) that occur in
    the listing's title, description and required skills, relative to the
    number of skills plus tech-stack entries. A profile with no skills and
    no tech stack scores ``NEUTRAL_SCORE``.
    """
    total = len(profile.skills) + len(profile.tech_stack)
    if total == 0:
        return NEUTRAL_SCORE

    job_text = f"{job.title} {job.description} {' '.join(job.required_skills)}".lower()
    terms = [*profile.skills, *profile.tech_stack, *profile.roles, *profile.keywords]
    matches = sum(1 for term in terms if term.strip() and term.strip().lower() in job_text)
    return clamp_score(100 * matches / total)


def _fallback_match(profile: StructuredProfile, job: JobListing) -> ScoredMatch:
    return ScoredMatch(
        job=job,
        relevance_score=keyword_score(profile, job),
        match_reasons=[FALLBACK_REASON],
        degraded=True,
    )


def _reasons(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def score_listing(
    gateway: CompletionGateway,
    profile: StructuredProfile,
    job: JobListing,
) -> Success[ScoredMatch] | Degraded[ScoredMatch]:
    """
    Score how well *job* fits *profile*. Never raises.

    Args:
        gateway: Completion gateway for the current run.
        profile: Candidate's structured profile.
        job: Listing to score.

    Returns:
        ``Success`` with the model's clamped score and reasons, or
        ``Degraded`` with the keyword-overlap fallback for this listing.
    """
    try:
        content = gateway.complete(build_score_prompt(profile, job))
    except (ProviderUnavailable, ProviderError) as exc:
        logger.warning("Error scoring job %s: %s", job.id, exc)
        return Degraded(value=_fallback_match(profile, job), reason=str(exc))

    try:
        data = parse_json_object(content)
    except MalformedCompletion as exc:
        logger.warning("Unparseable score for job %s: %s", job.id, exc)
        return Degraded(value=_fallback_match(profile, job), reason=str(exc))

    match = ScoredMatch(
        job=job,
        relevance_score=clamp_score(data.get("score") or 0),
        match_reasons=_reasons(data.get("reasons")),
    )
    return Success(value=match)


def score_all_listings(
    gateway: CompletionGateway,
    profile: StructuredProfile,
    jobs: Sequence[JobListing],
    progress_callback: Callable[[int, int], None] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[ScoredMatch]:
    """
    Score every listing in parallel with a bounded worker pool.

    Args:
        gateway: Completion gateway for the current run.
        profile: Candidate's structured profile.
        jobs: Listings in aggregation order.
        progress_callback: Optional callback(current, total) for progress updates.
        max_workers: Upper bound on concurrent scoring calls.

    Returns:
        Scored matches in the same order as *jobs* (not ranked).
    """
    if not jobs:
        return []

    results: list[ScoredMatch | None] = [None] * len(jobs)
    counter_lock = threading.Lock()
    completed_count = 0
    degraded_count = 0

    def _score_one(index: int) -> None:
        nonlocal completed_count, degraded_count
        outcome = score_listing(gateway, profile, jobs[index])
        results[index] = outcome.value
        with counter_lock:
            completed_count += 1
            if outcome.degraded:
                degraded_count += 1
            current = completed_count
        if progress_callback:
            progress_callback(current, len(jobs))

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(jobs)))) as executor:
        futures = [executor.submit(_score_one, index) for index in range(len(jobs))]
        for future in as_completed(futures):
            future.result()

    if degraded_count:
        logger.info("Scored %d listings (%d by keyword fallback)", len(jobs), degraded_count)
    return [match for match in results if match is not None]


def rank_matches(matches: Sequence[ScoredMatch]) -> list[ScoredMatch]:
    """Sort by relevance score, highest first; equal scores keep their input order."""
    return sorted(matches, key=lambda m: m.relevance_score, reverse=True)


def filter_good_matches(matches: Sequence[ScoredMatch], min_score: float = 0) -> list[ScoredMatch]:
    """Keep matches scoring at least *min_score*, preserving order."""
    return [m for m in matches if m.relevance_score >= min_score]
