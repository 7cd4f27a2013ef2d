"""Profile Agent module - Turns raw resume text into a structured keyword profile."""

import logging

from pydantic import ValidationError

from .errors import MalformedCompletion, ProviderError, ProviderUnavailable
from .llm import CompletionGateway, parse_json_object
from .models import Degraded, StructuredProfile, Success

logger = logging.getLogger(__name__)

# Character budget for the resume prefix sent to the provider.
MAX_RESUME_CHARS = 4000

FALLBACK_SUMMARY = "Unable to parse resume. Please try again."

PROFILER_PROMPT = """Analyze the following resume text and extract structured information. Return ONLY valid JSON, no markdown, no code blocks.

Resume text:
{resume_text}

Extract and return a JSON object with this exact structure:
{{
  "skills": ["skill1", "skill2", ...],
  "techStack": ["tech1", "tech2", ...],
  "experienceLevel": "Junior/Mid/Senior/Lead",
  "roles": ["role1", "role2", ...],
  "summary": "Brief 2-3 sentence summary of the candidate's experience",
  "keywords": ["keyword1", "keyword2", ...]
}}

Focus on technical skills, programming languages, frameworks, tools, and technologies."""


def fallback_profile() -> StructuredProfile:
    """The profile returned whenever extraction fails: empty, Mid-level, with an explanation."""
    return StructuredProfile(experience_level="Mid", summary=FALLBACK_SUMMARY)


def build_profile_prompt(resume_text: str) -> str:
    return PROFILER_PROMPT.format(resume_text=resume_text[:MAX_RESUME_CHARS])


def extract_profile(
    gateway: CompletionGateway,
    resume_text: str,
) -> Success[StructuredProfile] | Degraded[StructuredProfile]:
    """
    Extract a structured profile from resume text. Never raises.

    Args:
        gateway: Completion gateway for the current run.
        resume_text: Raw text extracted from the resume.

    Returns:
        ``Success`` with the parsed profile, or ``Degraded`` carrying the
        fallback profile and the reason extraction failed.
    """
    try:
        content = gateway.complete(build_profile_prompt(resume_text))
    except ProviderUnavailable as exc:
        logger.warning("Profile extraction skipped: %s", exc)
        return Degraded(value=fallback_profile(), reason=f"provider unavailable: {exc}")
    except ProviderError as exc:
        logger.warning("Profile extraction failed: %s", exc)
        return Degraded(value=fallback_profile(), reason=f"provider error: {exc}")

    try:
        data = parse_json_object(content)
        profile = StructuredProfile.model_validate(data)
    except (MalformedCompletion, ValidationError) as exc:
        logger.warning("Failed to parse profile response: %s", exc)
        logger.debug("Response was: %s", content[:500])
        return Degraded(value=fallback_profile(), reason=f"malformed completion: {exc}")

    return Success(value=profile)
