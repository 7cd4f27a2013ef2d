"""Pydantic models for resumatch data structures."""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

ExperienceLevel = Literal["Junior", "Mid", "Senior", "Lead"]

_LEVEL_ALIASES: dict[str, str] = {
    "junior": "Junior",
    "entry": "Junior",
    "mid": "Mid",
    "intermediate": "Mid",
    "senior": "Senior",
    "lead": "Lead",
    "principal": "Lead",
    "staff": "Lead",
}


class StructuredProfile(BaseModel):
    """Structured keyword summary of a candidate's resume."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    skills: list[str] = Field(default_factory=list, description="Hard skills, tools and methodologies")
    tech_stack: list[str] = Field(
        default_factory=list, alias="techStack", description="Languages, frameworks and platforms"
    )
    experience_level: ExperienceLevel = Field(
        default="Mid", alias="experienceLevel", description="Seniority bucket"
    )
    roles: list[str] = Field(default_factory=list, description="Job titles, most specific first")
    summary: str = Field(default="", description="2-3 sentence summary of the candidate")
    keywords: list[str] = Field(default_factory=list, description="Other searchable terms")

    @field_validator("skills", "tech_stack", "roles", "keywords", mode="before")
    @classmethod
    def _coerce_string_list(cls, value: object) -> list[str]:
        # Models sometimes answer null, a comma string, or mixed types.
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple, set)):
            return []
        seen: dict[str, None] = {}
        for item in value:
            if item is None:
                continue
            text = str(item).strip()
            if text:
                seen.setdefault(text, None)
        return list(seen)

    @field_validator("experience_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: object) -> str:
        # Free text like "Senior (7 years)" maps to its bucket; unknown → Mid.
        if not isinstance(value, str):
            return "Mid"
        lowered = value.lower()
        for token, level in _LEVEL_ALIASES.items():
            if token in lowered:
                return level
        return "Mid"

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: object) -> str:
        return value.strip() if isinstance(value, str) else ""

    @property
    def search_keywords(self) -> list[str]:
        """Skills followed by tech stack, de-duplicated in order."""
        return list(dict.fromkeys([*self.skills, *self.tech_stack]))


class JobListing(BaseModel):
    """One job posting, normalized to a common schema regardless of source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Source-prefixed unique id, e.g. 'jsearch-abc123'")
    title: str = "Job Title"
    company: str = "Company"
    description: str = ""
    required_skills: list[str] = Field(default_factory=list, alias="requiredSkills")
    salary_range: str = Field(default="Not disclosed", alias="salaryRange")
    experience: str = "2+ years"
    location: str = ""
    employment_type: str = Field(default="Full-time", alias="type")
    url: str | None = None
    posted_date: str | None = Field(default=None, alias="postedDate")
    source: str = Field(default="", description="Search provider that produced this listing")


class ScoredMatch(BaseModel):
    """A listing paired with its relevance score and justifications."""

    model_config = ConfigDict(frozen=True)

    job: JobListing
    relevance_score: float = Field(ge=0, le=100)
    match_reasons: list[str] = Field(default_factory=list)
    degraded: bool = Field(default=False, description="True when the keyword fallback produced the score")

    @field_validator("relevance_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: object) -> float:
        return clamp_score(value)


def clamp_score(value: object) -> float:
    """Coerce *value* to a float in [0, 100]; anything unusable becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return min(100.0, max(0.0, number))


class Success(BaseModel, Generic[T]):
    """The primary, model-assisted path produced *value*."""

    model_config = ConfigDict(frozen=True)

    value: T
    degraded: Literal[False] = False


class Degraded(BaseModel, Generic[T]):
    """A deterministic fallback produced *value*; *reason* says why."""

    model_config = ConfigDict(frozen=True)

    value: T
    reason: str
    degraded: Literal[True] = True
