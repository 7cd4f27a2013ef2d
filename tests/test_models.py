"""Tests for resumatch.models — Pydantic model validation and coercion."""

import pytest
from pydantic import ValidationError

from resumatch.models import Degraded, JobListing, ScoredMatch, StructuredProfile, Success, clamp_score


class TestStructuredProfile:
    def test_defaults_are_empty_not_missing(self):
        p = StructuredProfile()
        assert p.skills == []
        assert p.tech_stack == []
        assert p.roles == []
        assert p.keywords == []
        assert p.summary == ""
        assert p.experience_level == "Mid"

    def test_accepts_camel_case_keys(self):
        p = StructuredProfile.model_validate(
            {"skills": ["Python"], "techStack": ["Django"], "experienceLevel": "Senior"}
        )
        assert p.tech_stack == ["Django"]
        assert p.experience_level == "Senior"

    def test_null_lists_become_empty(self):
        p = StructuredProfile.model_validate({"skills": None, "roles": None, "summary": None})
        assert p.skills == []
        assert p.roles == []
        assert p.summary == ""

    def test_comma_string_is_split(self):
        p = StructuredProfile.model_validate({"skills": "Python, Go ,  "})
        assert p.skills == ["Python", "Go"]

    def test_duplicates_removed_in_order(self):
        p = StructuredProfile(skills=["React", "Python", "React"])
        assert p.skills == ["React", "Python"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Junior", "Junior"),
            ("senior", "Senior"),
            ("Senior (7 years)", "Senior"),
            ("Mid-level", "Mid"),
            ("Principal Engineer", "Lead"),
            ("Guru", "Mid"),
            (5, "Mid"),
        ],
    )
    def test_experience_level_coercion(self, raw, expected):
        assert StructuredProfile.model_validate({"experienceLevel": raw}).experience_level == expected

    def test_search_keywords_combines_skills_and_stack(self):
        p = StructuredProfile(skills=["React", "AWS"], tech_stack=["AWS", "Docker"])
        assert p.search_keywords == ["React", "AWS", "Docker"]

    def test_frozen(self):
        p = StructuredProfile()
        with pytest.raises(ValidationError):
            p.summary = "changed"


class TestJobListing:
    def test_minimal_defaults(self):
        job = JobListing(id="adzuna-1")
        assert job.title == "Job Title"
        assert job.company == "Company"
        assert job.employment_type == "Full-time"
        assert job.salary_range == "Not disclosed"
        assert job.experience == "2+ years"
        assert job.required_skills == []
        assert job.url is None

    def test_alias_dump(self):
        job = JobListing(id="x", employment_type="Contract", posted_date="2026-01-01")
        dumped = job.model_dump(by_alias=True)
        assert dumped["type"] == "Contract"
        assert dumped["postedDate"] == "2026-01-01"

    def test_id_required(self):
        with pytest.raises(ValidationError):
            JobListing()


class TestScoredMatch:
    @pytest.mark.parametrize(("raw", "expected"), [(150, 100.0), (-5, 0.0), (72.5, 72.5), ("88", 88.0)])
    def test_score_is_clamped(self, sample_job, raw, expected):
        match = ScoredMatch(job=sample_job, relevance_score=raw)
        assert match.relevance_score == expected

    def test_defaults(self, sample_job):
        match = ScoredMatch(job=sample_job, relevance_score=10)
        assert match.match_reasons == []
        assert match.degraded is False


class TestClampScore:
    @pytest.mark.parametrize("raw", [None, "high", True, float("nan"), [1]])
    def test_unusable_values_become_zero(self, raw):
        assert clamp_score(raw) == 0.0

    def test_bounds(self):
        assert clamp_score(1e9) == 100.0
        assert clamp_score(-1e9) == 0.0


class TestOutcomes:
    def test_success_is_not_degraded(self):
        outcome = Success(value=StructuredProfile())
        assert outcome.degraded is False

    def test_degraded_carries_reason(self):
        outcome = Degraded(value=StructuredProfile(), reason="provider unavailable")
        assert outcome.degraded is True
        assert outcome.reason == "provider unavailable"
        assert isinstance(outcome.value, StructuredProfile)
