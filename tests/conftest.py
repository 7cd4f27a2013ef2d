"""Shared pytest fixtures for resumatch tests."""

from unittest.mock import MagicMock

import pytest

from resumatch.llm import CompletionGateway
from resumatch.models import JobListing, StructuredProfile


@pytest.fixture()
def sample_profile() -> StructuredProfile:
    return StructuredProfile(
        skills=["React", "Node.js"],
        tech_stack=["TypeScript", "MongoDB"],
        experience_level="Senior",
        roles=["Full Stack Developer", "Frontend Engineer"],
        summary="Senior engineer with 6 years of React and Node.js experience.",
        keywords=["REST APIs", "microservices"],
    )


@pytest.fixture()
def sample_job() -> JobListing:
    return JobListing(
        id="jsearch-abc123",
        title="Senior React Developer",
        company="Flipkart",
        description="We need a React developer with 5+ years of experience building SPAs.",
        required_skills=["React"],
        salary_range="₹18,00,000 - ₹30,00,000",
        experience="5+ years",
        location="Bangalore, Karnataka",
        employment_type="Full-time",
        url="https://example.com/jobs/abc123",
        source="jsearch",
    )


@pytest.fixture()
def mock_gateway() -> MagicMock:
    return MagicMock(spec=CompletionGateway)
