"""Tests for the resumatch CLI (main.py).

Mocks the gateway, job sources and pipeline so no network calls happen.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from resumatch.main import _score_markup, configure_logging, display_results, main
from resumatch.models import JobListing, ScoredMatch, StructuredProfile
from resumatch.pipeline import MatchReport

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_match(job_id: str, score: float, degraded: bool = False) -> ScoredMatch:
    return ScoredMatch(
        job=JobListing(id=job_id, title=f"Role {job_id}", company="Co", url=f"https://example.com/{job_id}"),
        relevance_score=score,
        match_reasons=["Skill overlap"],
        degraded=degraded,
    )


def _make_report(matches: list[ScoredMatch], degraded: bool = False) -> MatchReport:
    return MatchReport(
        profile=StructuredProfile(skills=["Python"]),
        profile_degraded=degraded,
        listings=[m.job for m in matches],
        matches=matches,
    )


_PATCH_PREFIX = "resumatch.main"


class TestScoreMarkup:
    def test_bands(self):
        assert _score_markup(_make_match("a", 85)) == "[bold green]85[/bold green]"
        assert _score_markup(_make_match("a", 65)) == "[yellow]65[/yellow]"
        assert _score_markup(_make_match("a", 20)) == "[red]20[/red]"

    def test_degraded_is_flagged(self):
        assert _score_markup(_make_match("a", 50, degraded=True)) == "[red]50*[/red]"


class TestConfigureLogging:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("BASIC_FORMAT", logging.INFO),
            ("VERBOSE", logging.INFO),
        ],
    )
    @patch(f"{_PATCH_PREFIX}.logging.basicConfig")
    def test_level_resolution(self, mock_basic: MagicMock, level: str, expected: int):
        configure_logging(level)
        assert mock_basic.call_args.kwargs["level"] == expected


class TestDisplayResults:
    @patch(f"{_PATCH_PREFIX}.console")
    def test_nothing_above_threshold(self, mock_console: MagicMock):
        display_results([_make_match("a", 30)], min_score=60, top=10)

        printed = mock_console.print.call_args[0][0]
        assert "No jobs found" in printed

    @patch(f"{_PATCH_PREFIX}.console")
    def test_prints_details_for_top_three(self, mock_console: MagicMock):
        matches = [_make_match(str(i), 90 - i) for i in range(5)]

        display_results(matches, min_score=0, top=10)

        lines = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
        assert sum("Score:" in line for line in lines) == 3


class TestMain:
    @patch(f"{_PATCH_PREFIX}.display_results")
    @patch(f"{_PATCH_PREFIX}.run_matching")
    @patch(f"{_PATCH_PREFIX}.get_providers", return_value=[])
    @patch(f"{_PATCH_PREFIX}.create_gateway")
    @patch(f"{_PATCH_PREFIX}.load_dotenv")
    def test_happy_path(
        self,
        _mock_dotenv: MagicMock,
        mock_gateway: MagicMock,
        _mock_providers: MagicMock,
        mock_run: MagicMock,
        mock_display: MagicMock,
        tmp_path: Path,
    ) -> None:
        cv = tmp_path / "resume.txt"
        cv.write_text("Python developer", encoding="utf-8")
        matches = [_make_match("a", 80)]
        mock_run.return_value = _make_report(matches)

        result = main([str(cv), "--location", "Pune", "--min-score", "60", "--top", "5"])

        assert result == 0
        args, kwargs = mock_run.call_args
        assert args[0] == "Python developer"
        assert args[1] is mock_gateway.return_value
        assert kwargs["location"] == "Pune"
        mock_display.assert_called_once_with(matches, 60.0, 5)

    @patch(f"{_PATCH_PREFIX}.run_matching")
    @patch(f"{_PATCH_PREFIX}.load_dotenv")
    def test_missing_file(self, _mock_dotenv: MagicMock, mock_run: MagicMock, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.pdf")]) == 1
        mock_run.assert_not_called()

    @patch(f"{_PATCH_PREFIX}.run_matching")
    @patch(f"{_PATCH_PREFIX}.load_dotenv")
    def test_unsupported_file(self, _mock_dotenv: MagicMock, mock_run: MagicMock, tmp_path: Path) -> None:
        cv = tmp_path / "resume.jpg"
        cv.write_text("x")

        assert main([str(cv)]) == 1
        mock_run.assert_not_called()

    @patch(f"{_PATCH_PREFIX}.display_results")
    @patch(f"{_PATCH_PREFIX}.run_matching")
    @patch(f"{_PATCH_PREFIX}.get_providers", return_value=[])
    @patch(f"{_PATCH_PREFIX}.create_gateway")
    @patch(f"{_PATCH_PREFIX}.load_dotenv")
    def test_no_matches_skips_table(
        self,
        _mock_dotenv: MagicMock,
        _mock_gateway: MagicMock,
        _mock_providers: MagicMock,
        mock_run: MagicMock,
        mock_display: MagicMock,
        tmp_path: Path,
    ) -> None:
        cv = tmp_path / "resume.md"
        cv.write_text("# Resume", encoding="utf-8")
        mock_run.return_value = _make_report([], degraded=True)

        assert main([str(cv)]) == 0
        mock_display.assert_not_called()

    @patch(f"{_PATCH_PREFIX}.run_matching", side_effect=KeyboardInterrupt)
    @patch(f"{_PATCH_PREFIX}.get_providers", return_value=[])
    @patch(f"{_PATCH_PREFIX}.create_gateway")
    @patch(f"{_PATCH_PREFIX}.load_dotenv")
    def test_interrupt(
        self,
        _mock_dotenv: MagicMock,
        _mock_gateway: MagicMock,
        _mock_providers: MagicMock,
        _mock_run: MagicMock,
        tmp_path: Path,
    ) -> None:
        cv = tmp_path / "resume.txt"
        cv.write_text("Python developer", encoding="utf-8")

        assert main([str(cv)]) == 130
