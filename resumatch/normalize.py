"""Helpers that turn raw job-source fields into display-ready ``JobListing`` values."""

from __future__ import annotations

import math
import re

# Fixed vocabulary scanned in job descriptions when a source has no structured skills.
SKILL_VOCABULARY: tuple[str, ...] = (
    "React",
    "Node.js",
    "Python",
    "JavaScript",
    "TypeScript",
    "Java",
    "AWS",
    "Docker",
    "Kubernetes",
    "MongoDB",
    "PostgreSQL",
    "Next.js",
    "Angular",
    "Vue.js",
    "Express",
    "Django",
    "Flask",
    "Spring Boot",
    "Git",
    "CI/CD",
)

DEFAULT_EXPERIENCE = "2+ years"
NOT_DISCLOSED = "Not disclosed"

TARGET_CURRENCY = "INR"
CURRENCY_GLYPH = "₹"
# Display-currency units per one unit of foreign currency.
CONVERSION_RATES: dict[str, float] = {"INR": 1.0, "USD": 83.0}

_EXPERIENCE_PATTERN = re.compile(r"(\d+)\+?\s*years?", re.IGNORECASE)


def extract_skills(description: str) -> list[str]:
    """Return vocabulary terms found in *description* (case-insensitive substring match)."""
    text = (description or "").lower()
    return [skill for skill in SKILL_VOCABULARY if skill.lower() in text]


def extract_experience(description: str) -> str:
    """Pull the first "<N> years" mention out of *description* as "<N>+ years"."""
    match = _EXPERIENCE_PATTERN.search(description or "")
    if match:
        return f"{match.group(1)}+ years"
    return DEFAULT_EXPERIENCE


def format_inr(amount: float) -> str:
    """Format a whole-rupee amount with Indian digit grouping, e.g. 1234567 → "12,34,567"."""
    value = int(round(amount))
    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    if len(digits) <= 3:
        return f"{sign}{digits}"
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups) + "," + tail


def _as_amount(value: object) -> float | None:
    """Parse a salary bound; zero, negative, non-finite and unparseable values count as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def format_salary(
    min_salary: object = None,
    max_salary: object = None,
    currency: str | None = TARGET_CURRENCY,
) -> str:
    """Render a salary range in the display currency.

    Examples:
        format_salary(50000, 80000, "INR") → "₹50,000 - ₹80,000"
        format_salary(1000, None, "USD")   → "₹83,000+"
        format_salary(None, 90000)         → "Up to ₹90,000"
    """
    low = _as_amount(min_salary)
    high = _as_amount(max_salary)
    if low is None and high is None:
        return NOT_DISCLOSED

    rate = CONVERSION_RATES.get((currency or TARGET_CURRENCY).upper(), 1.0)
    if low is not None:
        low *= rate
    if high is not None:
        high *= rate

    if low is not None and high is not None:
        return f"{CURRENCY_GLYPH}{format_inr(low)} - {CURRENCY_GLYPH}{format_inr(high)}"
    if low is not None:
        return f"{CURRENCY_GLYPH}{format_inr(low)}+"
    return f"Up to {CURRENCY_GLYPH}{format_inr(high)}"  # type: ignore[arg-type]
