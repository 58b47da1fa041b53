"""
Skill Matching and Eligibility Reports

Scores a candidate's skills against an opportunity's requirements and
packages the result as an ``EligibilityReport``.

Matching rules:
- Skills are trimmed and lowercased; blank entries are ignored
- A candidate skill satisfies a requirement when either string contains the
  other ("react" satisfies "react native" and the reverse). This is permissive
  on purpose and yields false positives such as "java" / "javascript".
- An opportunity with no requirements is a 100% match

Tiers are advisory. Nothing here blocks an application.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import quote
from uuid import UUID

if TYPE_CHECKING:
    from app.modules.opportunities.models import Opportunity
    from app.modules.users.models import User

STRONG_THRESHOLD = 80
PARTIAL_THRESHOLD = 50


class EligibilityTier(str, Enum):
    """Qualitative band of an eligibility score."""

    STRONG = "strong"
    PARTIAL = "partial"
    WEAK = "weak"


@dataclass(frozen=True)
class SkillScore:
    """Raw matcher output."""

    percentage: int
    matched: tuple[str, ...]
    missing: tuple[str, ...]


@dataclass(frozen=True)
class Suggestion:
    """A learning resource for one missing skill."""

    type: str
    skill: str
    title: str
    description: str
    provider: str
    url: str


@dataclass(frozen=True)
class EligibilityReport:
    """Derived, unpersisted view of how well a candidate fits an opportunity."""

    candidate_id: UUID
    opportunity_id: UUID
    score: int
    tier: EligibilityTier
    matched_skills: tuple[str, ...]
    missing_skills: tuple[str, ...]
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)

    @property
    def is_eligible(self) -> bool:
        return self.tier != EligibilityTier.WEAK


def _normalize(skills: Iterable[str]) -> list[tuple[str, str]]:
    """(original, normalized) pairs, blanks dropped, first spelling wins."""
    seen: set[str] = set()
    pairs = []
    for skill in skills:
        normalized = skill.strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        pairs.append((skill.strip(), normalized))
    return pairs


def skills_match(candidate_skill: str, required_skill: str) -> bool:
    """Bidirectional substring test on already-normalized skills."""
    return candidate_skill in required_skill or required_skill in candidate_skill


def _round_half_up(numerator: int, denominator: int) -> int:
    # floor(100 * n / d + 0.5) in integer arithmetic
    return (200 * numerator + denominator) // (2 * denominator)


def score_skills(candidate_skills: Iterable[str], required_skills: Iterable[str]) -> SkillScore:
    """
    Score candidate skills against required skills.

    Args:
        candidate_skills: The candidate's free-text skills
        required_skills: The opportunity's free-text requirements

    Returns:
        SkillScore with the rounded percentage of requirements satisfied, and
        the matched and missing requirements in their original order
    """
    required = _normalize(required_skills)
    if not required:
        return SkillScore(percentage=100, matched=(), missing=())

    candidate = [normalized for _, normalized in _normalize(candidate_skills)]

    matched = []
    missing = []
    for original, normalized in required:
        if any(skills_match(skill, normalized) for skill in candidate):
            matched.append(original)
        else:
            missing.append(original)

    return SkillScore(
        percentage=_round_half_up(len(matched), len(required)),
        matched=tuple(matched),
        missing=tuple(missing),
    )


def classify_tier(score: int) -> EligibilityTier:
    if score >= STRONG_THRESHOLD:
        return EligibilityTier.STRONG
    if score >= PARTIAL_THRESHOLD:
        return EligibilityTier.PARTIAL
    return EligibilityTier.WEAK


def generate_suggestions(missing_skills: Iterable[str]) -> tuple[Suggestion, ...]:
    """One course and one documentation suggestion per missing skill."""
    suggestions = []
    for skill in missing_skills:
        query = quote(skill, safe="")
        suggestions.append(
            Suggestion(
                type="course",
                skill=skill,
                title=f"Learn {skill}",
                description=f"Online course to master {skill}",
                provider="Coursera",
                url=f"https://www.coursera.org/search?query={query}",
            )
        )
        suggestions.append(
            Suggestion(
                type="resource",
                skill=skill,
                title=f"{skill} Documentation",
                description="Official documentation and tutorials",
                provider="MDN Web Docs",
                url=f"https://developer.mozilla.org/search?q={query}",
            )
        )
    return tuple(suggestions)


def build_eligibility_report(candidate: "User", opportunity: "Opportunity") -> EligibilityReport:
    """Score, classify and attach learning suggestions for the missing skills."""
    result = score_skills(candidate.skills or [], opportunity.required_skills or [])
    return EligibilityReport(
        candidate_id=candidate.id,
        opportunity_id=opportunity.id,
        score=result.percentage,
        tier=classify_tier(result.percentage),
        matched_skills=result.matched,
        missing_skills=result.missing,
        suggestions=generate_suggestions(result.missing),
    )
