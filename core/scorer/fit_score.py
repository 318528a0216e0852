#!/usr/bin/env python3
"""
Fit Score

score = experience_points * 15 + rating * 10 + min(completed * 2, 20) + role_bonus

Role bonus:
- designer: +15 when the experience level suits the design complexity
  (simple: junior/mid, moderate: mid/senior, advanced: senior).
- developer: +10 per detected feature category whose skill the developer holds
  (interactive: React, payments: Payment Integration or Stripe,
  authentication: Authentication).

A pair scores the sum of its members' scores. There is no cross term and no
normalization, so tier ordering follows raw sums.
"""

from typing import Any, Dict, FrozenSet, Optional

from core.config_loader import MatchingConfig
from core.enums import DesignComplexity, ExperienceLevel, FeatureCategory, FreelancerRole
from core.scorer.models import ScoreBreakdown
from core.scorer.requirements import ProjectRequirements

COMPLEXITY_FIT: Dict[DesignComplexity, FrozenSet[ExperienceLevel]] = {
    DesignComplexity.SIMPLE: frozenset({ExperienceLevel.JUNIOR, ExperienceLevel.MID}),
    DesignComplexity.MODERATE: frozenset({ExperienceLevel.MID, ExperienceLevel.SENIOR}),
    DesignComplexity.ADVANCED: frozenset({ExperienceLevel.SENIOR}),
}

FEATURE_SKILLS: Dict[FeatureCategory, FrozenSet[str]] = {
    FeatureCategory.INTERACTIVE: frozenset({"react"}),
    FeatureCategory.PAYMENTS: frozenset({"payment integration", "stripe"}),
    FeatureCategory.AUTHENTICATION: frozenset({"authentication"}),
}

_DEFAULT_CONFIG = MatchingConfig()


def _experience_points(level: Any, config: MatchingConfig) -> int:
    level = ExperienceLevel(level)
    return getattr(config.experience_points, level.value)


def _role_bonus(freelancer: Any, requirements: ProjectRequirements, role: FreelancerRole, config: MatchingConfig) -> float:
    if role is FreelancerRole.DESIGNER:
        complexity = requirements.design_complexity
        if complexity is not None and ExperienceLevel(freelancer.experience_level) in COMPLEXITY_FIT[complexity]:
            return config.complexity_match_bonus
        return 0.0

    skills = {s.strip().lower() for s in (freelancer.skills or [])}
    bonus = 0.0
    for category in requirements.feature_categories:
        if skills & FEATURE_SKILLS[category]:
            bonus += config.feature_skill_bonus
    return bonus


def score_breakdown(
    freelancer: Any,
    requirements: ProjectRequirements,
    role: FreelancerRole,
    config: Optional[MatchingConfig] = None
) -> ScoreBreakdown:
    config = config or _DEFAULT_CONFIG
    completed = freelancer.completed_projects or 0
    return ScoreBreakdown(
        experience=_experience_points(freelancer.experience_level, config) * config.experience_weight,
        rating=freelancer.rating * config.rating_weight,
        completed_projects=min(completed * config.completed_project_points, config.completed_project_cap),
        role_bonus=_role_bonus(freelancer, requirements, role, config),
    )


def score_freelancer(
    freelancer: Any,
    requirements: ProjectRequirements,
    role: FreelancerRole,
    config: Optional[MatchingConfig] = None
) -> float:
    return score_breakdown(freelancer, requirements, role, config).total


def score_pair(
    designer: Any,
    developer: Any,
    requirements: ProjectRequirements,
    config: Optional[MatchingConfig] = None
) -> float:
    return (
        score_freelancer(designer, requirements, FreelancerRole.DESIGNER, config)
        + score_freelancer(developer, requirements, FreelancerRole.DEVELOPER, config)
    )
