#!/usr/bin/env python3
"""
Scoring Module.

Public API:
- score_freelancer / score_pair: pure fit scores for one freelancer or a pair
- ProjectRequirements: normalized requirements the scores are computed against
- KeywordRequirementInterpreter: default intake-answer interpreter

- models.py: Data structures (ScoreBreakdown)
- requirements.py: Requirement interpretation and budget parsing
- fit_score.py: Scoring formula
"""

from core.scorer.models import ScoreBreakdown
from core.scorer.requirements import (
    ProjectRequirements,
    RequirementInterpreter,
    KeywordRequirementInterpreter,
    parse_budget_ceiling,
)
from core.scorer.fit_score import score_breakdown, score_freelancer, score_pair

__all__ = [
    'ScoreBreakdown',
    'ProjectRequirements',
    'RequirementInterpreter',
    'KeywordRequirementInterpreter',
    'parse_budget_ceiling',
    'score_breakdown',
    'score_freelancer',
    'score_pair',
]
