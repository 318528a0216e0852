#!/usr/bin/env python3
"""
Matcher Models - Data structures for matching.

Both are computed on demand and never persisted.
"""

from dataclasses import dataclass
from typing import Any

from core.enums import TeamTier


@dataclass(frozen=True)
class Offer:
    """A priced designer+developer team for one tier."""
    tier: TeamTier
    designer: Any
    developer: Any
    score: float
    platform_fee: int
    estimated_hours: int
    estimated_project_cost: int


@dataclass(frozen=True)
class CandidateScore:
    """A single replacement candidate and its individual score."""
    freelancer: Any
    score: float
