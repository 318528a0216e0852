#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-component contributions to one freelancer's score."""
    experience: float = 0.0
    rating: float = 0.0
    completed_projects: float = 0.0
    role_bonus: float = 0.0

    @property
    def total(self) -> float:
        return self.experience + self.rating + self.completed_projects + self.role_bonus
