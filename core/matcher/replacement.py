#!/usr/bin/env python3
"""
Replacement Finder - ranks individual candidates for one vacated role.
"""

import logging
from typing import List, Optional, Sequence

from core.config_loader import MatchingConfig
from core.enums import FreelancerRole
from core.errors import NoneAvailableError
from core.matcher.models import CandidateScore
from core.scorer import ProjectRequirements, score_freelancer

logger = logging.getLogger(__name__)


class ReplacementFinder:
    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def find(
        self,
        requirements: ProjectRequirements,
        candidates: Sequence,
        role: FreelancerRole
    ) -> List[CandidateScore]:
        """Top candidates of ``role`` by individual score, ties broken by freelancer id."""
        pool = [c for c in candidates if FreelancerRole(c.role) is role and c.is_available]
        if not pool:
            raise NoneAvailableError(f"No available {role.value}s found")

        scored = [
            CandidateScore(freelancer=c, score=score_freelancer(c, requirements, role, self.config))
            for c in pool
        ]
        scored.sort(key=lambda cs: (-cs.score, str(cs.freelancer.id)))
        logger.info(f"Ranked {len(scored)} {role.value} replacement candidates")
        return scored[:self.config.max_replacements]
