#!/usr/bin/env python3
"""
Team Offer Builder.

Scores every designer x developer pair and turns the top pairs into tiered,
priced offers: rank 1 is premium, rank 2 pro, rank 3 freemium. Tiers are
positional, so fewer than three pairs produce fewer offers.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from core.config_loader import MatchingConfig
from core.enums import TIERS_BY_RANK, TeamTier
from core.errors import NoFreelancersAvailableError
from core.matcher.models import Offer
from core.scorer import ProjectRequirements, score_pair

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TeamOfferBuilder:
    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def estimate_hours(self, requirements: ProjectRequirements) -> int:
        complexity = requirements.design_complexity
        complexity_hours = self.config.default_complexity_hours
        if complexity is not None:
            complexity_hours = self.config.complexity_hours.get(
                complexity.value, self.config.default_complexity_hours
            )
        return (
            requirements.page_count * self.config.hours_per_page
            + requirements.feature_count * self.config.hours_per_feature
            + complexity_hours
        )

    def estimate_cost(self, tier: TeamTier, designer, developer, hours: int, budget_ceiling: int) -> int:
        if not tier.is_paid:
            return 0
        designer_rate = designer.hourly_rate or self.config.default_designer_rate
        developer_rate = developer.hourly_rate or self.config.default_developer_rate
        return min(budget_ceiling, round_half_up(hours * (designer_rate + developer_rate) / 2))

    def platform_fee(self, tier: TeamTier) -> int:
        return getattr(self.config.tier_fees, tier.value)

    def rank_pairs(
        self,
        requirements: ProjectRequirements,
        designers: Sequence,
        developers: Sequence
    ) -> List[Tuple[float, object, object]]:
        """All pairs by score descending; ties break on designer id then developer id."""
        scored = [
            (score_pair(designer, developer, requirements, self.config), designer, developer)
            for designer in designers
            for developer in developers
        ]
        scored.sort(key=lambda item: (-item[0], str(item[1].id), str(item[2].id)))
        return scored

    def build_offers(
        self,
        requirements: ProjectRequirements,
        designers: Sequence,
        developers: Sequence
    ) -> List[Offer]:
        if not designers or not developers:
            raise NoFreelancersAvailableError(
                "No available freelancers at the moment. Please try again later."
            )

        ranked = self.rank_pairs(requirements, designers, developers)
        top = ranked[:min(self.config.max_offers, len(TIERS_BY_RANK))]
        hours = self.estimate_hours(requirements)

        offers = []
        for tier, (score, designer, developer) in zip(TIERS_BY_RANK, top):
            offers.append(Offer(
                tier=tier,
                designer=designer,
                developer=developer,
                score=score,
                platform_fee=self.platform_fee(tier),
                estimated_hours=hours,
                estimated_project_cost=self.estimate_cost(
                    tier, designer, developer, hours, requirements.budget_ceiling
                ),
            ))

        logger.info(
            f"Built {len(offers)} offers from {len(designers)} designers x {len(developers)} developers"
        )
        return offers
