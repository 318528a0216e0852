"""
Matcher Module - team offers and replacement candidates.

- models.py: Offer, CandidateScore
- offers.py: TeamOfferBuilder (pair ranking, tiers, pricing)
- replacement.py: ReplacementFinder (single-role ranking)
"""

from core.matcher.models import Offer, CandidateScore
from core.matcher.offers import TeamOfferBuilder
from core.matcher.replacement import ReplacementFinder

__all__ = [
    'Offer',
    'CandidateScore',
    'TeamOfferBuilder',
    'ReplacementFinder',
]
