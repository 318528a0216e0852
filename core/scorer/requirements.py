#!/usr/bin/env python3
"""
Requirement interpretation.

Turns the free-text answers collected by the intake script into a
``ProjectRequirements`` value. Scoring and offer building consume only that
value, so a smarter interpreter can replace the keyword one without touching
them.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional

from core.config_loader import MatchingConfig
from core.enums import DesignComplexity, FeatureCategory

logger = logging.getLogger(__name__)

# Keyword fragments (lowercase substring match) that signal each feature category.
FEATURE_KEYWORDS = {
    FeatureCategory.INTERACTIVE: ("modern", "interactive"),
    FeatureCategory.PAYMENTS: ("payment", "checkout"),
    FeatureCategory.AUTHENTICATION: ("login", "auth"),
}

_CURRENCY_CHARS = re.compile(r"[₹$€£,]")
_BUDGET_RANGE = re.compile(r"(\d+)\s*k?\s*-\s*(\d+)\s*k?", re.IGNORECASE)


@dataclass(frozen=True)
class ProjectRequirements:
    """Normalized requirements the matching layer works from."""
    design_complexity: Optional[DesignComplexity] = None
    feature_categories: FrozenSet[FeatureCategory] = field(default_factory=frozenset)
    page_count: int = 5
    feature_count: int = 1
    budget_ceiling: int = 50000


def parse_budget_ceiling(budget_range: Optional[str], default: int = 50000) -> int:
    """
    Extract the upper bound of a budget range.

    Accepts "₹25,000-₹50,000", "25k-50k", "25000-50000" and "25-30k". The upper
    bound is scaled by 1000 when the text mentions ``k`` or the bound is under
    1000. Unparseable text yields ``default``.
    """
    if not budget_range:
        return default

    cleaned = _CURRENCY_CHARS.sub("", budget_range).lower()
    match = _BUDGET_RANGE.search(cleaned)
    if not match:
        logger.debug(f"Budget range {budget_range!r} not understood, using {default}")
        return default

    upper = int(match.group(2))
    if "k" in budget_range.lower() or upper < 1000:
        upper *= 1000
    return upper


def detect_feature_categories(features: Iterable[str]) -> FrozenSet[FeatureCategory]:
    lowered = [f.lower() for f in features if f]
    found = set()
    for category, keywords in FEATURE_KEYWORDS.items():
        if any(keyword in feature for feature in lowered for keyword in keywords):
            found.add(category)
    return frozenset(found)


def interpret_complexity(text: Optional[str]) -> Optional[DesignComplexity]:
    """Map a design-style answer to a complexity level, or None when it names none."""
    if not text:
        return None
    normalized = text.strip().lower()
    try:
        return DesignComplexity(normalized)
    except ValueError:
        pass
    for level in (DesignComplexity.ADVANCED, DesignComplexity.MODERATE, DesignComplexity.SIMPLE):
        if level.value in normalized:
            return level
    return None


class RequirementInterpreter(ABC):
    """Builds ``ProjectRequirements`` from a project's stored intake answers."""

    @abstractmethod
    def interpret(self, project: Any) -> ProjectRequirements:
        raise NotImplementedError


class KeywordRequirementInterpreter(RequirementInterpreter):
    """Substring keyword matching over the intake answers."""

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def interpret(self, project: Any) -> ProjectRequirements:
        features = list(getattr(project, "features", None) or [])
        page_count = getattr(project, "page_count", None) or self.config.default_page_count

        return ProjectRequirements(
            design_complexity=interpret_complexity(getattr(project, "design_complexity", None)),
            feature_categories=detect_feature_categories(features),
            page_count=page_count,
            feature_count=len(features) or 1,
            budget_ceiling=parse_budget_ceiling(
                getattr(project, "budget_range", None),
                self.config.default_budget_ceiling
            ),
        )
