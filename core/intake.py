#!/usr/bin/env python3
"""
Conversational intake.

A fixed six-question script. Each answer is parsed with plain text rules and
stored on the project; there is no language model in the loop.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from core.config_loader import MatchingConfig
from core.enums import ProjectStatus
from core.errors import InvalidStateError, ValidationError

logger = logging.getLogger(__name__)

INTAKE_QUESTIONS = (
    "What type of website or app do you want to build (e-commerce, portfolio, business site, ...)?",
    "What design style do you prefer: simple, moderate or advanced?",
    "Which features do you need (login, payments, blog, admin panel, ...)?",
    "Roughly how many pages or screens will it have?",
    "What is your timeline?",
    "What is your budget range in rupees (for example 25k-50k)?",
)

TOTAL_STEPS = len(INTAKE_QUESTIONS)

_AND_WORD = re.compile(r"\band\b")
_FEATURE_SPLIT = re.compile(r"[,\n]+")
_PAGE_FRAGMENT = re.compile(r"^\d+\s*(page|screen)", re.IGNORECASE)
_FIRST_INTEGER = re.compile(r"(\d+)")


@dataclass
class IntakeProgress:
    step: int
    complete: bool
    next_question: Optional[str]


def parse_features(answer: str) -> List[str]:
    """Split a features answer on commas, newlines and the word "and"; drop page counts."""
    features = []
    for part in _FEATURE_SPLIT.split(_AND_WORD.sub(",", answer.lower())):
        part = part.strip()
        if part and not _PAGE_FRAGMENT.match(part):
            features.append(part)
    return features


def parse_page_count(answer: str, default: int = 5) -> int:
    match = _FIRST_INTEGER.search(answer)
    return int(match.group(1)) if match else default


class IntakeParser:
    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def first_question(self) -> str:
        return INTAKE_QUESTIONS[0]

    def apply_answer(self, project: Any, answer: str) -> IntakeProgress:
        """Store ``answer`` for the project's next step and advance the step counter."""
        if not answer or not answer.strip():
            raise ValidationError("Answer must not be empty")

        step = (project.intake_step or 0) + 1
        if step > TOTAL_STEPS:
            raise InvalidStateError("Project intake is already complete")

        if step == 1:
            project.website_type = answer.lower().strip()
        elif step == 2:
            project.design_complexity = answer.lower().strip()
        elif step == 3:
            project.features = parse_features(answer)
        elif step == 4:
            project.page_count = parse_page_count(answer, self.config.default_page_count)
        elif step == 5:
            project.timeline = answer.lower().strip()
        else:
            project.budget_range = answer.strip()
            project.status = ProjectStatus.TEAM_PRESENTED

        project.intake_step = step
        complete = step == TOTAL_STEPS
        logger.info(f"Project {project.id} intake step {step}/{TOTAL_STEPS}")
        return IntakeProgress(
            step=step,
            complete=complete,
            next_question=None if complete else INTAKE_QUESTIONS[step],
        )
