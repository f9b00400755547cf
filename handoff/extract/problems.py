from __future__ import annotations

"""
Group section bodies into problem -> plan-detail trees.

Design intent:
- `#`-prefixed lines open problems; following non-empty lines are their plan details.
- Keep the lighter display title list separate from the plan tree.
"""

from dataclasses import dataclass, field
from typing import Sequence

from handoff.document.sections import split_sections

MAX_PROBLEM_TITLE_CHARS = 59


@dataclass(frozen=True)
class PlanProblem:
    title: str
    details: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractedPlan:
    patient_header: str
    patient_index: int
    problems: list[PlanProblem]


def problem_title(line: str) -> str:
    text = line.strip().lstrip("#")
    if ":" in text:
        text = text.split(":", 1)[0]
    return text.strip()


def extract_problems(lines: Sequence[str]) -> list[PlanProblem]:
    problems: list[PlanProblem] = []
    current: PlanProblem | None = None
    for line in lines:
        if line.startswith("#"):
            if current is not None:
                problems.append(current)
            current = PlanProblem(title=problem_title(line))
            continue
        if current is not None and line.strip():
            current.details.append(line.strip())
    if current is not None:
        problems.append(current)
    return problems


def extract_plans(document: str) -> list[ExtractedPlan]:
    plans: list[ExtractedPlan] = []
    patient_index = 0
    for section in split_sections(document):
        if section.is_preamble:
            continue
        problems = extract_problems(section.lines)
        if problems:
            plans.append(
                ExtractedPlan(
                    patient_header=section.header,
                    patient_index=patient_index,
                    problems=problems,
                )
            )
        patient_index += 1
    return plans


def extract_problem_titles(lines: Sequence[str]) -> list[str]:
    titles = [problem_title(line) for line in lines if line.strip().startswith("#")]
    return [title for title in titles if 0 < len(title) <= MAX_PROBLEM_TITLE_CHARS]
