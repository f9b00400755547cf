from __future__ import annotations

"""
Census-level projections over a handoff document.

Design intent:
- Give the dashboard a deterministic acuity tier per patient.
- Offer the critical/labs/meds line views without re-implementing section parsing.
"""

from dataclasses import dataclass
from typing import Literal, Sequence

from handoff.document.header import parse_header
from handoff.document.sections import patient_sections, split_sections
from handoff.extract.signals import LABS_RE, MEDS_RE, find_critical_labs, is_critical_line

Acuity = Literal["Low", "Medium", "High"]

HIGH_ACUITY_TERMS: tuple[str, ...] = ("sepsis", "failure")
MEDIUM_ACUITY_MIN_PROBLEMS = 4


@dataclass(frozen=True)
class DashboardPatient:
    id: int
    name: str
    room: str
    vitals: str
    critical_labs: list[str]
    active_problems: list[str]
    acuity: Acuity


@dataclass(frozen=True)
class SectionLines:
    patient_header: str
    lines: list[str]


def classify_acuity(critical_labs: Sequence[str], active_problems: Sequence[str]) -> Acuity:
    if critical_labs:
        return "High"
    for problem in active_problems:
        lowered = problem.lower()
        if any(term in lowered for term in HIGH_ACUITY_TERMS):
            return "High"
    if len(active_problems) >= MEDIUM_ACUITY_MIN_PROBLEMS:
        return "Medium"
    return "Low"


def _active_problems(lines: Sequence[str]) -> list[str]:
    return [line.lstrip("#").strip() for line in lines if line.startswith("#")]


def parse_for_dashboard(document: str) -> list[DashboardPatient]:
    patients: list[DashboardPatient] = []
    for idx, section in enumerate(patient_sections(document)):
        identity = parse_header(section.header)
        critical_labs = find_critical_labs(section.lines)
        active_problems = _active_problems(section.lines)
        patients.append(
            DashboardPatient(
                id=idx,
                name=identity.name,
                room=identity.room,
                vitals=next((line for line in section.lines if "VS:" in line), ""),
                critical_labs=critical_labs,
                active_problems=active_problems,
                acuity=classify_acuity(critical_labs, active_problems),
            )
        )
    return patients


def extract_critical_patients(document: str) -> list[SectionLines]:
    out: list[SectionLines] = []
    for section in split_sections(document):
        critical = [line for line in section.lines if is_critical_line(line)]
        if critical:
            out.append(SectionLines(patient_header=section.header, lines=critical))
    return out


def extract_labs(document: str) -> list[SectionLines]:
    out: list[SectionLines] = []
    for section in split_sections(document):
        labs = [line for line in section.lines if LABS_RE.search(line) or is_critical_line(line)]
        if labs:
            out.append(SectionLines(patient_header=section.header, lines=labs))
    return out


def extract_meds(document: str) -> list[SectionLines]:
    out: list[SectionLines] = []
    for section in split_sections(document):
        meds = [
            line
            for line in section.lines
            if MEDS_RE.search(line) and not line.startswith("#") and not line.startswith("VS:")
        ]
        if meds:
            out.append(SectionLines(patient_header=section.header, lines=meds))
    return out
