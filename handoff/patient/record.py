from __future__ import annotations

"""
Assemble per-patient records from a section's independent extractors.

Design intent:
- Records are derived and recomputed on every call; never mutated in place.
- The preamble becomes a record only through a synthesized header.
"""

from dataclasses import dataclass, field
from typing import Sequence

from handoff.document.header import parse_header, synthesize_header
from handoff.document.sections import Section, split_sections
from handoff.extract.fields import (
    VitalSigns,
    extract_admission_date,
    extract_admit_reason,
    extract_age,
    extract_dispo,
    extract_summary_snippet,
    extract_team_member,
    extract_vitals,
)
from handoff.extract.problems import extract_problem_titles
from handoff.extract.signals import (
    detect_clinical_keywords,
    detect_status_badges,
    find_critical_labs,
    find_risk_scores,
)
from handoff.extract.tasks import TaskProgress, count_tasks


@dataclass(frozen=True)
class PatientRecord:
    index: int | None
    header: str
    name: str
    room: str
    age: str
    gender: str
    admit_reason: str
    vitals: VitalSigns | None
    problems: list[str]
    status_badges: list[str]
    clinical_keywords: list[str]
    critical_labs: list[str]
    tasks: TaskProgress
    summary_snippet: str
    dispo: str
    resident: str = ""
    student: str = ""
    risk_scores: list[str] = field(default_factory=list)
    admitted_at: int = 0


def resolve_header(section: Section, index: int | None = None) -> str:
    if section.is_preamble:
        return synthesize_header(section.lines, index)
    return section.header


def _combined_age(line_age: str, header_age: str, header_gender: str) -> str:
    if header_age and header_gender:
        return f"{header_age}{header_gender}"
    return line_age or header_age


def build_patient_record(section: Section, index: int | None = None) -> PatientRecord:
    lines = section.lines
    header = resolve_header(section, index)
    identity = parse_header(header)
    return PatientRecord(
        index=index,
        header=header,
        name=identity.name,
        room=identity.room,
        age=_combined_age(extract_age(lines), identity.age, identity.gender),
        gender=identity.gender,
        admit_reason=extract_admit_reason(lines),
        vitals=extract_vitals(lines),
        problems=extract_problem_titles(lines),
        status_badges=detect_status_badges(lines),
        clinical_keywords=detect_clinical_keywords(lines),
        critical_labs=find_critical_labs(lines),
        tasks=count_tasks(lines),
        summary_snippet=extract_summary_snippet(lines),
        dispo=extract_dispo(lines),
        resident=extract_team_member(lines, "resident"),
        student=extract_team_member(lines, "student"),
        risk_scores=find_risk_scores(lines),
        admitted_at=extract_admission_date(lines),
    )


def build_patient_records_from_sections(sections: Sequence[Section]) -> list[PatientRecord]:
    records: list[PatientRecord] = []
    patient_index = 0
    for section in sections:
        if section.is_preamble:
            records.append(build_patient_record(section, None))
            continue
        records.append(build_patient_record(section, patient_index))
        patient_index += 1
    return records


def build_patient_records(document: str) -> list[PatientRecord]:
    return build_patient_records_from_sections(split_sections(document))
