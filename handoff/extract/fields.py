from __future__ import annotations

"""
Single-purpose field extractors over a section's body lines.

Design intent:
- Each extractor is total: it returns "" / None / 0 when nothing matches.
- Extractors are independent so precedence and fallbacks stay individually testable.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Sequence

_AGE_LABEL_RE = re.compile(r"\*\*Age:\*\*", re.IGNORECASE)
_ADMIT_LABEL_RE = re.compile(r"\*\*Admitted(?: for)?:\*\*", re.IGNORECASE)
_SUMMARY_LABEL_RE = re.compile(
    r"^(?:#+ |\*\*)?(?:Summary|Assessment|TL;DR|Impression)(?::)?(?:\*\*)?",
    re.IGNORECASE,
)
_DISPO_LABEL_RE = re.compile(r"^(?:#+ |\*\*)?Dispo(?:sition)?(?::)?(?:\*\*)?", re.IGNORECASE)

_VITALS_PREFIX_RE = re.compile(r"^(?:\*\*VS:\*\*|VS:)\s*", re.IGNORECASE)
_INLINE_BP_RE = re.compile(r"\bBP:\s*\d+/\d+")
_LEADING_TEMP_RE = re.compile(r"^T:\s*\d+")
_BP_RE = re.compile(r"BP:?\s*(\d{2,3}/\d{2,3})", re.IGNORECASE)
_HR_RE = re.compile(r"HR:?\s*(\d{2,3})", re.IGNORECASE)
_TEMP_RE = re.compile(r"\b(?:Temp|Tmax|T)\s*:?\s*(\d{2,3}(?:\.\d+)?)", re.IGNORECASE)
_SPO2_RE = re.compile(r"SpO2:?\s*(\d{2,3}%?)", re.IGNORECASE)
_O2_RE = re.compile(r"\bO2:?\s*(\d{2,3}%?)", re.IGNORECASE)

_TEAM_LABEL_RES: dict[str, re.Pattern[str]] = {
    "resident": re.compile(r"\*?\*?\b(?:Resident|Res|Intern|PGY[123]):+\*?\*?\s*", re.IGNORECASE),
    "student": re.compile(
        r"\*?\*?\b(?:Student|Med Student|MS[34]|Medical Student):+\*?\*?\s*",
        re.IGNORECASE,
    ),
}

_DATE_LINE_RE = re.compile(r"\b(?:Date|Admitted|Admit)\b", re.IGNORECASE)
_DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b")

TeamRole = Literal["resident", "student"]


@dataclass(frozen=True)
class VitalSigns:
    text: str
    bp: str = ""
    hr: str = ""
    temp: str = ""
    o2: str = ""


def _trailing_text(lines: Sequence[str], label_re: re.Pattern[str]) -> str:
    for line in lines:
        match = label_re.search(line)
        if match:
            return line[match.end():].strip()
    return ""


def _label_with_next_line(lines: Sequence[str], label_re: re.Pattern[str]) -> str:
    for idx, line in enumerate(lines):
        match = label_re.match(line)
        if not match:
            continue
        text = line[match.end():].strip()
        if not text and idx + 1 < len(lines):
            text = lines[idx + 1].strip()
        return text
    return ""


def extract_age(lines: Sequence[str]) -> str:
    return _trailing_text(lines, _AGE_LABEL_RE)


def extract_admit_reason(lines: Sequence[str]) -> str:
    return _trailing_text(lines, _ADMIT_LABEL_RE)


def extract_summary_snippet(lines: Sequence[str]) -> str:
    return _label_with_next_line(lines, _SUMMARY_LABEL_RE)


def extract_dispo(lines: Sequence[str]) -> str:
    return _label_with_next_line(lines, _DISPO_LABEL_RE)


def _first_group(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1) if match else ""


def _is_vitals_line(line: str) -> bool:
    return bool(
        _VITALS_PREFIX_RE.match(line)
        or _INLINE_BP_RE.search(line)
        or _LEADING_TEMP_RE.match(line)
    )


def extract_vitals(lines: Sequence[str]) -> VitalSigns | None:
    line = next((item for item in lines if _is_vitals_line(item)), None)
    if line is None:
        return None
    text = _VITALS_PREFIX_RE.sub("", line, count=1)
    return VitalSigns(
        text=text,
        bp=_first_group(_BP_RE, text),
        hr=_first_group(_HR_RE, text),
        temp=_first_group(_TEMP_RE, text),
        o2=_first_group(_SPO2_RE, text) or _first_group(_O2_RE, text),
    )


def extract_team_member(lines: Sequence[str], role: TeamRole) -> str:
    label_re = _TEAM_LABEL_RES[role]
    for line in lines:
        match = label_re.search(line)
        if match:
            value = line[match.end():].strip()
            return value.removeprefix("**").removesuffix("**").strip()
    return ""


def _expand_year(raw: str) -> int:
    year = int(raw)
    if len(raw) <= 2:
        return 2000 + year if year < 50 else 1900 + year
    return year


def extract_admission_date(lines: Sequence[str]) -> int:
    """
    Epoch milliseconds (UTC midnight) of the first dated admission line.

    Returns 0 when no line carries a usable month/day/year date; callers sort
    0 last or first depending on direction.
    """
    for line in lines:
        if not _DATE_LINE_RE.search(line):
            continue
        match = _DATE_RE.search(line)
        if not match:
            continue
        month, day, year_raw = match.groups()
        try:
            parsed = datetime(_expand_year(year_raw), int(month), int(day), tzinfo=timezone.utc)
        except ValueError:
            return 0
        return int(parsed.timestamp() * 1000)
    return 0
