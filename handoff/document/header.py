from __future__ import annotations

"""
Derive patient identity (name/room/age/gender) from section headers.

Design intent:
- Parse the `### <n>. Name - Room (65M)` header convention deterministically.
- Synthesize a header only for the un-headered preamble; this is the only
  place header text is invented.
"""

import re
from dataclasses import dataclass
from typing import Sequence

from handoff.document.sections import HEADER_DELIMITER

MAX_SCAN_LINES = 15
MAX_NAME_CHARS = 17
NEW_PATIENT_NAME = "New Patient"

_HEADER_PREFIX_RE = re.compile(r"^###\s*(?:\d+\.\s*)?")
_NAME_ROOM_SPLIT_RE = re.compile(r"\s+[-–—]\s+")
_DEMOGRAPHICS_RE = re.compile(r"\(\s*(\d{1,3})\s*([MFmf])?\s*\)")

_SECTION_LABEL_RE = re.compile(
    r"^[\s#*_>-]*"
    r"(?:handoff|census|summary|assessment|plan|history|exam|vitals|labs|imaging|meds|disposition)"
    r"s?\b(?P<rest>.*)$",
    re.IGNORECASE,
)
_LABEL_TAIL_MAX_WORDS = 2


def _labeled_re(labels: str) -> re.Pattern[str]:
    return re.compile(
        r"^[\s\-*>]*(?:\*\*)?(?:" + labels + r")(?:\*\*)?\s*:\s*(?:\*\*)?\s*(?P<value>.+?)\s*$",
        re.IGNORECASE,
    )


_NAME_LABEL_RE = _labeled_re(r"(?:patient )?name")
_ROOM_LABEL_RE = _labeled_re(r"room|bed|unit")
_AGE_LABEL_RE = _labeled_re(r"age")
_SEX_LABEL_RE = _labeled_re(r"sex|gender")

_AGE_GENDER_RE = re.compile(
    r"\b(\d{1,3})\s*(?:yo|y/o|y\.o\.|yr|yrs|-?\s*years?[-\s]old)\s*"
    r"(male|female|man|woman|m|f)\b",
    re.IGNORECASE,
)
_POSITIONAL_NAME_RE = re.compile(
    r"^\s*(?P<name>(?:[A-Z][a-z]+|[A-Z]\.)\s+[A-Z][A-Za-z'\-]+)"
    r"(?:\s+[-–—]\s+(?P<room>\S+))?\s*$"
)
_DIGITS_RE = re.compile(r"\d{1,3}")


@dataclass(frozen=True)
class HeaderInfo:
    name: str
    room: str = ""
    age: str = ""
    gender: str = ""


def _normalize_gender(raw: str) -> str:
    value = (raw or "").strip().lower()
    if not value:
        return ""
    if value[0] == "m":
        return "M"
    if value[0] == "f" or value.startswith("w"):
        return "F"
    return ""


def _split_demographics(text: str) -> tuple[str, str, str]:
    match = _DEMOGRAPHICS_RE.search(text)
    if not match:
        return text.strip(), "", ""
    before = text[: match.start()].strip()
    return before, match.group(1), _normalize_gender(match.group(2) or "")


def parse_header(header: str) -> HeaderInfo:
    raw = _HEADER_PREFIX_RE.sub("", (header or "").strip(), count=1)
    parts = _NAME_ROOM_SPLIT_RE.split(raw, maxsplit=1)
    name_part = parts[0]
    room_part = parts[1] if len(parts) > 1 else ""

    if room_part:
        room, age, gender = _split_demographics(room_part)
        return HeaderInfo(name=name_part.strip(), room=room, age=age, gender=gender)

    name, age, gender = _split_demographics(name_part)
    return HeaderInfo(name=name, room="", age=age, gender=gender)


def _is_section_label(line: str) -> bool:
    # "Census", "## Assessment & Plan:", "Handoff 10/12" are labels;
    # "Assessment: 65yo M admitted with sepsis" carries content.
    match = _SECTION_LABEL_RE.match(line)
    if not match:
        return False
    tail = match.group("rest").strip(" :*_#")
    return len(tail.split()) <= _LABEL_TAIL_MAX_WORDS


def _truncate_name(name: str) -> str:
    if len(name) <= MAX_NAME_CHARS:
        return name
    return name[:MAX_NAME_CHARS] + "…"


def synthesize_header(lines: Sequence[str], index: int | None = None) -> str:
    """
    Build a header for the preamble section from its body text.

    Per line (in line order) labeled fields are tried first, then the combined
    age/gender phrase, then a bare "First Last" name on the first non-blank
    line. A field that is already set is never overwritten.
    """
    name = ""
    room = ""
    age = ""
    gender = ""
    first_content_seen = False

    for line in list(lines)[:MAX_SCAN_LINES]:
        stripped = line.strip()
        if not stripped:
            continue
        is_first = not first_content_seen
        first_content_seen = True
        if _is_section_label(stripped):
            continue

        match = _NAME_LABEL_RE.match(stripped)
        if match and not name:
            name = match.group("value").strip("* ")
        match = _ROOM_LABEL_RE.match(stripped)
        if match and not room:
            room = match.group("value").strip("* ")
        match = _AGE_LABEL_RE.match(stripped)
        if match and not age:
            digits = _DIGITS_RE.search(match.group("value"))
            if digits:
                age = digits.group(0)
        match = _SEX_LABEL_RE.match(stripped)
        if match and not gender:
            gender = _normalize_gender(match.group("value").strip("* "))

        combined = _AGE_GENDER_RE.search(stripped)
        if combined:
            if not age:
                age = combined.group(1)
            if not gender:
                gender = _normalize_gender(combined.group(2))

        if is_first and not name and ":" not in stripped:
            positional = _POSITIONAL_NAME_RE.match(stripped)
            if positional:
                name = positional.group("name")
                if positional.group("room") and not room:
                    room = positional.group("room")

    prefix = HEADER_DELIMITER + (f"{index + 1}. " if index is not None else "")
    if not name:
        return prefix + NEW_PATIENT_NAME

    header = prefix + _truncate_name(name)
    if room:
        header += f" — {room}"
    if age or gender:
        header += f" ({age}{gender})"
    return header
