from __future__ import annotations

"""
Split a raw handoff document into ordered, header-delimited sections.

Design intent:
- Keep section order identical to document order (patient index depends on it).
- Never drop or reorder body lines; stripping is left to callers.
"""

from dataclasses import dataclass, field

HEADER_DELIMITER = "### "
PREAMBLE_HEADER = "### Preamble"


@dataclass(frozen=True)
class Section:
    header: str
    lines: list[str] = field(default_factory=list)

    @property
    def is_preamble(self) -> bool:
        return self.header == PREAMBLE_HEADER


def is_header_line(line: str) -> bool:
    return line.startswith(HEADER_DELIMITER)


def split_sections(raw: str) -> list[Section]:
    if not raw:
        return []

    sections: list[Section] = []
    current_header = PREAMBLE_HEADER
    current_lines: list[str] = []

    for line in raw.split("\n"):
        if is_header_line(line):
            if current_lines or current_header != PREAMBLE_HEADER:
                sections.append(Section(header=current_header, lines=current_lines))
            current_header = line
            current_lines = []
        else:
            current_lines.append(line)

    if current_lines or current_header != PREAMBLE_HEADER:
        sections.append(Section(header=current_header, lines=current_lines))

    return sections


def patient_sections(raw: str) -> list[Section]:
    """Sections that carry a real header, in document order."""
    return [section for section in split_sections(raw) if not section.is_preamble]


def join_sections(sections: list[Section]) -> str:
    out: list[str] = []
    for section in sections:
        if not section.is_preamble:
            out.append(section.header)
        out.extend(section.lines)
    return "\n".join(out)
