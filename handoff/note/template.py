from __future__ import annotations

"""
Fill plain-text note templates with fields extracted from one patient section.

Design intent:
- Keep templates as editable `*.txt` files (first line `Title: ...`).
- Substitute a fixed `{{token}}` vocabulary globally; unknown values render empty.
- Read the wall clock only through an injectable `Clock`.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence

from handoff.document.header import parse_header
from handoff.extract.fields import extract_vitals
from handoff.extract.problems import extract_problem_titles
from handoff.internal_core.config import load_config

UNKNOWN_PATIENT = "Unknown Patient"
NO_VITALS = "No vitals recorded"


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now()


class TemplateNotFoundError(ValueError):
    """Raised when a template id has no matching file."""


@dataclass(frozen=True)
class TemplateContext:
    name: str = ""
    room: str = ""
    age: str = ""
    gender: str = ""
    vitals: str = ""
    vitals_bp: str = ""
    vitals_hr: str = ""
    vitals_temp: str = ""
    vitals_o2: str = ""
    problems: str = ""


@dataclass(frozen=True)
class TemplateSpec:
    template_id: str
    template_name: str
    template_text: str
    path: Path


def build_template_context(header: str, lines: Sequence[str]) -> TemplateContext:
    identity = parse_header(header)
    vitals = extract_vitals(lines)
    return TemplateContext(
        name=identity.name,
        room=identity.room,
        age=identity.age,
        gender=identity.gender,
        vitals=vitals.text if vitals else "",
        vitals_bp=vitals.bp if vitals else "",
        vitals_hr=vitals.hr if vitals else "",
        vitals_temp=vitals.temp if vitals else "",
        vitals_o2=vitals.o2 if vitals else "",
        problems=", ".join(extract_problem_titles(lines)),
    )


def resolve_tokens(
    context: TemplateContext,
    *,
    clock: Optional[Clock] = None,
    date_format: str = "%x",
    time_format: str = "%H:%M",
) -> dict[str, str]:
    now = (clock or SystemClock()).now()
    return {
        "{{name}}": context.name or UNKNOWN_PATIENT,
        "{{room}}": context.room,
        "{{age}}": context.age,
        "{{gender}}": context.gender,
        "{{vitals}}": context.vitals or NO_VITALS,
        "{{vitals.bp}}": context.vitals_bp,
        "{{vitals.hr}}": context.vitals_hr,
        "{{vitals.temp}}": context.vitals_temp,
        "{{vitals.o2}}": context.vitals_o2,
        "{{problems}}": context.problems,
        "{{date}}": now.strftime(date_format),
        "{{time}}": now.strftime(time_format),
    }


def render_template(
    template: str,
    context: TemplateContext,
    *,
    clock: Optional[Clock] = None,
    date_format: str = "%x",
    time_format: str = "%H:%M",
) -> str:
    rendered = template or ""
    tokens = resolve_tokens(context, clock=clock, date_format=date_format, time_format=time_format)
    for token, value in tokens.items():
        rendered = rendered.replace(token, value)
    return rendered


def process_template(
    template: str,
    header: str,
    lines: Sequence[str],
    *,
    clock: Optional[Clock] = None,
    date_format: str = "%x",
    time_format: str = "%H:%M",
) -> str:
    return render_template(
        template,
        build_template_context(header, lines),
        clock=clock,
        date_format=date_format,
        time_format=time_format,
    )


def _template_root(template_dir: Optional[Path]) -> Path:
    if template_dir is not None:
        return Path(template_dir)
    return load_config().template_dir_path()


def _decode_template_file_content(raw: str, *, default_name: str) -> tuple[str, str]:
    lines = raw.splitlines()
    template_name = ""
    body_start = 0
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower().startswith("title:"):
            template_name = stripped.split(":", 1)[1].strip()
            body_start = idx + 1
        else:
            body_start = idx
        break
    body = "\n".join(lines[body_start:]).strip()
    if not template_name:
        template_name = default_name.replace("_", " ").strip().title()
    return template_name, body


def _load_template_spec(path: Path) -> TemplateSpec:
    raw = path.read_text(encoding="utf-8")
    template_name, template_text = _decode_template_file_content(raw, default_name=path.stem)
    return TemplateSpec(
        template_id=path.stem.strip(),
        template_name=template_name,
        template_text=template_text,
        path=path,
    )


def list_templates(template_dir: Optional[Path] = None) -> list[TemplateSpec]:
    root = _template_root(template_dir)
    if not root.is_dir():
        raise ValueError(f"Template directory not found: {root}")
    return [_load_template_spec(path) for path in sorted(root.glob("*.txt"))]


def get_template(template_id: str, template_dir: Optional[Path] = None) -> TemplateSpec:
    normalized = str(template_id or "").strip()
    for spec in list_templates(template_dir):
        if spec.template_id == normalized:
            return spec
    raise TemplateNotFoundError(f"Unknown template_id '{normalized}'.")
