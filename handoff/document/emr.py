from __future__ import annotations

"""
Render handoff text as plain EMR-safe text.

Design intent:
- Strip editor markup so text pastes cleanly into external record systems.
- Stay idempotent: cleaning already-clean text is a no-op.
"""

import re

_HEADER_MARKER_RE = re.compile(r"^[ \t]*(?:###[ \t]*)+", re.MULTILINE)
_OPEN_TASK_RE = re.compile(r"^([ \t]*)- \[ \]", re.MULTILINE)
_DONE_TASK_RE = re.compile(r"^([ \t]*)- \[x\]", re.MULTILINE)
_BULLET_RE = re.compile(r"^[ \t]*[*•][ \t]+", re.MULTILINE)
TREND_ARROW_RE = re.compile(r"[↗↘↔]")


def _strip_emphasis(text: str) -> str:
    # "*__*" only collapses to "**" after the first pass.
    while "**" in text or "__" in text:
        text = text.replace("**", "").replace("__", "")
    return text


def clean_text_for_emr(text: str) -> str:
    # Order matters: each step may expose syntax for a later one, never an earlier one.
    cleaned = TREND_ARROW_RE.sub("", (text or "").strip())
    cleaned = _strip_emphasis(cleaned)
    cleaned = _HEADER_MARKER_RE.sub("", cleaned)
    cleaned = _BULLET_RE.sub("- ", cleaned)
    cleaned = cleaned.replace("•", "-")
    cleaned = _OPEN_TASK_RE.sub(r"\1[ ]", cleaned)
    cleaned = _DONE_TASK_RE.sub(r"\1[x]", cleaned)
    return cleaned.strip()
