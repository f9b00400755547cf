from __future__ import annotations

"""
Count checklist lines and their completion ratio.
"""

from dataclasses import dataclass
from typing import Sequence

OPEN_TASK_MARKER = "- [ ]"
DONE_TASK_MARKER = "- [x]"


@dataclass(frozen=True)
class TaskProgress:
    total: int = 0
    completed: int = 0
    progress: float = 0.0


def count_tasks(lines: Sequence[str]) -> TaskProgress:
    task_lines = [line for line in lines if OPEN_TASK_MARKER in line or DONE_TASK_MARKER in line]
    total = len(task_lines)
    completed = sum(1 for line in task_lines if DONE_TASK_MARKER in line)
    progress = (completed / total) * 100 if total > 0 else 0.0
    return TaskProgress(total=total, completed=completed, progress=progress)
