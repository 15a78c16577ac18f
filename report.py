from __future__ import annotations

import json
from typing import List

from core import PrizeSummary, Student


def _fmt_threshold(t: float) -> str:
    return str(float(t))


def render_report(summary: PrizeSummary) -> str:
    """
    Console report:
    1) top-N winners, numbered from 1
    2) every eligible student, alphabetical, not numbered
    3) total eligible
    """
    t = _fmt_threshold(summary.gpa_threshold)
    lines: List[str] = []

    lines.append(f"Top GPA Students (up to {summary.max_recipients}, GPA > {t}):")
    if summary.winners:
        for i, s in enumerate(summary.winners, start=1):
            lines.append(f"{i}. {s}")
    else:
        lines.append("(none)")

    lines.append("")
    lines.append("Eligible Students (Alphabetical):")
    if summary.alphabetical:
        for s in summary.alphabetical:
            lines.append(f"  {s}")
    else:
        lines.append("  (none)")

    lines.append("")
    lines.append(f"Total eligible (GPA > {t}): {summary.eligible_count}")
    return "\n".join(lines)


def _student_dict(s: Student) -> dict:
    return {"name": s.name, "gpa": s.gpa}


def render_json(summary: PrizeSummary) -> str:
    data = {
        "threshold": summary.gpa_threshold,
        "max_recipients": summary.max_recipients,
        "eligible_count": summary.eligible_count,
        "winners": [_student_dict(s) for s in summary.winners],
        "eligible": [_student_dict(s) for s in summary.alphabetical],
    }
    return json.dumps(data, ensure_ascii=False, indent=2)
