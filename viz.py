from __future__ import annotations

import matplotlib.pyplot as plt

from core import PrizeSummary

WINNER_COLOR = "#d4a017"
ELIGIBLE_COLOR = "#8aa1b1"


def _collect_bars(summary: PrizeSummary) -> tuple[list[str], list[float], list[str]]:
    """
    Returns:
    - labels: eligible names, alphabetical
    - values: bar heights (GPA)
    - colors: winners highlighted
    """
    winners = {id(s) for s in summary.winners}

    labels: list[str] = []
    values: list[float] = []
    colors: list[str] = []
    for s in summary.alphabetical:
        labels.append(s.name)
        values.append(s.gpa)
        colors.append(WINNER_COLOR if id(s) in winners else ELIGIBLE_COLOR)
    return labels, values, colors


def plot_summary(summary: PrizeSummary, show: bool = True):
    """
    Bar chart of every eligible student, winners highlighted,
    dashed line at the GPA threshold.
    """
    labels, values, colors = _collect_bars(summary)
    fig = plt.figure()

    if labels:
        # numeric positions: two students can share a name
        positions = list(range(len(labels)))
        bars = plt.bar(positions, values, color=colors)
        plt.axhline(summary.gpa_threshold, linestyle="--", color="#aa3333", linewidth=1)
        plt.ylim(min(summary.gpa_threshold, min(values)) - 0.2, max(values) + 0.3)
        plt.title(f"Eligible students (GPA > {summary.gpa_threshold}), top {summary.max_recipients} highlighted")
        plt.xlabel("Student")
        plt.ylabel("GPA")

        for rect, val in zip(bars, values):
            x = rect.get_x() + rect.get_width() / 2
            y = rect.get_height()
            plt.text(x, y + 0.02, f"{val:.2f}", ha="center", va="bottom")

        plt.xticks(positions, labels, rotation=45)
    else:
        plt.title("Eligible students")
        plt.text(0.5, 0.5, f"No eligible students (GPA > {summary.gpa_threshold})", ha="center", va="center")
        plt.axis("off")

    plt.tight_layout()
    if show:
        plt.show()
    return fig
