"""
Summary view outputs: seats-by-party chart and the detailed results table.
"""

import json
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from loguru import logger  # noqa: E402

from dashboard.colors import DEFAULT_RESOLVER, ColorResolver  # noqa: E402
from dashboard.summary import Summary  # noqa: E402

NO_RESULTS_MESSAGE = "No Election Results Available"


def plot_seats_by_party(
    summary: Summary,
    output_path: Path,
    resolver: ColorResolver = DEFAULT_RESOLVER,
    title: str = "Seats by Party",
    dpi: int = 150,
) -> Path:
    """
    Bar chart of seats won per party, in summary order.

    Args:
        summary: Aggregated results
        output_path: PNG file to write
        resolver: Party colors for the bars
        title: Chart title
        dpi: Output resolution

    Returns:
        Path of the written image
    """
    rows = summary.rows()
    parties = [row.party for row in rows]
    seats = [row.seats for row in rows]

    fig, ax = plt.subplots(figsize=(max(6, len(parties) * 0.9), 4.5))
    try:
        colors = [resolver.resolve(party) for party in parties]
        ax.bar(parties, seats, color=colors, label="Seats Won")
        ax.set_title(title, fontsize=14, color="#2c3e50")
        ax.set_ylabel("Seats")
        ax.grid(axis="y", linestyle="--", alpha=0.5)
        ax.set_axisbelow(True)
        for spine in ("top", "right"):
            ax.spines[spine].set_visible(False)
        if not rows:
            ax.text(
                0.5,
                0.5,
                "No constituencies reporting",
                ha="center",
                va="center",
                transform=ax.transAxes,
                color="#666666",
            )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.tight_layout()
        fig.savefig(output_path, dpi=dpi, facecolor="white")
    finally:
        plt.close(fig)

    logger.success(f"  ✅ Seat chart saved: {output_path}")
    return output_path


def format_summary(summary: Optional[Summary]) -> str:
    """Plain-text summary for the terminal."""
    if summary is None:
        return f"{NO_RESULTS_MESSAGE}\nLoad election results data to see the summary."

    lines: List[str] = [
        f"Total Constituencies: {summary.total_constituencies:,}",
        f"Total Votes Cast: {summary.total_votes:,}",
    ]
    for row in summary.leaders(2):
        lines.append(f"{row.party} Seats: {row.seats} ({row.seat_percentage}% of seats)")

    if summary.is_empty:
        lines.append("No constituencies reporting yet.")
    else:
        lines.append("")
        lines.append(summary.to_frame().to_string(index=False))
    return "\n".join(lines)


def write_summary(summary: Summary, output_dir: Path) -> List[Path]:
    """
    Write summary.json and summary.csv.

    Returns:
        Paths written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / "summary.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(summary.to_dict(), f, indent=2)

    csv_path = output_dir / "summary.csv"
    summary.to_frame().to_csv(csv_path, index=False)

    logger.success(f"  ✅ Summary written: {json_path.name}, {csv_path.name}")
    return [json_path, csv_path]
