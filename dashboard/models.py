"""
Election result records.

A ResultRecord is one constituency's outcome as published in the results
JSON. Records are frozen once parsed; the join copies their fields into
feature properties rather than handing out references.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from loguru import logger


@dataclass(frozen=True)
class PartyResult:
    """One row of a constituency's per-party breakdown."""

    party: str
    votes: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"party": self.party, "votes": self.votes, "percentage": self.percentage}


@dataclass(frozen=True)
class ResultRecord:
    """Outcome of a single constituency.

    Attributes:
        constituency_id: Integer join key shared with the boundary features
        winner: Winning party label, None while the constituency is unreported
        votes: Votes received by the winner
        margin: Winning margin in percentage points
        total_votes: All valid votes cast in the constituency
        breakdown: Per-party results in published order
    """

    constituency_id: int
    winner: Optional[str] = None
    votes: Optional[int] = None
    margin: Optional[float] = None
    total_votes: Optional[int] = None
    breakdown: Tuple[PartyResult, ...] = field(default_factory=tuple)

    @property
    def reported(self) -> bool:
        return bool(self.winner)

    @classmethod
    def from_json(cls, constituency_id: int, raw: Mapping[str, Any]) -> "ResultRecord":
        """
        Build a record from one entry of the results JSON.

        The per-party breakdown is published under ``results``; ``breakdown``
        is accepted as well.

        Args:
            constituency_id: Normalized integer key of the entry
            raw: The entry's JSON object

        Returns:
            Parsed ResultRecord
        """
        rows = raw.get("results")
        if rows is None:
            rows = raw.get("breakdown") or []

        breakdown: List[PartyResult] = []
        for row in rows:
            if not isinstance(row, Mapping) or "party" not in row:
                logger.debug(f"Skipping malformed breakdown row for {constituency_id}: {row!r}")
                continue
            breakdown.append(
                PartyResult(
                    party=str(row["party"]),
                    votes=_as_int(row.get("votes")) or 0,
                    percentage=_as_float(row.get("percentage")) or 0.0,
                )
            )

        winner = raw.get("winner")
        return cls(
            constituency_id=constituency_id,
            winner=str(winner) if winner else None,
            votes=_as_int(raw.get("votes")),
            margin=_as_float(raw.get("margin")),
            total_votes=_as_int(raw.get("totalVotes")),
            breakdown=tuple(breakdown),
        )

    def to_properties(self) -> Dict[str, Any]:
        """Result fields as GeoJSON properties, omitting absent values."""
        properties: Dict[str, Any] = {"constituencyId": self.constituency_id}
        if self.winner is not None:
            properties["winner"] = self.winner
        if self.votes is not None:
            properties["votes"] = self.votes
        if self.margin is not None:
            properties["margin"] = self.margin
        if self.total_votes is not None:
            properties["totalVotes"] = self.total_votes
        if self.breakdown:
            properties["results"] = [row.to_dict() for row in self.breakdown]
        return properties


def normalize_constituency_id(value: Any) -> Optional[int]:
    """
    Coerce a constituency identifier serialized as number or string to int.

    Returns None for values that are not integral (e.g. "12a", 3.5, None).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if re.fullmatch(r"-?\d+", text, re.ASCII):
            return int(text)
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
