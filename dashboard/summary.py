"""
Seat and vote tallies for the summary view.

Only reporting constituencies (records with a winner) are counted. Each
reporting constituency credits one seat and its total votes to the winning
party.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from loguru import logger

from .models import ResultRecord

SUMMARY_COLUMNS = ["Party", "Seats", "% of Seats", "Total Votes", "% of Votes"]


def calculate_percentage(numerator: float, denominator: float, round_digits: int = 1) -> float:
    """Percentage rounded for display; 0.0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return round(numerator / denominator * 100, round_digits)


@dataclass
class PartyTally:
    seats_won: int = 0
    total_votes: int = 0


@dataclass(frozen=True)
class PartyRow:
    """One line of the summary table."""

    party: str
    seats: int
    votes: int
    seat_percentage: float
    vote_percentage: float


@dataclass
class Summary:
    """
    Aggregated results.

    Attributes:
        per_party: Tallies keyed by party, in first-seen order
        total_votes_cast: Votes across all reporting constituencies
        total_constituencies_reporting: Constituencies with a declared winner
    """

    per_party: Dict[str, PartyTally] = field(default_factory=dict)
    total_votes_cast: int = 0
    total_constituencies_reporting: int = 0

    @property
    def party_counts(self) -> Dict[str, int]:
        return {party: tally.seats_won for party, tally in self.per_party.items()}

    @property
    def party_votes(self) -> Dict[str, int]:
        return {party: tally.total_votes for party, tally in self.per_party.items()}

    @property
    def total_votes(self) -> int:
        return self.total_votes_cast

    @property
    def total_constituencies(self) -> int:
        return self.total_constituencies_reporting

    @property
    def is_empty(self) -> bool:
        return self.total_constituencies_reporting == 0

    def rows(self) -> List[PartyRow]:
        """
        Table rows sorted by seats won, descending.

        Parties with equal seats keep the order in which they were first seen.
        """
        rows = [
            PartyRow(
                party=party,
                seats=tally.seats_won,
                votes=tally.total_votes,
                seat_percentage=calculate_percentage(
                    tally.seats_won, self.total_constituencies_reporting
                ),
                vote_percentage=calculate_percentage(tally.total_votes, self.total_votes_cast),
            )
            for party, tally in self.per_party.items()
        ]
        return sorted(rows, key=lambda row: row.seats, reverse=True)

    def leaders(self, count: int = 2) -> List[PartyRow]:
        """Top parties by seats, as shown on the headline cards."""
        return self.rows()[:count]

    def to_frame(self) -> pd.DataFrame:
        """Detailed results table as a DataFrame."""
        records = [
            {
                "Party": row.party,
                "Seats": row.seats,
                "% of Seats": row.seat_percentage,
                "Total Votes": row.votes,
                "% of Votes": row.vote_percentage,
            }
            for row in self.rows()
        ]
        return pd.DataFrame.from_records(records, columns=SUMMARY_COLUMNS)

    def to_dict(self) -> Dict[str, object]:
        return {
            "totalConstituencies": self.total_constituencies_reporting,
            "totalVotes": self.total_votes_cast,
            "parties": [
                {
                    "party": row.party,
                    "seats": row.seats,
                    "votes": row.votes,
                    "seatPercentage": row.seat_percentage,
                    "votePercentage": row.vote_percentage,
                }
                for row in self.rows()
            ],
        }


def summarize(
    records: Optional[Union[Mapping[int, ResultRecord], Iterable[ResultRecord]]],
) -> Optional[Summary]:
    """
    Reduce result records to a Summary.

    Args:
        records: Result records, either a mapping keyed by constituency id or
            any iterable of records. None means no results are loaded.

    Returns:
        Summary (zero totals when nothing has reported), or None when no
        results were supplied at all
    """
    if records is None:
        return None

    if isinstance(records, Mapping):
        records = records.values()

    summary = Summary()
    for record in records:
        if not record.winner:
            continue
        tally = summary.per_party.setdefault(record.winner, PartyTally())
        votes = record.total_votes or 0
        tally.seats_won += 1
        tally.total_votes += votes
        summary.total_votes_cast += votes
        summary.total_constituencies_reporting += 1

    logger.debug(
        f"📊 Summary: {summary.total_constituencies_reporting} constituencies reporting, "
        f"{summary.total_votes_cast:,} votes, {len(summary.per_party)} parties"
    )
    return summary
