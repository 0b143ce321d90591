import pytest

from dashboard.models import ResultRecord
from dashboard.summary import SUMMARY_COLUMNS, calculate_percentage, summarize


def test_unreported_records_are_excluded():
    records = [
        ResultRecord(1, winner="UPND", total_votes=1000),
        ResultRecord(2, winner="UPND", total_votes=2000),
        ResultRecord(3, winner=None, total_votes=500),
    ]
    summary = summarize(records)

    assert summary.party_counts == {"UPND": 2}
    assert summary.party_votes == {"UPND": 3000}
    assert summary.total_constituencies == 2
    assert summary.total_votes == 3000


@pytest.mark.parametrize(
    "records",
    [[], [ResultRecord(1), ResultRecord(2, winner="", total_votes=400)]],
)
def test_nothing_reporting_gives_zero_totals(records):
    summary = summarize(records)

    assert summary.total_constituencies == 0
    assert summary.total_votes == 0
    assert summary.rows() == []
    assert summary.is_empty
    assert summary.to_frame().empty


def test_no_results_loaded_gives_no_summary():
    assert summarize(None) is None


def test_mapping_input(results):
    summary = summarize(results)
    assert summary.party_counts == {"UPND": 2, "PF": 1}
    assert summary.total_votes == 52000 + 40000 + 31000


def test_rows_sorted_by_seats_with_percentages():
    records = [
        ResultRecord(1, winner="PF", total_votes=100),
        ResultRecord(2, winner="UPND", total_votes=300),
        ResultRecord(3, winner="UPND", total_votes=200),
    ]
    rows = summarize(records).rows()

    assert [row.party for row in rows] == ["UPND", "PF"]
    assert rows[0].seat_percentage == 66.7
    assert rows[0].vote_percentage == 83.3
    assert rows[1].seat_percentage == 33.3
    assert rows[1].vote_percentage == 16.7


def test_ties_keep_first_seen_order():
    records = [
        ResultRecord(1, winner="DP", total_votes=10),
        ResultRecord(2, winner="PF", total_votes=10),
        ResultRecord(3, winner="UPND", total_votes=10),
        ResultRecord(4, winner="UPND", total_votes=10),
    ]
    assert [row.party for row in summarize(records).rows()] == ["UPND", "DP", "PF"]


def test_missing_total_votes_count_as_zero():
    summary = summarize([ResultRecord(1, winner="PF"), ResultRecord(2, winner="PF", total_votes=50)])
    assert summary.party_votes == {"PF": 50}
    assert summary.party_counts == {"PF": 2}


def test_zero_votes_does_not_divide_by_zero():
    rows = summarize([ResultRecord(1, winner="PF", total_votes=0)]).rows()
    assert rows[0].vote_percentage == 0.0
    assert rows[0].seat_percentage == 100.0


def test_frame_and_leaders(results):
    summary = summarize(results)
    frame = summary.to_frame()

    assert list(frame.columns) == SUMMARY_COLUMNS
    assert frame.iloc[0]["Party"] == "UPND"
    assert frame.iloc[0]["Seats"] == 2
    assert [row.party for row in summary.leaders(1)] == ["UPND"]


def test_to_dict(results):
    data = summarize(results).to_dict()
    assert data["totalConstituencies"] == 3
    assert data["parties"][0]["party"] == "UPND"
    assert data["parties"][0]["seatPercentage"] == 66.7


def test_calculate_percentage():
    assert calculate_percentage(1, 3) == 33.3
    assert calculate_percentage(5, 0) == 0.0
