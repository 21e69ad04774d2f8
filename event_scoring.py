"""
Event Scoring
Turns one event's scores into finishing positions and Order of Merit points

Stableford: most points wins. Strokeplay: fewest strokes wins.
Tied scores share a position, so a tie for first gives two winners.
"""

import logging
import re
from collections import namedtuple
from datetime import date, datetime
from enum import Enum

from order_of_merit import assign_competition_ranks
from society_models import EventResultPointEntry, finite_or_none

logger = logging.getLogger(__name__)

# F1-style points by finishing position
OOM_POINTS_BY_POSITION = {
    1: 25,
    2: 18,
    3: 15,
    4: 12,
    5: 10,
    6: 8,
    7: 6,
    8: 4,
    9: 2,
    10: 1,
}

LeaderboardRow = namedtuple("LeaderboardRow", ["member_id", "score", "position"])


class ScoringFormat(Enum):
    STABLEFORD = "stableford"
    STROKEPLAY = "strokeplay"

    @classmethod
    def parse(cls, value):
        if isinstance(value, ScoringFormat):
            return value
        text = str(value or "").strip().lower().replace(" ", "").replace("_", "").replace("-", "")
        # "Both" events are ranked on Stableford
        if text in ("stableford", "both"):
            return cls.STABLEFORD
        if text in ("strokeplay", "stroke", "medal", "gross", "net"):
            return cls.STROKEPLAY
        raise ValueError(f"Unknown scoring format {value!r}")

    @property
    def higher_is_better(self):
        return self is ScoringFormat.STABLEFORD


def points_for_position(position, table=None):
    """OOM points for a finishing position, 0 outside the table"""
    table = OOM_POINTS_BY_POSITION if table is None else table
    if position is None:
        return 0
    return table.get(int(position), 0)


def event_leaderboard(scores, scoring_format):
    """
    Rank one event.

    Args:
        scores: dict {member_id: score}; missing or non-finite scores are
            left off the board
        scoring_format: ScoringFormat or a name ScoringFormat.parse accepts

    Returns:
        List of LeaderboardRow in finishing order, tied scores sharing a
        position
    """
    scoring_format = ScoringFormat.parse(scoring_format)

    board = []
    for member_id, raw_score in scores.items():
        score = finite_or_none(raw_score)
        if score is None:
            logger.debug("Skipping member %s with no score", member_id)
            continue
        board.append((member_id, score))

    if scoring_format.higher_is_better:
        board.sort(key=lambda row: -row[1])
    else:
        board.sort(key=lambda row: row[1])

    positions = assign_competition_ranks([score for _, score in board])
    return [
        LeaderboardRow(member_id=member_id, score=score, position=position)
        for (member_id, score), position in zip(board, positions)
    ]


def build_event_results(event_id, scores, scoring_format, names=None, oom_eligible=True,
                        event_date=None, points_table=None):
    """
    Result entries for one event, ready for the Order of Merit.

    Each member gets the points for their (possibly shared) position.
    """
    names = names or {}
    return [
        EventResultPointEntry(
            event_id=event_id,
            member_id=row.member_id,
            member_name=names.get(row.member_id),
            points=float(points_for_position(row.position, points_table)),
            oom_eligible=oom_eligible,
            position=row.position,
            event_date=event_date,
        )
        for row in event_leaderboard(scores, scoring_format)
    ]


def event_year(value):
    """
    Year of an event date.

    Accepts date/datetime or text starting YYYY-MM-DD. Returns None if no
    sensible year can be found.
    """
    if isinstance(value, (date, datetime)):
        return value.year
    if not value:
        return None

    text = str(value).strip()
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").year
    except ValueError:
        pass

    match = re.match(r"^(\d{4})", text)
    if match:
        year = int(match.group(1))
        if 1900 < year < 2100:
            return year
    return None


def filter_season(history, season_year):
    """Result entries whose event falls in season_year"""
    return [entry for entry in history if event_year(entry.event_date) == int(season_year)]
