"""
Order of Merit
Season standings from event results: points, wins, played and 1224 ranks

Standings are a derived view. Nothing is accumulated between calls, so a
corrected result simply shows up the next time the table is computed.
"""

import logging
from dataclasses import replace

import pandas as pd

from activity_metrics import build_played_map, build_wins_map
from society_models import OrderOfMeritEntry, finite_or_none

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown"

# Sums are rounded before comparing so float noise can't split a tie
POINTS_PRECISION = 9


def order_of_merit_sort_key(entry):
    """
    The Order of Merit comparator.

    Points (high first), then wins (high first), then member name A-Z
    ignoring case. Member id is the last resort so two members with the
    same name still come out in a fixed order.
    """
    return (
        -entry.total_points,
        -entry.wins,
        (entry.member_name or "").casefold(),
        str(entry.member_id),
    )


def assign_competition_ranks(keys):
    """
    Standard competition ("1224") ranking for keys already in finishing order.

    Equal keys share a rank; the next key is ranked by its 1-based position.
    [10, 10, 8, 8, 5] -> [1, 1, 3, 3, 5]
    """
    ranks = []
    previous = object()
    rank = 0
    for position, key in enumerate(keys, start=1):
        if key != previous:
            rank = position
            previous = key
        ranks.append(rank)
    return ranks


def _points_table(history):
    """Total OOM points per member, zero totals dropped"""
    frame = pd.DataFrame({
        "member_id": [entry.member_id for entry in history],
        "points": [finite_or_none(entry.points) or 0.0 for entry in history],
        "oom_eligible": [bool(entry.oom_eligible) for entry in history],
    })
    eligible = frame[frame["oom_eligible"]]
    if eligible.empty:
        return pd.Series(dtype=float)

    totals = eligible.groupby("member_id", sort=False)["points"].sum().round(POINTS_PRECISION)
    return totals[totals != 0]


def _member_names(history):
    """First non-empty name recorded for each member"""
    names = {}
    for entry in history:
        if entry.member_name and entry.member_id not in names:
            names[entry.member_id] = entry.member_name
    return names


def compute_order_of_merit(history, winners_for_event=None):
    """
    Compute the ranked Order of Merit.

    Args:
        history: Iterable of EventResultPointEntry
        winners_for_event: Optional winner rule passed to build_wins_map

    Returns:
        List of OrderOfMeritEntry in finishing order, members on zero
        points left off. Empty history gives an empty list.
    """
    history = list(history)
    if not history:
        return []

    totals = _points_table(history)
    if totals.empty:
        return []

    wins = build_wins_map(history, winners_for_event)
    played = build_played_map(history)
    names = _member_names(history)
    # groupby hands back numpy scalars for numeric ids
    member_ids = {entry.member_id: entry.member_id for entry in history}

    standings = [
        OrderOfMeritEntry(
            member_id=member_ids[member_id],
            member_name=names.get(member_id, UNKNOWN_MEMBER),
            total_points=float(total),
            wins=wins.get(member_id, 0),
            played=played.get(member_id, 0),
            rank=0,
        )
        for member_id, total in totals.items()
    ]
    standings.sort(key=order_of_merit_sort_key)

    ranks = assign_competition_ranks([(entry.total_points, entry.wins) for entry in standings])
    standings = [replace(entry, rank=rank) for entry, rank in zip(standings, ranks)]

    logger.debug("Order of Merit: %d members from %d results", len(standings), len(history))
    return standings
