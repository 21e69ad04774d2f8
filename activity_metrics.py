"""
Activity Metrics
Wins and events-played counts per member from an event result history
"""

import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


def results_by_event(history):
    """Group result entries by event_id, keeping first-seen event order"""
    events = {}
    for entry in history:
        events.setdefault(entry.event_id, []).append(entry)
    return events


def position_winners(entries):
    """
    Default winner rule: everyone holding the best finishing position.

    Positions come from the event's scoring module (Stableford or
    strokeplay). An event with no positions recorded has no winner.
    """
    placed = [entry for entry in entries if entry.position is not None]
    if not placed:
        return []
    best = min(entry.position for entry in placed)
    return [entry.member_id for entry in placed if entry.position == best]


def build_wins_map(history, winners_for_event=None):
    """
    Count wins per member across the whole history.

    Args:
        history: Iterable of EventResultPointEntry
        winners_for_event: Callable taking one event's entries and returning
            the winning member ids. Defaults to position_winners.

    Returns:
        dict {member_id: wins}; tied winners are each credited a win
    """
    winners_for_event = winners_for_event or position_winners
    wins = defaultdict(int)

    for event_id, entries in results_by_event(history).items():
        winners = set(winners_for_event(entries))
        if not winners:
            logger.debug("Event %s has no winner", event_id)
        for member_id in winners:
            wins[member_id] += 1

    return dict(wins)


def build_played_map(history):
    """
    Count OOM-eligible events each member has a result in.

    Any recorded result counts, zero points included.
    """
    played_events = defaultdict(set)
    for entry in history:
        if entry.oom_eligible:
            played_events[entry.member_id].add(entry.event_id)
    return {member_id: len(events) for member_id, events in played_events.items()}
