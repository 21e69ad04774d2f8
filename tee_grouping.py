"""
Tee Sheet Grouping
Splits an event roster into balanced tee groups and assigns tee times

- Groups hold at most group_size players (4 for a normal fourball sheet)
- The remainder is spread over the groups, so 9 players at 4 per group
  become 3/3/3 rather than 4/4/1, and the last group is never a single
- Players are sorted by handicap, missing handicaps always last
- Nearest-the-pin and longest-drive holes are parsed and shown as "3, 7, 14"
"""

import logging
import re
from collections import defaultdict
from dataclasses import replace
from datetime import time

from society_models import Group, finite_or_none

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

HANDICAP_BASES = {
    "playing": "playing_handicap",
    "course": "course_handicap",
    "index": "handicap_index",
}


class InvalidGroupAssignment(ValueError):
    """Manual group indices that do not form a usable tee sheet."""


def _handicap_attribute(basis):
    try:
        return HANDICAP_BASES[basis]
    except KeyError:
        raise ValueError(f"Unknown handicap basis {basis!r}, expected one of {sorted(HANDICAP_BASES)}") from None


def sort_players_by_handicap(players, descending=True, basis="playing"):
    """
    Sort players for grouping.

    Handicap in the requested direction, players without a handicap at the
    end either way. Ties go to name (case-insensitive) and then player id so
    repeated runs give the same sheet.
    """
    attribute = _handicap_attribute(basis)

    def sort_key(player):
        value = finite_or_none(getattr(player, attribute))
        if value is None:
            return (1, 0.0, (player.name or "").casefold(), str(player.player_id))
        return (0, -value if descending else value, (player.name or "").casefold(), str(player.player_id))

    return sorted(players, key=sort_key)


def calculate_group_sizes(total_players, group_size=4):
    """
    Size of each group for a roster.

    Uses the fewest groups that fit, then evens them out: leading groups
    take the extra player, trailing groups are one smaller. When the short
    groups would be singles (pairs with an odd roster) they go out first
    instead, so the last group is never a single.

    Examples:
        group_size=4: 5 -> [3, 2], 6 -> [3, 3], 9 -> [3, 3, 3], 10 -> [4, 3, 3]
        group_size=2: 5 -> [1, 2, 2]
    """
    if group_size < 1:
        raise ValueError(f"Group size must be at least 1, got {group_size}")
    if total_players <= 0:
        return []

    num_groups = -(-total_players // group_size)
    base, extra = divmod(total_players, num_groups)
    if base == 1 and extra:
        return [base] * (num_groups - extra) + [base + 1] * extra
    return [base + 1] * extra + [base] * (num_groups - extra)


def _manual_groups(players, manual_groups):
    """Build groups from caller-supplied indices, keeping roster order inside each group"""
    by_index = defaultdict(list)
    known_ids = set()

    for player in players:
        known_ids.add(player.player_id)
        if player.player_id not in manual_groups:
            raise InvalidGroupAssignment(f"No group index for player {player.player_id!r} ({player.name})")
        index = manual_groups[player.player_id]
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidGroupAssignment(f"Group index for player {player.player_id!r} must be an integer, got {index!r}")
        by_index[index].append(player)

    unknown = [player_id for player_id in manual_groups if player_id not in known_ids]
    if unknown:
        raise InvalidGroupAssignment(f"Group indices given for unknown players: {unknown}")

    if not by_index:
        return []

    indices = sorted(by_index)
    first = indices[0]
    if first not in (0, 1):
        raise InvalidGroupAssignment(f"Group indices must start at 0 or 1, got {first}")
    expected = list(range(first, first + len(indices)))
    if indices != expected:
        missing = sorted(set(expected) - set(indices))
        raise InvalidGroupAssignment(f"Group indices skip {missing}")

    return [
        Group(group_number=number, players=tuple(by_index[index]))
        for number, index in enumerate(indices, start=1)
    ]


def group_players(players, descending=True, group_size=4, basis="playing", manual_groups=None):
    """
    Partition players into tee groups.

    Args:
        players: List of PlayerWithHandicap
        descending: Highest handicap first when True
        group_size: Maximum players per group
        basis: Which handicap to sort on - "playing", "course" or "index"
        manual_groups: Optional {player_id: group index} override. When
            given, sorting and sizing are skipped and the assignment is used
            as-is, groups numbered 1..N in index order.

    Returns:
        List of Group (tee_time None)

    Raises:
        ValueError: group_size < 1 or unknown basis
        InvalidGroupAssignment: inconsistent manual_groups
    """
    players = list(players)

    if manual_groups is not None:
        return _manual_groups(players, manual_groups)

    sizes = calculate_group_sizes(len(players), group_size)
    _handicap_attribute(basis)
    if not players:
        return []

    sorted_players = sort_players_by_handicap(players, descending=descending, basis=basis)

    groups = []
    start = 0
    for number, size in enumerate(sizes, start=1):
        groups.append(Group(group_number=number, players=tuple(sorted_players[start:start + size])))
        start += size

    logger.debug("Grouped %d players into sizes %s", len(players), sizes)
    return groups


def parse_tee_time(value):
    """
    Parse a start time.

    Accepts datetime.time or "HH:MM". Returns None for a missing or
    unparseable value.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    if len(parts) != 2:
        logger.warning("Ignoring tee start time %r (expected HH:MM)", value)
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        logger.warning("Ignoring tee start time %r (expected HH:MM)", value)
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        logger.warning("Ignoring tee start time %r (out of range)", value)
        return None
    return time(hours, minutes)


def format_tee_time(value):
    if value is None:
        return "-"
    return value.strftime("%H:%M")


def assign_tee_times(groups, start_time, interval_minutes=10):
    """
    Give each group a tee time.

    Group i (0-based) tees off at start_time + i * interval_minutes, wrapping
    round midnight on a 24-hour clock. With no start time every tee_time is
    None.

    Returns:
        New list of Group with tee_time set
    """
    start = parse_tee_time(start_time)
    if start is None:
        return [replace(group, tee_time=None) for group in groups]

    start_minutes = start.hour * 60 + start.minute
    interval = int(interval_minutes)

    timed = []
    for i, group in enumerate(groups):
        tee_minutes = (start_minutes + i * interval) % MINUTES_PER_DAY
        timed.append(replace(group, tee_time=time(tee_minutes // 60, tee_minutes % 60)))
    return timed


HOLES_PER_ROUND = 18


def parse_hole_numbers(value):
    """
    Competition holes (nearest the pin, longest drive) from free text.

    "3, 7 14" -> [3, 7, 14]. Anything that is not a hole 1-18 is dropped,
    duplicates removed, result sorted. "" / "-" / None -> [].
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        tokens = value
    else:
        tokens = re.split(r"[,\s]+", str(value).strip())

    holes = set()
    for token in tokens:
        try:
            hole = int(str(token).strip())
        except ValueError:
            continue
        if 1 <= hole <= HOLES_PER_ROUND:
            holes.add(hole)
    return sorted(holes)


def validate_hole_numbers(holes):
    """True when every entry is a whole-number hole 1-18"""
    return all(
        isinstance(hole, int) and not isinstance(hole, bool) and 1 <= hole <= HOLES_PER_ROUND
        for hole in holes
    )


def format_hole_numbers(holes):
    """[14, 3, 7, 3] -> "3, 7, 14"; "-" when there are none"""
    if not holes:
        return "-"
    return ", ".join(str(hole) for hole in sorted(set(holes)))
