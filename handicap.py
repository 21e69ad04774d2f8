"""
World Handicap System (WHS) Calculator
Handicap Index -> Course Handicap -> Playing Handicap for society events

Course Handicap  = Handicap Index x (Slope Rating / 113) + (Course Rating - Par)
Playing Handicap = Course Handicap x Handicap Allowance

A missing index or unconfigured tee is an everyday state (new member,
event not set up yet) and comes back as None. Zero is a real handicap.
"""

import logging
import math
from collections import namedtuple

from society_models import (
    STANDARD_SLOPE,
    PlayerWithHandicap,
    finite_or_none,
    is_configured,
)
from tee_selector import select_tee_by_gender

logger = logging.getLogger(__name__)

MISSING_PLACEHOLDER = "-"

HandicapResult = namedtuple("HandicapResult", ["handicap_index", "course_handicap", "playing_handicap"])


def round_half_up(value):
    """Round to the nearest integer, halves go up (2.5 -> 3, -2.5 -> -2)"""
    return int(math.floor(value + 0.5))


def is_valid_handicap(value):
    return finite_or_none(value) is not None


def calc_course_handicap(handicap_index, tee):
    """
    Calculate Course Handicap for a tee.

    Args:
        handicap_index: Player's Handicap Index (negative for plus players)
        tee: TeeRating, or None if the event has no tee configured

    Returns:
        Course Handicap as int, or None if the index or tee is missing
    """
    index = finite_or_none(handicap_index)
    if index is None or not is_configured(tee):
        return None

    slope = float(tee.slope_rating)
    course_rating = float(tee.course_rating)
    par = float(tee.par)

    return round_half_up(index * (slope / STANDARD_SLOPE) + (course_rating - par))


def calc_playing_handicap(course_handicap, allowance):
    """
    Calculate Playing Handicap from a Course Handicap.

    Args:
        course_handicap: Course Handicap, or None
        allowance: Competition allowance as a fraction in (0, 1], e.g. 0.95

    Returns:
        Playing Handicap as int, or None if either input is missing

    Raises:
        ValueError: allowance is a number outside (0, 1]
    """
    course_handicap = finite_or_none(course_handicap)
    allowance = finite_or_none(allowance)
    if course_handicap is None or allowance is None:
        return None
    if not 0 < allowance <= 1:
        raise ValueError(f"Handicap allowance must be in (0, 1], got {allowance}")

    return round_half_up(course_handicap * allowance)


def calculate_handicaps(handicap_index, tee, allowance):
    """Course and Playing Handicap in one go"""
    course_handicap = calc_course_handicap(handicap_index, tee)
    return HandicapResult(
        handicap_index=finite_or_none(handicap_index),
        course_handicap=course_handicap,
        playing_handicap=calc_playing_handicap(course_handicap, allowance),
    )


def format_handicap(value, decimals=0, signed=False):
    """
    Display text for a handicap value.

    Returns "-" when the value is missing, otherwise fixed-decimal text.
    With signed=True positive values get a leading "+".
    """
    number = finite_or_none(value)
    if number is None:
        return MISSING_PLACEHOLDER
    text = f"{number:.{int(decimals)}f}"
    if signed and number > 0:
        text = "+" + text
    return text


def format_handicap_index(value):
    return format_handicap(value, decimals=1)


class HandicapCalculator:
    """Applies one event's allowance to a roster."""

    def __init__(self, allowance):
        self.allowance = allowance

    def for_player(self, profile, men_tee, ladies_tee):
        """
        Work out a player's handicaps for the event.

        Args:
            profile: PlayerHandicapProfile
            men_tee: Men's TeeRating or None
            ladies_tee: Ladies TeeRating or None

        Returns:
            PlayerWithHandicap (course/playing handicap None when unknown)
        """
        tee = select_tee_by_gender(profile.gender, men_tee, ladies_tee)
        result = calculate_handicaps(profile.handicap_index, tee, self.allowance)

        if result.course_handicap is None:
            logger.debug("No course handicap for %s (index=%s, tee=%s)",
                         profile.name, profile.handicap_index, tee)

        return PlayerWithHandicap(
            player_id=profile.player_id,
            name=profile.name,
            handicap_index=result.handicap_index,
            course_handicap=result.course_handicap,
            playing_handicap=result.playing_handicap,
            gender=profile.gender,
        )

    def for_roster(self, profiles, men_tee, ladies_tee):
        return [self.for_player(profile, men_tee, ladies_tee) for profile in profiles]


if __name__ == "__main__":
    from society_models import TeeRating

    tee = TeeRating(par=72, course_rating=72.5, slope_rating=127, name="White")
    for index in (10, 0, -2.3, None):
        result = calculate_handicaps(index, tee, 0.95)
        print(f"HI {format_handicap_index(result.handicap_index):>5}"
              f"  CH {format_handicap(result.course_handicap):>3}"
              f"  PH {format_handicap(result.playing_handicap):>3}")
