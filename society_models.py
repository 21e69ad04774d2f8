"""
Golf Society Data Model
Tee ratings, player profiles, tee groups and Order of Merit records
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Any, Optional, Tuple, Union


STANDARD_SLOPE = 113
MIN_SLOPE = 55
MAX_SLOPE = 155


def finite_or_none(value):
    """
    Coerce a numeric-ish value to float, or None if it is missing.

    NaN, +/-inf, empty strings and anything float() rejects all count as
    missing. Booleans are not handicaps.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"

    @classmethod
    def parse(cls, value):
        """Lenient parse: 'F', 'ladies', 'Female' -> FEMALE; unknown -> UNSPECIFIED"""
        if isinstance(value, Gender):
            return value
        if value is None:
            return cls.UNSPECIFIED
        text = str(value).strip().lower()
        if text in ("m", "male", "man", "men", "mens", "gent", "gents"):
            return cls.MALE
        if text in ("f", "female", "woman", "women", "womens", "lady", "ladies"):
            return cls.FEMALE
        return cls.UNSPECIFIED


@dataclass(frozen=True)
class TeeRating:
    """Rating block for one set of tees."""
    par: int
    course_rating: float
    slope_rating: int
    name: str = ""

    @classmethod
    def from_values(cls, par, course_rating, slope_rating, name="") -> Optional[TeeRating]:
        """
        Build a tee from raw values, or None if the block is unconfigured.

        All three fields must be present and finite, course rating must be
        positive and slope must sit in the WHS range 55-155. Par and slope
        are whole numbers, so 72.5 is rejected rather than truncated.
        """
        par = finite_or_none(par)
        course_rating = finite_or_none(course_rating)
        slope_rating = finite_or_none(slope_rating)
        if par is None or course_rating is None or slope_rating is None:
            return None
        if not par.is_integer() or not slope_rating.is_integer():
            return None
        tee = cls(par=int(par), course_rating=course_rating,
                  slope_rating=int(slope_rating), name=name or "")
        return tee if is_configured(tee) else None


def is_configured(tee) -> bool:
    """Single check for whether a tee can be used in a handicap calculation"""
    if tee is None:
        return False
    par = finite_or_none(tee.par)
    course_rating = finite_or_none(tee.course_rating)
    slope_rating = finite_or_none(tee.slope_rating)
    if par is None or course_rating is None or slope_rating is None:
        return False
    return course_rating > 0 and MIN_SLOPE <= slope_rating <= MAX_SLOPE


@dataclass(frozen=True)
class PlayerHandicapProfile:
    player_id: Any
    name: str
    handicap_index: Optional[float] = None
    gender: Gender = Gender.UNSPECIFIED


@dataclass(frozen=True)
class PlayerWithHandicap:
    player_id: Any
    name: str
    handicap_index: Optional[float]
    course_handicap: Optional[int]
    playing_handicap: Optional[int]
    gender: Gender = Gender.UNSPECIFIED


@dataclass(frozen=True)
class Group:
    """One tee group; tee_time stays None until tee times are assigned."""
    group_number: int
    players: Tuple[PlayerWithHandicap, ...]
    tee_time: Optional[time] = None


@dataclass(frozen=True)
class EventResultPointEntry:
    """
    One result record per (event, member).

    position is the finishing position handed over by the scoring module
    (1 = best). event_date is only used to filter a season.
    """
    event_id: Any
    member_id: Any
    member_name: Optional[str] = None
    points: float = 0.0
    oom_eligible: bool = True
    position: Optional[int] = None
    event_date: Optional[Union[date, str]] = None


@dataclass(frozen=True)
class OrderOfMeritEntry:
    member_id: Any
    member_name: str
    total_points: float
    wins: int
    played: int
    rank: int
