"""
Tee Sheet Builder
Roster + tee configuration -> handicaps -> groups -> tee times
"""

import logging

from handicap import HandicapCalculator
from tee_grouping import assign_tee_times, group_players

logger = logging.getLogger(__name__)


class TeeSheetBuilder:
    def __init__(self, handicap_calculator, group_size=4, descending=True, basis="playing",
                 start_time=None, interval_minutes=10):
        self.calc = handicap_calculator
        self.group_size = group_size
        self.descending = descending
        self.basis = basis
        self.start_time = start_time
        self.interval_minutes = interval_minutes

    @classmethod
    def from_config(cls, config):
        return cls(
            HandicapCalculator(config.allowance),
            group_size=config.group_size,
            descending=config.descending,
            basis=config.handicap_basis,
            start_time=config.start_time,
            interval_minutes=config.interval_minutes,
        )

    def build(self, profiles, men_tee, ladies_tee, manual_groups=None):
        """
        Build the tee sheet for an event.

        Args:
            profiles: List of PlayerHandicapProfile
            men_tee: Men's TeeRating or None
            ladies_tee: Ladies TeeRating or None
            manual_groups: Optional {player_id: group index} override

        Returns:
            List of Group with handicaps worked out and tee times assigned
        """
        players = self.calc.for_roster(profiles, men_tee, ladies_tee)

        missing = sum(1 for player in players if player.course_handicap is None)
        if missing:
            logger.info("%d of %d players have no course handicap", missing, len(players))

        groups = group_players(
            players,
            descending=self.descending,
            group_size=self.group_size,
            basis=self.basis,
            manual_groups=manual_groups,
        )
        return assign_tee_times(groups, self.start_time, self.interval_minutes)
