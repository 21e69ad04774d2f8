"""Tests for per-event positions, OOM points and the season filter."""

import math
from datetime import date, datetime

import pytest

from activity_metrics import build_wins_map
from event_scoring import (
    OOM_POINTS_BY_POSITION,
    ScoringFormat,
    build_event_results,
    event_leaderboard,
    event_year,
    filter_season,
    points_for_position,
)
from order_of_merit import compute_order_of_merit
from society_models import EventResultPointEntry


class TestScoringFormat:
    @pytest.mark.parametrize('value, expected', [
        ('Stableford', ScoringFormat.STABLEFORD),
        ('Both', ScoringFormat.STABLEFORD),
        ('strokeplay', ScoringFormat.STROKEPLAY),
        ('Stroke Play', ScoringFormat.STROKEPLAY),
        ('medal', ScoringFormat.STROKEPLAY),
        (ScoringFormat.STROKEPLAY, ScoringFormat.STROKEPLAY),
    ])
    def test_parse(self, value, expected):
        assert ScoringFormat.parse(value) is expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            ScoringFormat.parse('skins')


class TestLeaderboard:
    def test_stableford_highest_wins(self):
        board = event_leaderboard({'a': 32, 'b': 38, 'c': 35}, 'stableford')
        assert [(row.member_id, row.position) for row in board] == [('b', 1), ('c', 2), ('a', 3)]

    def test_strokeplay_lowest_wins(self):
        board = event_leaderboard({'a': 72, 'b': 80, 'c': 68}, ScoringFormat.STROKEPLAY)
        assert [(row.member_id, row.position) for row in board] == [('c', 1), ('a', 2), ('b', 3)]

    def test_ties_share_position(self):
        board = event_leaderboard({'a': 36, 'b': 36, 'c': 30}, 'stableford')
        assert [row.position for row in board] == [1, 1, 3]

    def test_missing_scores_left_off(self):
        board = event_leaderboard({'a': 36, 'b': None, 'c': math.nan}, 'stableford')
        assert [row.member_id for row in board] == ['a']

    def test_empty(self):
        assert event_leaderboard({}, 'stableford') == []


class TestPoints:
    def test_table(self):
        assert points_for_position(1) == 25
        assert points_for_position(10) == 1
        assert points_for_position(11) == 0
        assert points_for_position(None) == 0
        assert sum(OOM_POINTS_BY_POSITION.values()) == 101

    def test_custom_table(self):
        assert points_for_position(2, {1: 3, 2: 2, 3: 1}) == 2


class TestBuildEventResults:
    def test_entries(self):
        entries = build_event_results(
            'e1', {'a': 36, 'b': 36, 'c': 30}, 'stableford',
            names={'a': 'Ann', 'b': 'Ben'}, event_date='2025-05-01')
        assert [(e.member_id, e.member_name, e.points, e.position) for e in entries] == [
            ('a', 'Ann', 25.0, 1),
            ('b', 'Ben', 25.0, 1),
            ('c', None, 15.0, 3),
        ]
        assert all(e.event_id == 'e1' and e.oom_eligible for e in entries)

    def test_feeds_wins_and_standings(self):
        history = (
            build_event_results('e1', {'a': 36, 'b': 36, 'c': 30}, 'stableford')
            + build_event_results('e2', {'a': 75, 'b': 71, 'c': 79}, 'strokeplay')
        )
        assert build_wins_map(history) == {'a': 1, 'b': 2}
        table = compute_order_of_merit(history)
        assert [(e.member_id, e.total_points, e.wins, e.rank) for e in table] == [
            ('b', 50.0, 2, 1),
            ('a', 43.0, 1, 2),
            ('c', 30.0, 0, 3),
        ]


class TestSeason:
    @pytest.mark.parametrize('value, expected', [
        (date(2024, 6, 1), 2024),
        (datetime(2025, 1, 2, 9, 30), 2025),
        ('2025-04-19', 2025),
        ('2025-04-19T08:00:00Z', 2025),
        ('2023', 2023),
        ('', None),
        (None, None),
        ('next week', None),
    ])
    def test_event_year(self, value, expected):
        assert event_year(value) == expected

    def test_filter_season(self):
        history = [
            EventResultPointEntry('e1', 'a', points=5, event_date='2024-09-01'),
            EventResultPointEntry('e2', 'a', points=7, event_date=date(2025, 3, 1)),
            EventResultPointEntry('e3', 'a', points=9),
        ]
        assert [e.event_id for e in filter_season(history, 2025)] == ['e2']
