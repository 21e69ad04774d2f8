"""End-to-end tee sheet tests and configuration loading."""

import json

import pytest

from handicap import HandicapCalculator
from society_config import (
    ConfigError,
    EngineConfig,
    allowance_from_percent,
    load_config,
    recommended_allowance,
)
from society_models import Gender, PlayerHandicapProfile, TeeRating
from tee_grouping import format_tee_time
from tee_sheet import TeeSheetBuilder


TEE = TeeRating(par=70, course_rating=69.2, slope_rating=118)


@pytest.fixture
def profiles():
    return [
        PlayerHandicapProfile('p1', 'Alex', 5.4, Gender.MALE),
        PlayerHandicapProfile('p2', 'Blair', 12.1, Gender.MALE),
        PlayerHandicapProfile('p3', 'Casey', 18.0, Gender.MALE),
        PlayerHandicapProfile('p4', 'Drew', 24.6, Gender.MALE),
        PlayerHandicapProfile('p5', 'Eden', None, Gender.MALE),
    ]


class TestEndToEnd:
    def test_handicaps(self, profiles):
        players = HandicapCalculator(0.95).for_roster(profiles, TEE, None)
        # CH = HI x 118/113 - 0.8
        assert [p.course_handicap for p in players] == [5, 12, 18, 25, None]
        assert [p.playing_handicap for p in players] == [5, 11, 17, 24, None]

    def test_tee_sheet(self, profiles):
        builder = TeeSheetBuilder(HandicapCalculator(0.95), group_size=3, descending=True,
                                  start_time='08:00', interval_minutes=10)
        groups = builder.build(profiles, TEE, None)

        assert [len(g.players) for g in groups] == [3, 2]
        assert [format_tee_time(g.tee_time) for g in groups] == ['08:00', '08:10']
        assert [p.name for g in groups for p in g.players] == ['Drew', 'Casey', 'Blair', 'Alex', 'Eden']
        last = groups[-1].players[-1]
        assert last.course_handicap is None
        assert last.playing_handicap is None

    def test_no_tee_configured(self, profiles):
        groups = TeeSheetBuilder(HandicapCalculator(0.95)).build(profiles, None, None)
        assert all(p.course_handicap is None for g in groups for p in g.players)
        # Everyone missing, so the sheet falls back to name order
        assert [p.name for p in groups[0].players] == ['Alex', 'Blair', 'Casey']

    def test_manual_groups(self, profiles):
        builder = TeeSheetBuilder(HandicapCalculator(0.95), start_time='07:00')
        manual = {'p1': 1, 'p2': 2, 'p3': 1, 'p4': 2, 'p5': 2}
        groups = builder.build(profiles, TEE, None, manual_groups=manual)
        assert [[p.player_id for p in g.players] for g in groups] == [['p1', 'p3'], ['p2', 'p4', 'p5']]

    def test_from_config(self, profiles):
        config = EngineConfig(allowance=1.0, group_size=2, descending=False, start_time='09:00')
        groups = TeeSheetBuilder.from_config(config).build(profiles, TEE, None)
        assert [len(g.players) for g in groups] == [1, 2, 2]
        assert groups[0].players[0].name == 'Alex'
        assert groups[0].players[0].playing_handicap == 5
        assert format_tee_time(groups[2].tee_time) == '09:20'


class TestConfig:
    def test_defaults(self):
        config = load_config(environ={})
        assert config == EngineConfig()
        assert config.allowance == 0.95
        assert config.group_size == 4

    def test_file_then_env_then_overrides(self, tmp_path):
        path = tmp_path / 'society.json'
        path.write_text(json.dumps({'allowance': 0.9, 'group_size': 3, 'start_time': '08:30'}))
        environ = {'GOLF_SOCIETY_GROUP_SIZE': '2', 'GOLF_SOCIETY_DESCENDING': 'no'}

        config = load_config(str(path), environ=environ, start_time='10:00', interval_minutes=None)

        assert config.allowance == 0.9
        assert config.group_size == 2
        assert config.descending is False
        assert config.start_time == '10:00'
        assert config.interval_minutes == 10

    def test_percentage_allowance(self):
        assert load_config(environ={'GOLF_SOCIETY_ALLOWANCE': '85'}).allowance == pytest.approx(0.85)

    @pytest.mark.parametrize('overrides', [
        {'allowance': 0},
        {'allowance': 150},
        {'group_size': 0},
        {'handicap_basis': 'gross'},
        {'start_time': '25:00'},
        {'group_size': 'four'},
        {'descending': 'maybe'},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigError):
            load_config(environ={}, **overrides)

    def test_unknown_file_key(self, tmp_path):
        path = tmp_path / 'society.json'
        path.write_text(json.dumps({'colour': 'green'}))
        with pytest.raises(ConfigError):
            load_config(str(path), environ={})

    def test_unknown_override(self):
        with pytest.raises(ConfigError):
            load_config(environ={}, colour='green')

    def test_recommended_allowance(self):
        assert recommended_allowance('Fourball Better Ball') == 0.85
        assert recommended_allowance('foursomes') == 0.50
        assert recommended_allowance('Texas Scramble') == 0.75
        assert recommended_allowance('Stableford') == 0.95
        assert recommended_allowance(None) == 0.95

    def test_allowance_from_percent(self):
        assert allowance_from_percent(95) == pytest.approx(0.95)
        assert allowance_from_percent(None) is None
