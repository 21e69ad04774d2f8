#!/usr/bin/env python3
"""
Golf Society command line
Builds tee sheets and Order of Merit tables from local JSON or Excel files

Usage:
    golf-society tee-sheet roster.json --men-tee 72,72.5,127 --start 08:00
    golf-society standings results.xlsx --season 2025
"""

import argparse
import json
import logging
import os
import re
import sys

from event_scoring import filter_season
from excel_handler import (
    ExcelHandler,
    entry_from_record,
    normalize_record,
    profile_from_record,
    tee_from_record,
)
from order_of_merit import compute_order_of_merit
from society_config import load_config, recommended_allowance
from society_models import TeeRating
from stats_reporter import StatsReporter
from tee_grouping import parse_hole_numbers, validate_hole_numbers
from tee_sheet import TeeSheetBuilder

logger = logging.getLogger("golf-society")


def parse_tee_option(value):
    """'72,72.5,127' -> TeeRating (par, course rating, slope)"""
    parts = [part.strip() for part in value.split(',')]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("tee must be PAR,COURSE_RATING,SLOPE")
    tee = TeeRating.from_values(*parts)
    if tee is None:
        raise argparse.ArgumentTypeError(f"invalid tee rating {value!r}")
    return tee


def parse_holes_option(value):
    """'3, 7, 14' -> [3, 7, 14]; every entry must be a hole 1-18"""
    tokens = [token for token in re.split(r"[,\s]+", value.strip()) if token]
    try:
        holes = [int(token) for token in tokens]
    except ValueError:
        raise argparse.ArgumentTypeError(f"holes must be numbers, got {value!r}") from None
    if not validate_hole_numbers(holes):
        raise argparse.ArgumentTypeError(f"holes must be between 1 and 18, got {value!r}")
    return parse_hole_numbers(holes)


def _is_excel(path):
    return os.path.splitext(path)[1].lower() in ('.xlsx', '.xlsm')


def load_roster(path):
    """
    Roster and tees from a file
    Returns (profiles, men_tee, ladies_tee)
    """
    if _is_excel(path):
        handler = ExcelHandler(path)
        try:
            profiles = handler.get_roster()
            men_tee, ladies_tee = handler.get_tees()
        finally:
            handler.close()
        return profiles, men_tee, ladies_tee

    with open(path) as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {'players': data}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a list of players or an object with 'players'")

    profiles = [
        profile_from_record(normalize_record(record), row_number)
        for row_number, record in enumerate(data.get('players', []), start=1)
    ]
    men_tee = tee_from_record(normalize_record(data.get('men_tee') or {}), name='Men')
    ladies_tee = tee_from_record(normalize_record(data.get('ladies_tee') or {}), name='Ladies')
    return profiles, men_tee, ladies_tee


def load_results(path):
    """Event result entries from a file"""
    if _is_excel(path):
        handler = ExcelHandler(path)
        try:
            return handler.get_results()
        finally:
            handler.close()

    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('results', [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of results")

    entries = []
    for record in data:
        entry = entry_from_record(normalize_record(record))
        if entry is None:
            logger.warning("Skipping result without a member: %s", record)
            continue
        entries.append(entry)
    return entries


def run_tee_sheet(args):
    allowance = args.allowance
    if allowance is None and args.format:
        allowance = recommended_allowance(args.format)
        logger.info("Using %g allowance for %s", allowance, args.format)

    config = load_config(
        args.config,
        allowance=allowance,
        group_size=args.group_size,
        descending=False if args.ascending else None,
        handicap_basis=args.basis,
        start_time=args.start,
        interval_minutes=args.interval,
    )
    profiles, men_tee, ladies_tee = load_roster(args.roster)
    men_tee = args.men_tee or men_tee
    ladies_tee = args.ladies_tee or ladies_tee

    if men_tee is None and ladies_tee is None:
        logger.warning("No tee configured - course and playing handicaps will be blank")

    groups = TeeSheetBuilder.from_config(config).build(profiles, men_tee, ladies_tee)
    report = StatsReporter(args.title).generate_tee_sheet(
        groups, nearest_pin_holes=args.ntp, longest_drive_holes=args.ld)
    print(report, end='')
    return 0


def run_standings(args):
    history = load_results(args.results)
    if args.season:
        history = filter_season(history, args.season)
        logger.info("%d results in season %s", len(history), args.season)

    standings = compute_order_of_merit(history)
    print(StatsReporter(args.title).generate_leaderboard(standings, season=args.season), end='')
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog='golf-society',
                                     description='Golf society tee sheets and Order of Merit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--title', default=None, help='Society or event name for report headings')
    subparsers = parser.add_subparsers(dest='command', required=True)

    tee = subparsers.add_parser('tee-sheet', help='Group a roster into a timed tee sheet')
    tee.add_argument('roster', help='Roster file (.json or .xlsx)')
    tee.add_argument('--config', default=None, help='JSON config file')
    tee.add_argument('--men-tee', type=parse_tee_option, default=None,
                     help="Men's tee as PAR,COURSE_RATING,SLOPE")
    tee.add_argument('--ladies-tee', type=parse_tee_option, default=None,
                     help='Ladies tee as PAR,COURSE_RATING,SLOPE')
    tee.add_argument('--allowance', type=float, default=None,
                     help='Handicap allowance, e.g. 0.95 or 95')
    tee.add_argument('--format', default=None,
                     help='Competition format (fourball, foursomes, scramble...) to pick the allowance when --allowance is not given')
    tee.add_argument('--group-size', type=int, default=None, help='Players per group (default 4)')
    tee.add_argument('--ascending', action='store_true', help='Lowest handicaps out first')
    tee.add_argument('--basis', choices=['playing', 'course', 'index'], default=None,
                     help='Handicap to sort groups by (default playing)')
    tee.add_argument('--start', default=None, help='First tee time HH:MM')
    tee.add_argument('--interval', type=int, default=None, help='Minutes between groups (default 10)')
    tee.add_argument('--ntp', type=parse_holes_option, default=None,
                     help='Nearest the pin holes, e.g. "3, 7, 14"')
    tee.add_argument('--ld', type=parse_holes_option, default=None,
                     help='Longest drive holes')
    tee.set_defaults(func=run_tee_sheet)

    oom = subparsers.add_parser('standings', help='Order of Merit from event results')
    oom.add_argument('results', help='Results file (.json or .xlsx)')
    oom.add_argument('--season', type=int, default=None, help='Only count events in this year')
    oom.set_defaults(func=run_standings)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 2


if __name__ == '__main__':
    sys.exit(main())
