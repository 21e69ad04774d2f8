"""
Excel Handler for Society Spreadsheets
Reads rosters, tee ratings and event results from an Excel workbook

Expected sheets (header row first, column order free, headers case-insensitive):
    Roster:  ID | Name | Handicap Index | Gender
    Tees:    Tee | Par | Course Rating | Slope Rating     (optional)
    Results: Event | Date | Member ID | Member | Points | OOM | Position
"""

import logging
import os
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from society_models import (
    EventResultPointEntry,
    Gender,
    PlayerHandicapProfile,
    TeeRating,
    finite_or_none,
)

logger = logging.getLogger(__name__)

# Accepted header spellings -> field
HEADER_ALIASES = {
    'id': 'id',
    'player_id': 'id',
    'player': 'name',
    'name': 'name',
    'handicap_index': 'handicap_index',
    'index': 'handicap_index',
    'hi': 'handicap_index',
    'gender': 'gender',
    'sex': 'gender',
    'tee': 'tee',
    'par': 'par',
    'course_rating': 'course_rating',
    'rating': 'course_rating',
    'slope_rating': 'slope_rating',
    'slope': 'slope_rating',
    'event': 'event_id',
    'event_id': 'event_id',
    'date': 'event_date',
    'member_id': 'member_id',
    'member': 'member_name',
    'member_name': 'member_name',
    'points': 'points',
    'oom': 'oom_eligible',
    'oom_eligible': 'oom_eligible',
    'position': 'position',
    'pos': 'position',
}


def normalize_header(value):
    text = str(value or '').strip().lower().replace(' ', '_').replace('-', '_')
    return HEADER_ALIASES.get(text, text)


def _as_bool(value, default=True):
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ('y', 'yes', 'true', '1', 'x')


def _as_position(value):
    number = finite_or_none(value)
    return None if number is None else int(number)


def _as_id(value):
    # Excel hands whole numbers back as floats
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_record(record):
    """Re-key a dict (JSON object or sheet row) by normalised header"""
    return {normalize_header(key): value for key, value in record.items()}


def profile_from_record(row, row_number=None):
    """PlayerHandicapProfile from a normalised roster row"""
    name = str(row.get('name') or '').strip()
    player_id = _as_id(row.get('id'))
    if player_id in (None, ''):
        player_id = name or row_number
    return PlayerHandicapProfile(
        player_id=player_id,
        name=name,
        handicap_index=finite_or_none(row.get('handicap_index')),
        gender=Gender.parse(row.get('gender')),
    )


def tee_from_record(row, name=''):
    """TeeRating from a normalised row, None if the block is incomplete"""
    if not row:
        return None
    return TeeRating.from_values(row.get('par'), row.get('course_rating'),
                                 row.get('slope_rating'), name=row.get('tee') or name)


def entry_from_record(row):
    """EventResultPointEntry from a normalised results row, None without a member"""
    member_id = _as_id(row.get('member_id'))
    member_name = row.get('member_name')
    if member_id in (None, ''):
        member_id = member_name
    if member_id in (None, ''):
        return None
    event_date = row.get('event_date')
    return EventResultPointEntry(
        event_id=_as_id(row.get('event_id')),
        member_id=member_id,
        member_name=str(member_name).strip() if member_name else None,
        points=finite_or_none(row.get('points')) or 0.0,
        oom_eligible=_as_bool(row.get('oom_eligible')),
        position=_as_position(row.get('position')),
        event_date=event_date.date() if hasattr(event_date, 'date') else event_date,
    )


class ExcelHandler:
    def __init__(self, file_path):
        self.file_path = file_path
        self.workbook = None

    def load_workbook(self):
        """Open the workbook read-only (cell values, not formulas)"""
        if not os.path.exists(self.file_path):
            raise FileNotFoundError(f"Workbook not found: {self.file_path}")
        if self.workbook is None:
            try:
                self.workbook = load_workbook(self.file_path, read_only=True, data_only=True)
            except (BadZipFile, InvalidFileException) as e:
                raise ValueError(f"{self.file_path}: not a readable workbook") from e
        return self.workbook

    def close(self):
        if self.workbook is not None:
            self.workbook.close()
            self.workbook = None

    def _sheet(self, name, required=True):
        wb = self.load_workbook()
        for title in wb.sheetnames:
            if title.strip().lower() == name.lower():
                return wb[title]
        if required:
            # Single-sheet workbooks don't need the sheet named
            return wb.worksheets[0]
        return None

    def read_rows(self, sheet_name, required=True):
        """
        Rows of a sheet as dicts keyed by normalised header.

        Blank rows are skipped.
        """
        sheet = self._sheet(sheet_name, required=required)
        if sheet is None:
            return []

        rows = sheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        keys = [normalize_header(cell) for cell in header]

        records = []
        for row in rows:
            if row is None or all(cell is None or cell == '' for cell in row):
                continue
            records.append(dict(zip(keys, row)))
        return records

    def get_roster(self):
        """
        Players from the Roster sheet
        Returns list of PlayerHandicapProfile
        """
        profiles = [
            profile_from_record(row, row_number)
            for row_number, row in enumerate(self.read_rows('Roster'), start=1)
        ]
        logger.debug("Read %d players from %s", len(profiles), self.file_path)
        return profiles

    def get_tees(self):
        """
        Men's and ladies tees from the optional Tees sheet
        Returns (men_tee, ladies_tee), either may be None
        """
        men_tee = None
        ladies_tee = None
        for row in self.read_rows('Tees', required=False):
            label = str(row.get('tee') or '').strip()
            # "Men's White" -> "Mens White"
            words = label.replace("'", '').replace('\u2019', '').split()
            kind = Gender.parse(words[0] if words else None)
            if kind is Gender.FEMALE:
                ladies_tee = tee_from_record(row)
            elif kind is Gender.MALE:
                men_tee = tee_from_record(row)
            else:
                logger.warning("Ignoring tee row %r (name should start with Men or Ladies)", label)
        return men_tee, ladies_tee

    def get_results(self):
        """
        Event results from the Results sheet
        Returns list of EventResultPointEntry
        """
        entries = []
        for row in self.read_rows('Results'):
            entry = entry_from_record(row)
            if entry is None:
                logger.warning("Skipping result row without a member: %s", row)
                continue
            entries.append(entry)
        logger.debug("Read %d results from %s", len(entries), self.file_path)
        return entries
