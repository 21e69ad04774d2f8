"""
Statistics Report Generator
Plain-text tee sheets and Order of Merit tables for the society
"""

from handicap import format_handicap, format_handicap_index
from tee_grouping import format_hole_numbers, format_tee_time


class StatsReporter:
    def __init__(self, title=None):
        self.title = title

    def generate_tee_sheet(self, groups, nearest_pin_holes=None, longest_drive_holes=None):
        """
        Tee sheet: one block per group with each player's HI / CH / PH

        When either list of competition holes is given both are listed under
        the heading, "-" for an empty one.
        """
        if not groups:
            return "No players on the tee sheet."

        report = ""
        if self.title:
            report += f"⛳ {self.title} - Tee Sheet\n"
            report += "=" * 50 + "\n\n"

        if nearest_pin_holes is not None or longest_drive_holes is not None:
            report += f"Nearest the pin: {format_hole_numbers(nearest_pin_holes)}\n"
            report += f"Longest drive:   {format_hole_numbers(longest_drive_holes)}\n\n"

        for group in groups:
            report += f"Group {group.group_number}  {format_tee_time(group.tee_time)}\n"
            for player in group.players:
                report += f"   {player.name:<24}"
                report += f" HI {format_handicap_index(player.handicap_index):>5}"
                report += f" | CH {format_handicap(player.course_handicap):>3}"
                report += f" | PH {format_handicap(player.playing_handicap):>3}\n"
            report += "\n"

        return report.rstrip("\n") + "\n"

    def generate_leaderboard(self, standings, season=None):
        """
        Order of Merit table. Shared ranks are shown with a leading "="
        """
        if not standings:
            return "No Order of Merit points recorded yet."

        heading = "Order of Merit"
        if season:
            heading = f"{season} {heading}"
        if self.title:
            heading = f"{self.title} - {heading}"

        report = f"🏆 {heading} 🏆\n"
        report += "=" * 50 + "\n\n"
        report += f"{'Pos':<5} {'Member':<24} {'Pts':>7} {'W':>3} {'P':>3}\n"
        report += "-" * 50 + "\n"

        ranks = [entry.rank for entry in standings]
        for entry in standings:
            tied = ranks.count(entry.rank) > 1
            position = f"={entry.rank}" if tied else str(entry.rank)
            report += f"{position:<5} {entry.member_name:<24} {entry.total_points:>7g}"
            report += f" {entry.wins:>3} {entry.played:>3}\n"

        return report
