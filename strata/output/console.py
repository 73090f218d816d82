"""
Strata Console Output
======================

Rich-based console output formatters for the Strata password strength
estimator: a colour-coded score meter, the winning match sequence,
crack-time estimates per attacker profile and the feedback text.

Uses the shared Strata console infrastructure for consistent styling.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import StrataConsole
from strata.analyzers.scorer import ATTACKER_PROFILES
from strata.core.models import Match, PatternKind, StrengthResult


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_SCORE_LABELS: dict[int, tuple[str, str]] = {
    0: ("TOO GUESSABLE", "bold white on red"),
    1: ("VERY GUESSABLE", "bold red"),
    2: ("SOMEWHAT GUESSABLE", "bold yellow"),
    3: ("SAFELY UNGUESSABLE", "bold green"),
    4: ("VERY UNGUESSABLE", "bold bright_green"),
}

_PATTERN_COLOURS: dict[PatternKind, str] = {
    PatternKind.DICTIONARY: "red",
    PatternKind.REVERSE_DICTIONARY: "red",
    PatternKind.L33T: "red",
    PatternKind.SPATIAL: "dark_orange",
    PatternKind.REPEAT: "dark_orange",
    PatternKind.SEQUENCE: "dark_orange",
    PatternKind.DATE: "yellow",
    PatternKind.YEAR: "yellow",
    PatternKind.DIGITS: "yellow",
    PatternKind.BRUTEFORCE: "green",
}


class StrataConsoleOutput:
    """Renders :class:`StrengthResult` objects on a Rich console.

    Usage::

        console = StrataConsole()
        output = StrataConsoleOutput(console)
        output.display_strength(engine.password_strength("hunter2"))
    """

    def __init__(self, console: Optional[StrataConsole] = None) -> None:
        self.console = console or StrataConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Strength Display
    # ------------------------------------------------------------------ #

    def display_strength(self, result: StrengthResult, *, show_password: bool = False) -> None:
        """Display a strength result with meter, decomposition and advice.

        Args:
            result:        Result from :meth:`StrataEngine.password_strength`.
            show_password: Print the password in clear instead of masked.
        """
        self.console.section("Password Strength")

        label, colour = _SCORE_LABELS[result.score]
        meter_width = 40
        filled = int(result.score / 4 * meter_width)

        meter = Text()
        meter.append("Score: ", style="bold")
        meter.append(f"{result.score}/4  ")
        meter.append("[", style="dim")
        for i in range(meter_width):
            if i < filled:
                if i < meter_width * 0.25:
                    meter.append("█", style="red")
                elif i < meter_width * 0.50:
                    meter.append("█", style="yellow")
                elif i < meter_width * 0.75:
                    meter.append("█", style="green")
                else:
                    meter.append("█", style="bright_green")
            else:
                meter.append("░", style="dim")
        meter.append("]  ", style="dim")
        meter.append(label, style=colour)
        self._rich.print(Panel(meter, title="Strength Meter", border_style="cyan"))

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")
        tbl.add_row(
            "Password", result.password if show_password else _mask(result.password)
        )
        tbl.add_row("Length", str(len(result.password)))
        tbl.add_row("Entropy", f"{result.entropy:.2f} bits")
        tbl.add_row("Crack Time", result.crack_time_display)
        tbl.add_row("Calculation Time", f"{result.calc_time * 1000:.2f} ms")
        self._rich.print(tbl)

        if result.match_sequence:
            self._display_sequence(result.match_sequence, show_password)

        crack_tbl = Table(
            title="Crack Time Estimates",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        crack_tbl.add_column("Attack Scenario", style="bold")
        crack_tbl.add_column("Speed", justify="right")
        crack_tbl.add_column("Estimated Time", justify="right")
        for profile, rate in ATTACKER_PROFILES.items():
            crack_tbl.add_row(
                profile.replace("_", " "),
                f"{rate:.2g} g/s",
                result.crack_times_display.get(profile, "-"),
            )
        self._rich.print(crack_tbl)

        feedback = result.feedback
        if feedback.warning:
            self._rich.print()
            self._rich.print(f"[bold yellow]⚠ {feedback.warning}[/bold yellow]")
        if feedback.suggestions:
            self._rich.print()
            self._rich.print("[bold]Suggestions:[/bold]")
            for suggestion in feedback.suggestions:
                self._rich.print(f"  [bright_cyan]•[/bright_cyan] {suggestion}")

    def _display_sequence(self, sequence: list[Match], show_password: bool) -> None:
        tbl = Table(
            title="Match Sequence",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Range", justify="right")
        tbl.add_column("Pattern", style="bold")
        tbl.add_column("Token")
        tbl.add_column("Entropy", justify="right")
        tbl.add_column("Details")

        for match in sequence:
            colour = _PATTERN_COLOURS.get(match.pattern, "white")
            token = match.token if show_password else _mask(match.token)
            tbl.add_row(
                f"{match.start}-{match.end}",
                f"[{colour}]{match.pattern.value}[/{colour}]",
                token,
                f"{match.entropy:.2f}",
                _details(match),
            )
        self._rich.print(tbl)


# ===================================================================== #
#  Helpers
# ===================================================================== #


def _mask(text: str) -> str:
    """Keep the first and last character, star out the rest."""
    if len(text) <= 2:
        return "*" * len(text)
    return text[0] + "*" * (len(text) - 2) + text[-1]


def _details(match: Match) -> str:
    pattern = match.pattern
    if pattern in (PatternKind.DICTIONARY, PatternKind.REVERSE_DICTIONARY, PatternKind.L33T):
        parts = [f"{match.dictionary_name} #{match.rank}"]
        if match.l33t_sub:
            parts.append(
                "subs " + ", ".join(f"{k}->{v}" for k, v in match.l33t_sub.items())
            )
        return "; ".join(parts)
    if pattern is PatternKind.SPATIAL:
        return f"{match.graph}, {match.turns} turns, {match.shifted_count} shifted"
    if pattern is PatternKind.REPEAT:
        return f"x{match.repeat_count}"
    if pattern is PatternKind.SEQUENCE:
        direction = "ascending" if match.ascending else "descending"
        return f"{match.sequence_name}, {direction}, step {match.step}"
    if pattern is PatternKind.DATE:
        return f"{match.year:04d}-{match.month:02d}-{match.day:02d}"
    if pattern is PatternKind.YEAR:
        return str(match.year)
    if pattern is PatternKind.BRUTEFORCE:
        return f"alphabet {match.cardinality}"
    return ""
