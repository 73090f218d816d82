"""
Strata Console Interface
=========================

Rich-powered console abstraction providing a unified presentation layer for
the Strata CLI: a banner, section headers and the success and error
messages printed by the subcommands.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

_STRATA_THEME = Theme(
    {
        "strata.banner": "bold bright_cyan",
        "strata.section": "bold bright_magenta",
        "strata.success": "bold green",
        "strata.error": "bold red",
        "strata.dim": "dim white",
    }
)

_BANNER_ART = r"""[bright_cyan]
  ___ _____ ___    _ _____ _
 / __|_   _| _ \  /_\_   _/_\
 \__ \ | | |   / / _ \| |/ _ \
 |___/ |_| |_|_\/_/ \_\_/_/ \_\
[/bright_cyan]"""

_TAGLINE = "Pattern-aware password strength estimation"


class StrataConsole:
    """Unified console interface for the Strata CLI.

    Usage::

        con = StrataConsole()
        con.banner(version="1.0.0")
        con.section("Match Sequence")
        con.success("Dictionary updated")
    """

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for export.
        """
        self._console = Console(
            theme=_STRATA_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    def banner(self, version: str) -> None:
        """Display the ASCII-art banner with the version beneath it."""
        subtitle = (
            f"[strata.banner]{_TAGLINE}[/strata.banner]\n"
            f"[strata.dim]Version: {version}[/strata.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(f"  {title}  ", style="strata.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[strata.success][✔] SUCCESS:[/strata.success] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[strata.error][✘] ERROR:[/strata.error] {message}"
        )
