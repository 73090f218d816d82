"""
Strata Output Module
=====================

Console display and report generation for Strata strength results.
"""

from strata.output.console import StrataConsoleOutput
from strata.output.report import StrataReportGenerator

__all__ = [
    "StrataConsoleOutput",
    "StrataReportGenerator",
]
