"""
Strata Report Generator
========================

Generates JSON reports from strength results. The JSON report provides
machine-readable structured output suitable for CI/CD pipelines and
account-policy tooling.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from strata import __version__
from strata.core.models import StrengthResult

# match fields that spell out part of the password
_PASSWORD_MATCH_FIELDS = ("token", "matched_word", "base_token", "l33t_sub", "day", "month", "year")


class StrataReportGenerator:
    """Serialises :class:`StrengthResult` objects to JSON."""

    def build(self, result: StrengthResult, *, include_password: bool = True) -> dict[str, Any]:
        """Build the report document for *result*.

        Args:
            result:           The strength result to report.
            include_password: When ``False`` the password and every match
                              field that reveals part of it are left out.

        Crack times too large for a float are reported as ``None``.
        """
        data = _finite(result.model_dump())
        if not include_password:
            data.pop("password", None)
            for match in data["match_sequence"]:
                for key in _PASSWORD_MATCH_FIELDS:
                    match.pop(key, None)

        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": "strata",
                "version": __version__,
            },
            "summary": {
                "score": result.score,
                "entropy_bits": _finite(result.entropy),
                "match_count": len(result.match_sequence),
                "patterns": [match.pattern.value for match in result.match_sequence],
                "warning": result.feedback.warning,
                "calc_time_seconds": result.calc_time,
            },
            "result": data,
        }

    def to_json(self, result: StrengthResult, *, include_password: bool = True) -> str:
        """Return the report for *result* as a JSON string."""
        return json.dumps(
            self.build(result, include_password=include_password),
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
            default=str,
        )

    def generate_json(
        self,
        result: StrengthResult,
        output_path: Path,
        *,
        include_password: bool = True,
    ) -> Path:
        """Write the JSON report for *result* to *output_path*.

        Returns:
            Path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            self.to_json(result, include_password=include_password),
            encoding="utf-8",
        )
        return output_path


def _finite(value: Any) -> Any:
    """Replace infinite and NaN floats with ``None``, recursively."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finite(item) for item in value]
    return value
