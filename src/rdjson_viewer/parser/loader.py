"""Report loader: turns rdjson / rdjsonl text into plain JSON values."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Any

from rdjson_viewer.models.errors import ParseError


class InputFormat(StrEnum):
    """Report format, always chosen by the caller (never sniffed from content).

    ``RDJSON`` is a single JSON document with a top-level ``diagnostics`` list;
    ``RDJSONL`` has one diagnostic object per line.
    """

    RDJSON = "rdjson"
    RDJSONL = "rdjsonl"


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are Python extensions, not JSON.
    raise ValueError(f"Unexpected token {name} in JSON")


class ReportLoader:
    """Parses report text without interpreting it.

    The result of :meth:`load_string` is a *candidate* collection: for
    rdjson it is whatever the document contains, for rdjsonl it is a
    ``{"diagnostics": [...]}`` wrapper around the parsed lines.  Structure
    is checked afterwards by :class:`~rdjson_viewer.parser.validator.ReportValidator`.
    """

    def load(self, path: Path, fmt: InputFormat = InputFormat.RDJSON) -> Any:
        """Load a report file (UTF-8)."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, fmt)

    def load_string(self, content: str, fmt: InputFormat = InputFormat.RDJSON) -> Any:
        """Parse report text in the given format.

        Raises :class:`ParseError` on the first malformed document or line;
        nothing is salvaged from a partially valid rdjsonl input.
        """
        trimmed = content.strip()
        if InputFormat(fmt) is InputFormat.RDJSONL:
            return {"diagnostics": self._load_lines(trimmed)}
        try:
            return self._decode(trimmed)
        except ValueError as exc:
            raise ParseError(str(exc)) from exc

    def _load_lines(self, content: str) -> list[Any]:
        diagnostics: list[Any] = []
        for line in content.split("\n"):
            if not line.strip():
                continue
            try:
                diagnostics.append(self._decode(line))
            except ValueError as exc:
                raise ParseError(f"Invalid JSON in line: {line}", line=line) from exc
        return diagnostics

    @staticmethod
    def _decode(text: str) -> Any:
        return json.loads(text, parse_constant=_reject_constant)
