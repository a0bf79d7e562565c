"""Severity statistics over the full (unfiltered) diagnostic collection."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from rdjson_viewer.models.diagnostic import SEVERITY_ORDER, Diagnostic


@dataclass
class DiagnosticStats:
    total: int = 0
    per_severity: dict[str, int] = field(default_factory=dict)

    def display_items(self) -> Iterator[tuple[str, int]]:
        """Known severities with a non-zero count, always ERROR, WARNING, INFO."""
        for severity in SEVERITY_ORDER:
            count = self.per_severity.get(severity, 0)
            if count:
                yield severity.value, count


def aggregate(diagnostics: Sequence[Diagnostic]) -> DiagnosticStats:
    """Count all diagnostics, and each severity value that is present."""
    counts = Counter(d.severity for d in diagnostics if d.severity is not None)
    return DiagnosticStats(total=len(diagnostics), per_severity=dict(counts))
