"""Structural validation of a parsed report."""

from __future__ import annotations

from typing import Any

from rdjson_viewer.models.diagnostic import DiagnosticCollection
from rdjson_viewer.models.errors import ValidationError


class ReportValidator:
    """Checks the one structural rule of a report: a list of JSON objects.

    Only the ``diagnostics`` shape is enforced.  Fields inside each entry are
    not checked; malformed optional fields load as absent.
    """

    def validate(self, candidate: Any) -> DiagnosticCollection:
        """Wrap an accepted candidate in a :class:`DiagnosticCollection`.

        Entries keep their order and unknown keys; malformed optional fields
        inside them load as ``None`` rather than failing validation.
        """
        if not isinstance(candidate, dict) or not isinstance(
            candidate.get("diagnostics"), list
        ):
            raise ValidationError("missing diagnostics array")
        for index, diagnostic in enumerate(candidate["diagnostics"]):
            if not isinstance(diagnostic, dict):
                raise ValidationError(
                    f"Invalid diagnostic object at index {index}", index=index
                )
        return DiagnosticCollection.model_validate(candidate)
