"""Viewer state machine: one explicit state object, one transition per user action.

``ViewerState`` holds ``{raw_text, format, base_path, collection, error,
filter}``.  Every derived view (facets, statistics, filtered list, cards)
is recomputed from the full collection in :meth:`ViewerState.snapshot`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from rdjson_viewer.models.diagnostic import Diagnostic, DiagnosticCollection
from rdjson_viewer.models.errors import DecodeError, ReportError
from rdjson_viewer.parser.loader import InputFormat, ReportLoader
from rdjson_viewer.parser.validator import ReportValidator
from rdjson_viewer.service.cards import DiagnosticCard, build_card
from rdjson_viewer.service.filtering import DiagnosticFilter, Facets, apply_filter, facets
from rdjson_viewer.service.query_params import (
    BASE_PATH_PARAM,
    RDJSON_PARAM,
    RDJSONL_PARAM,
    decode_param,
    encode_query,
)
from rdjson_viewer.service.statistics import DiagnosticStats, aggregate

logger = logging.getLogger("rdjson_viewer.viewer")

ERROR_PREFIX = "Invalid format: "

# Stateless, safe to share.
_loader = ReportLoader()
_validator = ReportValidator()


@dataclass
class ParseOutcome:
    """Either a validated collection or a user-facing error message."""

    collection: DiagnosticCollection | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.collection is not None


def parse_and_validate(raw_text: str, fmt: InputFormat | str) -> ParseOutcome:
    """Parse then validate; every failure becomes an ``Invalid format: ...`` message."""
    fmt = InputFormat(fmt)
    logger.debug("parsing %s input:\n%s", fmt, raw_text)
    try:
        collection = _validator.validate(_loader.load_string(raw_text, fmt))
    except ReportError as exc:
        logger.warning("%s input rejected: %s", fmt, exc)
        return ParseOutcome(error=f"{ERROR_PREFIX}{exc}")
    logger.info(
        "parsed %s input (length=%d, diagnostics=%d)",
        fmt, len(raw_text), len(collection.diagnostics),
    )
    return ParseOutcome(collection=collection)


@dataclass
class ViewerSnapshot:
    """What the presentation layer consumes after each action."""

    collection: DiagnosticCollection | None
    error: str | None
    facets: Facets
    filter: DiagnosticFilter
    stats: DiagnosticStats | None
    diagnostics: list[Diagnostic]
    cards: list[DiagnosticCard]


@dataclass
class ViewerState:
    raw_text: str = ""
    format: InputFormat = InputFormat.RDJSON
    base_path: str = ""
    collection: DiagnosticCollection | None = None
    error: str | None = None
    filter: DiagnosticFilter = field(default_factory=DiagnosticFilter)

    # -- transitions ---------------------------------------------------------

    def change_input(self, raw_text: str) -> None:
        self.raw_text = raw_text

    def change_format(self, fmt: InputFormat | str) -> None:
        self.format = InputFormat(fmt)

    def change_base_path(self, base_path: str) -> None:
        self.base_path = base_path

    def change_filter(
        self,
        severity: str | None = None,
        source: str | None = None,
        rule: str | None = None,
    ) -> None:
        """Update the given filter fields; ``None`` leaves a field unchanged."""
        updates = {
            key: value
            for key, value in (("severity", severity), ("source", source), ("rule", rule))
            if value is not None
        }
        self.filter = self.filter.model_copy(update=updates)

    def submit(self) -> ParseOutcome:
        """Parse the current input, replacing the collection wholesale.

        On failure the previous collection is cleared, never left stale.
        """
        outcome = parse_and_validate(self.raw_text, self.format)
        self.collection = outcome.collection
        self.error = outcome.error
        return outcome

    def load(self, raw_text: str, fmt: InputFormat | str) -> ParseOutcome:
        """Set input and format, then submit."""
        self.change_input(raw_text)
        self.change_format(fmt)
        return self.submit()

    # -- URL boundary --------------------------------------------------------

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> ViewerState:
        """Initial state from ``rdjson`` / ``rdjsonl`` / ``base_path_url``.

        ``rdjson`` wins over ``rdjsonl``.  A decode failure records its fixed
        message as the error and does not abort the rest of initialization.
        """
        state = cls()
        base_param = params.get(BASE_PATH_PARAM)
        if base_param:
            try:
                state.base_path = decode_param(base_param, BASE_PATH_PARAM)
            except DecodeError as exc:
                logger.warning("ignoring %s", exc)

        for name, fmt in ((RDJSON_PARAM, InputFormat.RDJSON), (RDJSONL_PARAM, InputFormat.RDJSONL)):
            value = params.get(name)
            if not value:
                continue
            try:
                text = decode_param(value, name)
            except DecodeError as exc:
                logger.warning("%s", exc)
                state.error = str(exc)
            else:
                state.load(text, fmt)
            break
        return state

    def to_query_params(self) -> str:
        return encode_query(self.raw_text, self.format, self.base_path)

    # -- rendering boundary --------------------------------------------------

    def snapshot(self) -> ViewerSnapshot:
        if self.collection is None:
            return ViewerSnapshot(
                collection=None,
                error=self.error,
                facets=Facets(),
                filter=self.filter,
                stats=None,
                diagnostics=[],
                cards=[],
            )
        diagnostics = self.collection.diagnostics
        visible = apply_filter(diagnostics, self.filter)
        return ViewerSnapshot(
            collection=self.collection,
            error=self.error,
            facets=facets(diagnostics),
            filter=self.filter,
            stats=aggregate(diagnostics),
            diagnostics=visible,
            cards=[build_card(d, self.base_path) for d in visible],
        )
