"""Location resolution: file links with line anchors, and human-readable ranges."""

from __future__ import annotations

import re

from rdjson_viewer.models.diagnostic import Location, Range

_LINE_ANCHOR_RE = re.compile(r"#L(\d+)(?:-L(\d+))?$")


def resolve_link(location: Location | None, base_path: str | None) -> str | None:
    """Build ``<base_path>/<path>[#L<start>[-L<end>]]`` for a location.

    Returns ``None`` without a base path or without a file path.  Line
    numbers use truthiness, so a line of ``0`` is treated as absent.
    Columns never appear in links.
    """
    if not base_path or location is None or not location.path:
        return None
    link = f"{base_path}/{location.path}"
    rng = location.range
    start = rng.start if rng else None
    if start is not None and start.line:
        link += f"#L{start.line}"
        end = rng.end if rng else None
        if end is not None and end.line and end.line != start.line:
            link += f"-L{end.line}"
    return link


def parse_line_anchor(link: str) -> tuple[int, int | None] | None:
    """Recover ``(start_line, end_line)`` from a link built by :func:`resolve_link`."""
    match = _LINE_ANCHOR_RE.search(link)
    if match is None:
        return None
    end = match.group(2)
    return int(match.group(1)), int(end) if end is not None else None


def format_range(rng: Range | None) -> str | None:
    """Render a range as ``3:1 - 7:2``, ``3:1-10`` (same line) or ``3``.

    Unlike links, any non-null number is printed, including ``0``.
    Returns ``None`` when there is nothing to show.
    """
    if rng is None:
        return None
    start_line = rng.start.line if rng.start else None
    start_column = rng.start.column if rng.start else None
    end_line = rng.end.line if rng.end else None
    end_column = rng.end.column if rng.end else None

    text = ""
    if start_line is not None:
        text += str(start_line)
        if start_column is not None:
            text += f":{start_column}"

    if end_line is not None and (end_line != start_line or start_line is None):
        if text:
            text += " - "
        text += str(end_line)
        if end_column is not None:
            text += f":{end_column}"
    elif end_column is not None and end_column != start_column:
        text += f"-{end_column}"

    return text or None
