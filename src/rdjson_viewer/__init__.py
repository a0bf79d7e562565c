"""rdjson viewer: parse, validate, filter and render diagnostic reports."""

__version__ = "0.3.0"
