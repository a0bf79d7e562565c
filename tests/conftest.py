"""Shared test fixtures for the rdjson viewer."""

from __future__ import annotations

import pytest

from rdjson_viewer.parser.loader import ReportLoader
from rdjson_viewer.parser.validator import ReportValidator
from rdjson_viewer.service.session_manager import SessionManager


@pytest.fixture
def loader() -> ReportLoader:
    return ReportLoader()


@pytest.fixture
def validator() -> ReportValidator:
    return ReportValidator()


@pytest.fixture
def session_manager() -> SessionManager:
    """SessionManager with long TTL and no cleanup thread (for tests)."""
    return SessionManager(ttl_seconds=3600, cleanup_interval=9999)


BASE_PATH = "https://github.com/acme/app/blob/main"

# Four diagnostics from three tools: two ERRORs, one WARNING, one INFO.
# Severity encounter order is WARNING, ERROR, INFO on purpose.
SAMPLE_RDJSON = """\
{
  "source": {"name": "multi", "url": "https://example.com"},
  "diagnostics": [
    {
      "message": "exported function Foo should have comment",
      "severity": "WARNING",
      "source": {"name": "golint"},
      "code": {"value": "exported", "url": "https://example.com/rules/exported"},
      "location": {
        "path": "pkg/foo.go",
        "range": {"start": {"line": 12, "column": 1}, "end": {"line": 12, "column": 9}}
      }
    },
    {
      "message": "undefined: bar",
      "severity": "ERROR",
      "source": {"name": "typecheck"},
      "code": {"value": "UndeclaredName"},
      "location": {
        "path": "main.go",
        "range": {"start": {"line": 3, "column": 5}, "end": {"line": 7, "column": 2}}
      },
      "suggestions": [
        {
          "range": {"start": {"line": 3, "column": 5}, "end": {"line": 3, "column": 8}},
          "text": "baz"
        }
      ],
      "related_locations": [
        {
          "message": "baz declared here",
          "location": {"path": "baz.go", "range": {"start": {"line": 20}}}
        }
      ]
    },
    {
      "message": "ineffectual assignment to err",
      "severity": "ERROR",
      "source": {"name": "ineffassign"},
      "location": {"path": "main.go", "range": {"start": {"line": 40}}}
    },
    {
      "message": "consider preallocating slice",
      "severity": "INFO",
      "source": {"name": "golint"},
      "code": {"value": "prealloc"}
    }
  ]
}
"""

SAMPLE_RDJSONL = """\
{"message": "a", "severity": "WARNING", "source": {"name": "golint"}}

{"message": "b", "severity": "ERROR", "source": {"name": "vet"}, "location": {"path": "f.go", "range": {"start": {"line": 5}, "end": {"line": 5}}}}

"""  # noqa: E501

MINIMAL_RDJSON = '{"diagnostics":[{"message":"x","severity":"ERROR"}]}'
