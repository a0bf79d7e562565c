"""REST API for the rdjson viewer."""
