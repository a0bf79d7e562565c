"""Browser viewer."""
