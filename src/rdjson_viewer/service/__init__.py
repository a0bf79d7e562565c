"""Filtering, statistics, viewer state and sessions."""
