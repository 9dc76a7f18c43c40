"""Append-only audit sinks for admitted submissions."""
