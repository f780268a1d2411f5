"""Diff parsing, review state transitions and the review document format."""
