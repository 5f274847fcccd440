"""Shared utilities: time helpers, dictionary merging and file I/O."""
