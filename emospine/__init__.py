"""Emotional spine: layout and relationship graphs for annotated story scenes."""
