"""Renderers: static PNG and self-contained HTML."""
