"""Textual screen and rich renderers."""
