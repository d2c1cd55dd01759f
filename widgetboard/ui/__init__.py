"""Textual user interface for widgetboard."""
