"""Shared utilities for widgetboard."""
