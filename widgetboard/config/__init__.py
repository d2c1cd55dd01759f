"""Configuration for widgetboard."""
