"""Command-line sub-applications for widgetboard."""
