"""
widgetboard - personal dashboard builder
"""

__version__ = "0.3.0"
