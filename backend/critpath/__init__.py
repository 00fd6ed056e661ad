"""Critpath - task service with Critical Path Method scheduling."""

__version__ = "0.1.0"
