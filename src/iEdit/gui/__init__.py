"""Presentation-side controllers, scheduling and signals."""
