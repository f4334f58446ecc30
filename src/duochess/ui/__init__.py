"""Presentation-layer integration (PyQt6)."""
