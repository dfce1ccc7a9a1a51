"""Bracket state analysis for elimination tournaments."""
