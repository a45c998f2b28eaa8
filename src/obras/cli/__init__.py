"""Obras command-line interface."""
