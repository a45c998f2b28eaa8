"""Obras — construction project tracking for a multi-site distribution company."""
