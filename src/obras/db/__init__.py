"""Obras snapshot database layer."""

from obras.db.connection import Database
from obras.db.migrations import MIGRATIONS, run_migrations
from obras.db.repository import Repository
from obras.db.schema import CURRENT_VERSION, initialize

__all__ = [
    "Database",
    "Repository",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "CURRENT_VERSION",
]
