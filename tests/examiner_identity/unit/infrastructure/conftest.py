"""Fixtures for infrastructure unit tests (in-memory SQLite)."""

from tests.shared.fixtures.sqlite import sqlite_engine, sqlite_session

__all__ = ["sqlite_engine", "sqlite_session"]
