"""Portable matching helpers for JSON array columns.

PostgreSQL and SQLite both render a JSON array cast to text as
``["a", "b"]``, so a quoted LIKE pattern narrows rows in SQL. Callers
confirm exact matches in Python.
"""
from __future__ import annotations

from sqlalchemy import String, cast, func
from sqlalchemy.sql.elements import ColumnElement


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def json_array_contains(column, value: str) -> ColumnElement[bool]:
    """Case-insensitive test that ``value`` is an element of the array."""
    pattern = f'%"{_escape_like(value.strip().lower())}"%'
    return func.lower(cast(column, String)).like(pattern, escape="\\")


def json_array_mentions(column, term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match against any element of the array."""
    pattern = f"%{_escape_like(term.strip().lower())}%"
    return func.lower(cast(column, String)).like(pattern, escape="\\")


def text_mentions(column, term: str) -> ColumnElement[bool]:
    pattern = f"%{_escape_like(term.strip())}%"
    return column.ilike(pattern, escape="\\")
