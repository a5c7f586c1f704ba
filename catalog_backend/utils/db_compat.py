"""
Database compatibility helpers for SQLite and PostgreSQL.
"""
from sqlalchemy import Table, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.sql import ColumnElement


def insert_skip_duplicates(table: Table, dialect_name: str):
    """INSERT that silently skips rows violating a unique constraint.

    Without a unique constraint on the table nothing conflicts, so every
    row is inserted.
    """
    if dialect_name == "sqlite":
        return sqlite.insert(table).on_conflict_do_nothing()
    if dialect_name == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    return insert(table)


def contains_insensitive(column, value: str) -> ColumnElement:
    """Case-insensitive substring match; % and _ in value are literal."""
    return column.icontains(value, autoescape=True)
