"""Target tables the sync tests seed into."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, Integer, MetaData, String, Table, Text

target_metadata = MetaData()

users_table = Table(
    "users",
    target_metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
    Column("role", String),
    Column("active", Boolean),
    Column("age", Integer),
    sqlite_autoincrement=True,
)

posts_table = Table(
    "posts",
    target_metadata,
    Column("id", Integer, primary_key=True),
    Column("author", Integer, ForeignKey("users.id")),
    Column("title", String),
    Column("body", Text),
    sqlite_autoincrement=True,
)
