"""Relational persistence: engine, models, repositories and migrations."""
