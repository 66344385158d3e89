"""Persistence: store protocols, in-memory store and SQLAlchemy repositories."""
