"""Persistence-related exceptions."""


class PersistenceError(Exception):
    """Base exception for persistence-related errors."""


class DatabaseError(PersistenceError):
    """Database operation error."""


class SnapshotReadError(PersistenceError):
    """A stored snapshot exists but cannot be read or decoded."""


class SnapshotWriteError(PersistenceError):
    """A snapshot could not be written."""
