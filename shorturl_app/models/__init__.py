"""
Data models for the URL shortener.

There is a single persisted entity, the Record, kept in whichever storage
backend is configured.
"""

from .record import Record

__all__ = ["Record"]
