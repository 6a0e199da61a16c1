"""
Database init - declarative base exports
"""

from .base import Base, TimestampMixin, utcnow

__all__ = ["Base", "TimestampMixin", "utcnow"]
