"""
Database Connection Manager.

This module handles the low-level details of connecting to the local
key-value database. It exposes the SQLModel engine used by the Repositories.
"""

from sqlmodel import create_engine, SQLModel
from ...config import settings

# echo=False to avoid leaking stored credentials in logs
engine = create_engine(settings.DATABASE_URL, echo=False)


def init_db(db_engine=None):
    """
    Idempotent initialization.
    Creates tables if they do not exist.
    """
    SQLModel.metadata.create_all(db_engine or engine)
