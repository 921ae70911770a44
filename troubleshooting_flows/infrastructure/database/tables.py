"""
Database Table Definitions.

This module defines the SQL schema using SQLModel.
We use the 'DBModel' suffix to distinguish these persistence models
from the domain models (FlowGraph, PinnedPosition).
"""

from datetime import datetime

from sqlmodel import Field, SQLModel


class KeyValueDBModel(SQLModel, table=True):
    """
    Persistence model for scoped key-value entries (authoring drafts,
    the saved admin key).
    """

    __tablename__ = "kv_entries"

    scope: str = Field(primary_key=True)
    key: str = Field(primary_key=True)

    # Opaque text; drafts store the encoded flow JSON.
    value: str

    updated_at: datetime = Field(default_factory=datetime.utcnow)
